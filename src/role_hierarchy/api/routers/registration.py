"""
role_hierarchy.api.routers.registration

Pre-approved self registration endpoint.

Responsibilities:
- Read the shared API key from the `x-api-key` header.
- Answer 201 for a new login account and 200 when one already existed.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Response
from starlette import status

from role_hierarchy.api.deps import registration_service_dep
from role_hierarchy.api.schemas import RegistrationRequest, RegistrationResponse
from role_hierarchy.services.registration import RegistrationOutcome, RegistrationService

router = APIRouter(prefix="/v1/auth", tags=["auth"])


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegistrationRequest,
    response: Response,
    x_api_key: str | None = Header(default=None),
    registration: RegistrationService = Depends(registration_service_dep),
) -> RegistrationResponse:
    outcome = await registration.register(
        api_key=x_api_key, email=body.email, password=body.password
    )
    if outcome is RegistrationOutcome.already_registered:
        response.status_code = status.HTTP_200_OK
    return RegistrationResponse(status=str(outcome))
