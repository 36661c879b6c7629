"""
role_hierarchy.api.routers.dev_auth

Development token minting.

Responsibilities:
- Issue a signed bearer token for a directory user so local callers can use
  the verified resolver without an external identity provider.
- Source `roles`/`root_admin` claims from the directory record, never from the
  request body.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_404_NOT_FOUND

from role_hierarchy.api.deps import settings_dep, user_directory_dep
from role_hierarchy.api.schemas import DevTokenRequest, DevTokenResponse
from role_hierarchy.auth.jwt import issue_token
from role_hierarchy.auth.resolvers import jwt_config
from role_hierarchy.observability.logging import get_logger
from role_hierarchy.services.user_directory import UserDirectory
from role_hierarchy.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/v1/dev", tags=["dev"])


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_dep),
    users: UserDirectory = Depends(user_directory_dep),
) -> DevTokenResponse:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    email = body.email.strip()
    user = await users.find_user(email)
    if user is None:
        # Unknown users still get a token, just without any privileges.
        log.info("dev_token.unknown_user", email=email)
        roles: list[str] = []
        root_admin = False
    else:
        roles = list(user.roles)
        root_admin = user.is_root_admin

    token = issue_token(
        cfg=jwt_config(settings),
        subject=email,
        roles=roles,
        root_admin=root_admin,
        ttl=timedelta(minutes=body.ttl_minutes),
    )
    return DevTokenResponse(access_token=token)
