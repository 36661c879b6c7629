"""
role_hierarchy.api.routers.users

User Directory and listing endpoints.

Responsibilities:
- Create/read/update/delete user records.
- Serve the scope-filtered, cursor-paginated user listing.
- Report identity cleanup failures on delete as a 207 partial success.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from starlette import status

from role_hierarchy.api.deps import listing_service_dep, settings_dep, user_directory_dep
from role_hierarchy.api.schemas import (
    UserCreateRequest,
    UserDeletionResponse,
    UserOut,
    UserPageResponse,
    UserUpdateRequest,
)
from role_hierarchy.auth.deps import get_caller
from role_hierarchy.auth.models import CallerContext
from role_hierarchy.services.listing_service import ListingService
from role_hierarchy.services.user_directory import UserDirectory
from role_hierarchy.settings import Settings

router = APIRouter(prefix="/v1/users", tags=["users"])


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreateRequest,
    caller: CallerContext = Depends(get_caller),
    users: UserDirectory = Depends(user_directory_dep),
) -> UserOut:
    user = await users.create_user(caller, email=body.email, name=body.name, roles=body.roles)
    return UserOut.from_user(user)


@router.get("", response_model=UserPageResponse)
async def list_users(
    limit: int | None = Query(default=None),
    cursor: str | None = Query(default=None),
    caller: CallerContext = Depends(get_caller),
    listing: ListingService = Depends(listing_service_dep),
    settings: Settings = Depends(settings_dep),
) -> UserPageResponse:
    page = await listing.list_users(
        caller,
        limit=settings.default_page_limit if limit is None else limit,
        cursor=cursor,
    )
    return UserPageResponse(
        users=[UserOut.from_user(u) for u in page.users],
        next_cursor=page.next_cursor,
    )


@router.get("/{email}", response_model=UserOut)
async def get_user(
    email: str,
    caller: CallerContext = Depends(get_caller),
    users: UserDirectory = Depends(user_directory_dep),
) -> UserOut:
    return UserOut.from_user(await users.get_user(email))


@router.put("/{email}", response_model=UserOut)
async def update_user(
    email: str,
    body: UserUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    users: UserDirectory = Depends(user_directory_dep),
) -> UserOut:
    user = await users.update_user(caller, email, name=body.name, roles=body.roles)
    return UserOut.from_user(user)


@router.delete("/{email}", response_model=UserDeletionResponse, response_model_exclude_none=True)
async def delete_user(
    email: str,
    caller: CallerContext = Depends(get_caller),
    users: UserDirectory = Depends(user_directory_dep),
) -> UserDeletionResponse | JSONResponse:
    result = await users.delete_user(caller, email)
    if result.degraded_kind is None:
        return UserDeletionResponse(status=str(result.status))

    body = UserDeletionResponse(
        status=str(result.status),
        kind=str(result.degraded_kind),
        message="User removed from the directory; identity account cleanup failed",
    )
    return JSONResponse(
        status_code=status.HTTP_207_MULTI_STATUS,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )
