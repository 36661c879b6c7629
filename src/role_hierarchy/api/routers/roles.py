"""
role_hierarchy.api.routers.roles

Role Directory endpoints.

Responsibilities:
- Create/read/update/delete roles for the authenticated caller.
- List every role, or only the roles the caller may assign to users.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette import status

from role_hierarchy.api.deps import role_directory_dep
from role_hierarchy.api.schemas import (
    RoleCreateRequest,
    RoleListResponse,
    RoleOut,
    RoleUpdateRequest,
)
from role_hierarchy.auth.deps import get_caller
from role_hierarchy.auth.models import CallerContext
from role_hierarchy.services.role_directory import RoleDirectory

router = APIRouter(prefix="/v1/roles", tags=["roles"])


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
async def create_role(
    body: RoleCreateRequest,
    caller: CallerContext = Depends(get_caller),
    roles: RoleDirectory = Depends(role_directory_dep),
) -> RoleOut:
    role = await roles.create_role(
        caller, role_type=body.role_type, name=body.name, parent_id=body.parent_id
    )
    return RoleOut.from_role(role)


@router.get("", response_model=RoleListResponse)
async def list_roles(
    caller: CallerContext = Depends(get_caller),
    roles: RoleDirectory = Depends(role_directory_dep),
) -> RoleListResponse:
    return RoleListResponse(roles=[RoleOut.from_role(r) for r in await roles.list_roles()])


# Declared before `/{role_id}` so "assignable" is not captured as an id.
@router.get("/assignable", response_model=RoleListResponse)
async def assignable_roles(
    caller: CallerContext = Depends(get_caller),
    roles: RoleDirectory = Depends(role_directory_dep),
) -> RoleListResponse:
    assignable = await roles.assignable_roles(caller)
    return RoleListResponse(roles=[RoleOut.from_role(r) for r in assignable])


@router.get("/{role_id}", response_model=RoleOut)
async def get_role(
    role_id: str,
    caller: CallerContext = Depends(get_caller),
    roles: RoleDirectory = Depends(role_directory_dep),
) -> RoleOut:
    return RoleOut.from_role(await roles.get_role(role_id))


@router.put("/{role_id}", response_model=RoleOut)
async def update_role(
    role_id: str,
    body: RoleUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    roles: RoleDirectory = Depends(role_directory_dep),
) -> RoleOut:
    role = await roles.update_role(
        caller, role_id, name=body.name, role_type=body.role_type, parent_id=body.parent_id
    )
    return RoleOut.from_role(role)


@router.delete("/{role_id}")
async def delete_role(
    role_id: str,
    caller: CallerContext = Depends(get_caller),
    roles: RoleDirectory = Depends(role_directory_dep),
) -> dict[str, str]:
    await roles.delete_role(caller, role_id)
    return {}
