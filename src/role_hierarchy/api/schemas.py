"""
role_hierarchy.api.schemas

Pydantic request/response models for the HTTP API.

Responsibilities:
- Define the camelCase JSON contract.
- Convert domain records into response models.

Request fields are optional at this layer: presence and emptiness checks
happen in the services so every entry point reports the same messages.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from role_hierarchy.models import Role, User


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RoleCreateRequest(ApiModel):
    role_type: str | None = None
    name: str | None = None
    parent_id: str | None = None


class RoleUpdateRequest(ApiModel):
    name: str | None = None
    role_type: str | None = None
    parent_id: str | None = None


class RoleOut(ApiModel):
    id: str
    role_type: str
    name: str
    parent_id: str

    @classmethod
    def from_role(cls, role: Role) -> RoleOut:
        return cls(id=role.id, role_type=role.role_type, name=role.name, parent_id=role.parent_id)


class RoleListResponse(ApiModel):
    roles: list[RoleOut]


class UserCreateRequest(ApiModel):
    email: str | None = None
    name: str | None = None
    roles: list[str] | None = None


class UserUpdateRequest(ApiModel):
    name: str | None = None
    roles: list[str] | None = None


class UserOut(ApiModel):
    email: str
    name: str
    roles: list[str]
    is_root_admin: bool = False

    @classmethod
    def from_user(cls, user: User) -> UserOut:
        return cls(
            email=user.email,
            name=user.name,
            roles=list(user.roles),
            is_root_admin=user.is_root_admin,
        )


class UserPageResponse(ApiModel):
    users: list[UserOut]
    next_cursor: str | None = None


class UserDeletionResponse(ApiModel):
    status: str
    kind: str | None = None
    message: str | None = None


class SummaryResponse(ApiModel):
    role_count: int
    user_count: int


class RegistrationRequest(ApiModel):
    email: str | None = None
    password: str | None = Field(default=None, repr=False)


class RegistrationResponse(ApiModel):
    status: str


class DevTokenRequest(ApiModel):
    email: str = Field(min_length=1, max_length=256)
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(ApiModel):
    access_token: str
    token_type: str = "bearer"
