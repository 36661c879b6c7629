"""
role_hierarchy.models

Directory domain models.

Responsibilities:
- Define the immutable `Role` and `User` records exchanged between layers.
- Convert to/from the logical store item shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Role:
    id: str
    role_type: str
    name: str
    parent_id: str

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> Role:
        return cls(
            id=str(item["id"]),
            role_type=str(item["role_type"]),
            name=str(item["name"]),
            parent_id=str(item["parent_id"]),
        )

    def to_item(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role_type": self.role_type,
            "name": self.name,
            "parent_id": self.parent_id,
        }


@dataclass(frozen=True, slots=True)
class User:
    email: str
    name: str
    roles: tuple[str, ...]
    is_root_admin: bool = False

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> User:
        return cls(
            email=str(item["email"]),
            name=str(item["name"]),
            roles=tuple(str(r) for r in item.get("roles") or ()),
            is_root_admin=bool(item.get("is_root_admin", False)),
        )

    def to_item(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "name": self.name,
            "roles": list(self.roles),
            "is_root_admin": self.is_root_admin,
        }


# --- Module Notes -----------------------------------------------------------
# Role order inside `User.roles` is preserved for display only; permission checks
# and the root-admin freeze compare role sets.
