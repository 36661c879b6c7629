"""
role_hierarchy.services.role_directory

Role Directory service.

Responsibilities:
- Create, update, delete and read roles.
- Guard the Root Role and reject deletion of roles that still have children.
- Delegate every permission decision to the `PolicyEvaluator`.
"""

from __future__ import annotations

import uuid

from role_hierarchy.auth.models import CallerContext
from role_hierarchy.db.repositories.roles import RoleRepo
from role_hierarchy.db.store import StoreClient
from role_hierarchy.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ProtectedEntityError,
    ValidationError,
)
from role_hierarchy.hierarchy.engine import RoleHierarchy
from role_hierarchy.hierarchy.policy import PolicyEvaluator
from role_hierarchy.models import Role
from role_hierarchy.observability.logging import get_logger
from role_hierarchy.settings import Settings

log = get_logger(__name__)


def _required(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"Role {field} (string) is required")
    return value.strip()


class RoleDirectory:
    def __init__(
        self,
        *,
        store: StoreClient,
        hierarchy: RoleHierarchy,
        policy: PolicyEvaluator,
        settings: Settings,
    ) -> None:
        self._roles = RoleRepo(store)
        self._hierarchy = hierarchy
        self._policy = policy
        self._settings = settings

    def _normalize_parent(self, parent_id: str | None) -> str:
        # null / missing / empty all mean "top level".
        if parent_id is None or not parent_id.strip():
            return self._settings.top_level_parent_id
        return parent_id.strip()

    async def create_role(
        self,
        caller: CallerContext,
        *,
        role_type: str | None,
        name: str | None,
        parent_id: str | None = None,
    ) -> Role:
        role_type = _required(role_type, "roleType")
        name = _required(name, "name")
        parent = self._normalize_parent(parent_id)

        if not await self._policy.can_create_role(caller, parent):
            log.info("role.create_denied", parent_id=parent)
            raise AuthorizationError(
                "Permission denied: you may only create roles directly under a role you hold"
            )
        if parent != self._settings.top_level_parent_id and await self._roles.get(parent) is None:
            raise NotFoundError(f"Specified parent role ({parent}) does not exist")

        role = Role(id=str(uuid.uuid4()), role_type=role_type, name=name, parent_id=parent)
        await self._roles.put(role)
        log.info("role.created", role_id=role.id, parent_id=parent)
        return role

    async def update_role(
        self,
        caller: CallerContext,
        role_id: str,
        *,
        name: str | None,
        role_type: str | None,
        parent_id: str | None = None,
    ) -> Role:
        if role_id == self._settings.root_role_id:
            raise ProtectedEntityError("Cannot modify the root system role")

        name = _required(name, "name")
        role_type = _required(role_type, "roleType")
        new_parent = self._normalize_parent(parent_id)
        if new_parent == role_id:
            raise ValidationError("A role cannot be its own parent")

        if new_parent != self._settings.top_level_parent_id:
            if await self._roles.get(new_parent) is None:
                raise NotFoundError(f"Specified parent role ({new_parent}) does not exist")

        existing = await self._roles.get(role_id)
        if existing is None:
            raise NotFoundError("Role not found")
        current_parent = existing.parent_id or self._settings.top_level_parent_id

        allowed = await self._policy.can_update_role(
            caller, current_parent_id=current_parent, new_parent_id=new_parent
        )
        if not allowed:
            log.info(
                "role.update_denied",
                role_id=role_id,
                current_parent_id=current_parent,
                new_parent_id=new_parent,
            )
            raise AuthorizationError(
                "Permission denied: cannot manage this role or assign it to the requested parent"
            )

        updated = Role(id=role_id, role_type=role_type, name=name, parent_id=new_parent)
        await self._roles.put(updated)
        log.info("role.updated", role_id=role_id, parent_id=new_parent)
        return updated

    async def delete_role(self, caller: CallerContext, role_id: str) -> None:
        if role_id == self._settings.root_role_id:
            raise ProtectedEntityError("Cannot delete the root system role")

        if await self._roles.get(role_id) is None:
            raise NotFoundError("Role not found")

        if not await self._policy.can_delete_role(caller, role_id):
            log.info("role.delete_denied", role_id=role_id)
            raise AuthorizationError("Permission denied: you do not have permission to delete this role")

        children = await self._hierarchy.children(role_id)
        if children:
            child_ids = [c.id for c in children]
            log.info("role.delete_blocked", role_id=role_id, child_role_ids=child_ids)
            raise ConflictError(
                "Cannot delete role: it has child roles associated with it",
                child_role_ids=child_ids,
            )

        # Users still referencing this role keep the dangling id.
        await self._roles.delete(role_id)
        log.info("role.deleted", role_id=role_id)

    async def get_role(self, role_id: str) -> Role:
        role = await self._roles.get(role_id)
        if role is None:
            raise NotFoundError("Role not found")
        return role

    async def list_roles(self) -> list[Role]:
        return [r async for r in self._roles.iter_all(page_size=self._settings.scan_page_size)]

    async def assignable_roles(self, caller: CallerContext) -> list[Role]:
        if caller.is_root_admin:
            return await self.list_roles()
        return await self._hierarchy.descendant_roles(caller.role_ids)


# --- Module Notes -----------------------------------------------------------
# `list_roles` applies no scope filter: any authenticated caller sees every role.
