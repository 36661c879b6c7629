"""
role_hierarchy.hierarchy.policy

Authorization Policy Evaluator.

Responsibilities:
- Compute the caller's manageable set (strict descendants of held roles) and
  accessible set (held roles plus their descendants).
- Answer allow/deny for each mutation kind. Root-admin callers are always allowed.

Two closures are used:
- role creation requires *direct* possession of the parent;
- every other mutation checks membership in the manageable set.
"""

from __future__ import annotations

from collections.abc import Iterable

from role_hierarchy.auth.models import CallerContext
from role_hierarchy.hierarchy.engine import RoleHierarchy


class PolicyEvaluator:
    def __init__(self, *, hierarchy: RoleHierarchy, top_level_parent_id: str) -> None:
        self._hierarchy = hierarchy
        self._top_level = top_level_parent_id

    async def manageable_set(self, caller: CallerContext) -> set[str]:
        return await self._hierarchy.descendants(caller.role_ids)

    async def accessible_set(self, caller: CallerContext) -> set[str]:
        return set(caller.role_ids) | await self._hierarchy.descendants(caller.role_ids)

    async def can_create_role(self, caller: CallerContext, parent_id: str) -> bool:
        if caller.is_root_admin:
            return True
        if parent_id == self._top_level:
            return False
        return parent_id in caller.role_ids

    async def can_update_role(
        self, caller: CallerContext, *, current_parent_id: str, new_parent_id: str
    ) -> bool:
        if caller.is_root_admin:
            return True
        if self._top_level in (current_parent_id, new_parent_id):
            return False
        manageable = await self.manageable_set(caller)
        return current_parent_id in manageable and new_parent_id in manageable

    async def can_delete_role(self, caller: CallerContext, role_id: str) -> bool:
        if caller.is_root_admin:
            return True
        return role_id in await self.manageable_set(caller)

    async def can_create_user(self, caller: CallerContext, roles: Iterable[str]) -> bool:
        if caller.is_root_admin:
            return True
        return set(roles) <= await self.manageable_set(caller)

    async def can_update_user(
        self,
        caller: CallerContext,
        *,
        current_roles: Iterable[str],
        new_roles: Iterable[str],
    ) -> bool:
        if caller.is_root_admin:
            return True
        current = set(current_roles)
        if not current:
            # A user without roles sits outside every subtree; only root manages it.
            return False
        return current | set(new_roles) <= await self.manageable_set(caller)

    async def can_delete_user(self, caller: CallerContext, roles: Iterable[str]) -> bool:
        if caller.is_root_admin:
            return True
        target = set(roles)
        if not target:
            return False
        return target <= await self.manageable_set(caller)


# --- Module Notes -----------------------------------------------------------
# Each `can_*` call computes its closure afresh: decisions never reuse hierarchy
# facts across operations.
