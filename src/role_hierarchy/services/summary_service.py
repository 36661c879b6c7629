"""
role_hierarchy.services.summary_service

Scope-aware aggregate counts.

Responsibilities:
- Root-admin: exhaustive paginated counts of every role and user.
- Everyone else: `role_count` over the manageable set, `user_count` over the
  accessible set (the caller's own roles count for users, not for roles).
"""

from __future__ import annotations

from dataclasses import dataclass

from role_hierarchy.auth.models import CallerContext
from role_hierarchy.db.store import RoleMembershipFilter, StoreClient, Table, count_items
from role_hierarchy.hierarchy.policy import PolicyEvaluator
from role_hierarchy.settings import Settings


@dataclass(frozen=True, slots=True)
class Summary:
    role_count: int
    user_count: int


class SummaryService:
    def __init__(
        self,
        *,
        store: StoreClient,
        policy: PolicyEvaluator,
        settings: Settings,
    ) -> None:
        self._store = store
        self._policy = policy
        self._page_size = settings.scan_page_size

    async def summary(self, caller: CallerContext) -> Summary:
        if caller.is_root_admin:
            return Summary(
                role_count=await count_items(self._store, Table.roles, page_size=self._page_size),
                user_count=await count_items(self._store, Table.users, page_size=self._page_size),
            )

        if not caller.role_ids:
            return Summary(role_count=0, user_count=0)

        manageable = await self._policy.manageable_set(caller)
        accessible = set(caller.role_ids) | manageable
        user_count = await count_items(
            self._store,
            Table.users,
            page_size=self._page_size,
            filter=RoleMembershipFilter(role_ids=frozenset(accessible)),
        )
        return Summary(role_count=len(manageable), user_count=user_count)
