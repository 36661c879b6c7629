"""
role_hierarchy.services.listing_service

Scope-filtered, cursor-paginated user listing.

Responsibilities:
- Root-admin: one page of the full user scan.
- Everyone else: users holding any role in the caller's accessible set.
- Never return the caller's own record.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from role_hierarchy.auth.models import CallerContext
from role_hierarchy.db.repositories.users import UserRepo
from role_hierarchy.db.store import StoreClient
from role_hierarchy.errors import ValidationError
from role_hierarchy.hierarchy.policy import PolicyEvaluator
from role_hierarchy.models import User
from role_hierarchy.observability.logging import get_logger
from role_hierarchy.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class UserPage:
    users: list[User] = field(default_factory=list)
    next_cursor: str | None = None


class ListingService:
    def __init__(
        self,
        *,
        store: StoreClient,
        policy: PolicyEvaluator,
        settings: Settings,
    ) -> None:
        self._users = UserRepo(store)
        self._policy = policy
        self._settings = settings

    async def list_users(
        self, caller: CallerContext, *, limit: int, cursor: str | None = None
    ) -> UserPage:
        if limit < 1 or limit > self._settings.max_page_limit:
            raise ValidationError(f"limit must be between 1 and {self._settings.max_page_limit}")
        cursor = cursor or None

        if caller.is_root_admin:
            users, next_cursor = await self._users.scan(limit=limit, cursor=cursor)
            return UserPage(
                users=[u for u in users if u.email != caller.subject_id],
                next_cursor=next_cursor,
            )

        accessible = await self._policy.accessible_set(caller)
        if not accessible:
            return UserPage()

        # One extra row covers the caller's own record being stripped below.
        users, next_cursor = await self._users.scan(
            limit=limit + 1, cursor=cursor, holding_any_of=accessible
        )
        visible = [u for u in users if u.email != caller.subject_id]
        if len(visible) > limit:
            # The caller was not on this page: resume right after the last
            # returned record so the dropped one is served next time.
            visible = visible[:limit]
            next_cursor = self._users.cursor_after(visible[-1])

        log.debug(
            "users.listed",
            returned=len(visible),
            accessible_roles=len(accessible),
            has_more=next_cursor is not None,
        )
        return UserPage(users=visible, next_cursor=next_cursor)


# --- Module Notes -----------------------------------------------------------
# Root-admin pages may hold `limit - 1` users when the caller's record falls on them.
