"""
role_hierarchy.db.repositories.users

Repository for `User` records, including role-filtered pages.
"""

from __future__ import annotations

from collections.abc import Iterable

from role_hierarchy.db.store import RoleMembershipFilter, StoreClient, Table
from role_hierarchy.models import User


class UserRepo:
    def __init__(self, store: StoreClient) -> None:
        self._store = store

    async def get(self, email: str) -> User | None:
        item = await self._store.get(Table.users, email)
        return User.from_item(item) if item is not None else None

    async def put(self, user: User) -> User:
        # Upsert on email: an existing record is replaced wholesale.
        await self._store.put(Table.users, user.to_item())
        return user

    async def delete(self, email: str) -> None:
        await self._store.delete(Table.users, email)

    async def scan(
        self,
        *,
        limit: int,
        cursor: str | None = None,
        holding_any_of: Iterable[str] | None = None,
    ) -> tuple[list[User], str | None]:
        flt = None
        if holding_any_of is not None:
            flt = RoleMembershipFilter(role_ids=frozenset(holding_any_of))
        page = await self._store.scan(Table.users, filter=flt, limit=limit, cursor=cursor)
        return [User.from_item(i) for i in page.items], page.next_cursor

    def cursor_after(self, user: User) -> str:
        return self._store.cursor_after(Table.users, user.to_item())
