"""
role_hierarchy.db.repositories.roles

Repository for `Role` records.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from role_hierarchy.db.store import ScanPage, StoreClient, Table, iter_scan
from role_hierarchy.models import Role


class RoleRepo:
    def __init__(self, store: StoreClient) -> None:
        self._store = store

    async def get(self, role_id: str) -> Role | None:
        item = await self._store.get(Table.roles, role_id)
        return Role.from_item(item) if item is not None else None

    async def put(self, role: Role) -> Role:
        await self._store.put(Table.roles, role.to_item())
        return role

    async def delete(self, role_id: str) -> None:
        await self._store.delete(Table.roles, role_id)

    async def children(self, parent_id: str) -> list[Role]:
        return [Role.from_item(i) for i in await self._store.query_children(parent_id)]

    async def scan(self, *, limit: int, cursor: str | None = None) -> ScanPage:
        return await self._store.scan(Table.roles, limit=limit, cursor=cursor)

    async def iter_all(self, *, page_size: int) -> AsyncIterator[Role]:
        async for item in iter_scan(self._store, Table.roles, page_size=page_size):
            yield Role.from_item(item)
