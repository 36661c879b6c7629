"""
role_hierarchy.db.store

Store Client boundary and its SQLAlchemy implementation.

Responsibilities:
- Define the key-value style `StoreClient` protocol consumed by the core:
  point lookups, upserts, deletes, children-by-parent index lookups and
  cursor-paginated scans with an optional "roles intersect" filter.
- Implement it over an async sessionmaker (`SqlStoreClient`), one session per call.
- Turn backing-store failures into `StorageError` instead of empty results.
- Provide exhaustive scan/count helpers built on the paginated scan.
"""

from __future__ import annotations

import base64
import binascii
import enum
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from role_hierarchy.db.models import RoleRow, UserRoleLink, UserRow
from role_hierarchy.errors import StorageError, ValidationError
from role_hierarchy.observability.logging import get_logger

log = get_logger(__name__)

Item = dict[str, Any]


class Table(enum.StrEnum):
    roles = "roles"
    users = "users"


@dataclass(frozen=True, slots=True)
class RoleMembershipFilter:
    """Matches user items whose `roles` intersect `role_ids`."""

    role_ids: frozenset[str]


@dataclass(frozen=True, slots=True)
class ScanPage:
    items: list[Item] = field(default_factory=list)
    next_cursor: str | None = None


class StoreClient(Protocol):
    async def get(self, table: Table, key: str) -> Item | None: ...

    async def put(self, table: Table, item: Item) -> None: ...

    async def delete(self, table: Table, key: str) -> None: ...

    async def query_children(self, parent_id: str) -> list[Item]: ...

    async def scan(
        self,
        table: Table,
        *,
        filter: RoleMembershipFilter | None = None,
        limit: int,
        cursor: str | None = None,
    ) -> ScanPage: ...

    def cursor_after(self, table: Table, item: Item) -> str: ...

    async def ping(self) -> None: ...


_KEY_FIELD = {Table.roles: "id", Table.users: "email"}


def encode_cursor(table: Table, key: str) -> str:
    raw = json.dumps({"t": table.value, "k": key}, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(table: Table, cursor: str) -> str:
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise ValidationError("Invalid cursor") from e
    if not isinstance(payload, dict) or payload.get("t") != table.value:
        raise ValidationError("Invalid cursor")
    key = payload.get("k")
    if not isinstance(key, str):
        raise ValidationError("Invalid cursor")
    return key


def _role_item(row: RoleRow) -> Item:
    return {
        "id": row.id,
        "role_type": row.role_type,
        "name": row.name,
        "parent_id": row.parent_id,
    }


def _user_item(row: UserRow) -> Item:
    return {
        "email": row.email,
        "name": row.name,
        "roles": [link.role_id for link in row.role_links],
        "is_root_admin": row.is_root_admin,
    }


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class SqlStoreClient:
    """
    StoreClient over SQLAlchemy async.

    Holds only the session factory, so a single instance is shared by all
    concurrent requests.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            log.error("store.failure", operation=operation, error=str(e))
            raise StorageError(f"Backing store failure during {operation}") from e

    async def get(self, table: Table, key: str) -> Item | None:
        async with self._session(f"get:{table}") as session:
            if table is Table.roles:
                role = await session.get(RoleRow, key)
                return _role_item(role) if role is not None else None
            user = await session.get(UserRow, key)
            return _user_item(user) if user is not None else None

    async def put(self, table: Table, item: Item) -> None:
        async with self._session(f"put:{table}") as session:
            if table is Table.roles:
                await session.merge(
                    RoleRow(
                        id=item["id"],
                        role_type=item["role_type"],
                        name=item["name"],
                        parent_id=item["parent_id"],
                    )
                )
            else:
                await self._put_user(session, item)
            await session.commit()

    async def _put_user(self, session: AsyncSession, item: Item) -> None:
        row = await session.get(UserRow, item["email"])
        if row is None:
            row = UserRow(email=item["email"], name=item["name"], role_links=[])
            session.add(row)
        row.name = item["name"]
        row.is_root_admin = bool(item.get("is_root_admin", False))
        # Reuse surviving link rows so re-assigned roles never collide on the PK.
        current = {link.role_id: link for link in row.role_links}
        row.role_links = [
            current.get(role_id) or UserRoleLink(role_id=role_id)
            for role_id in _dedupe(list(item["roles"]))
        ]
        for position, link in enumerate(row.role_links):
            link.position = position

    async def delete(self, table: Table, key: str) -> None:
        async with self._session(f"delete:{table}") as session:
            model = RoleRow if table is Table.roles else UserRow
            row = await session.get(model, key)
            if row is None:
                return
            await session.delete(row)
            await session.commit()

    async def query_children(self, parent_id: str) -> list[Item]:
        async with self._session("query_children") as session:
            stmt = select(RoleRow).where(RoleRow.parent_id == parent_id).order_by(RoleRow.id)
            rows = (await session.execute(stmt)).scalars().all()
            return [_role_item(r) for r in rows]

    async def scan(
        self,
        table: Table,
        *,
        filter: RoleMembershipFilter | None = None,
        limit: int,
        cursor: str | None = None,
    ) -> ScanPage:
        if limit < 1:
            raise ValueError("scan limit must be positive")
        after = decode_cursor(table, cursor) if cursor else None

        async with self._session(f"scan:{table}") as session:
            if table is Table.roles:
                if filter is not None:
                    raise ValueError("role membership filters apply to the users table only")
                key_col = RoleRow.id
                stmt = select(RoleRow)
            else:
                key_col = UserRow.email
                stmt = select(UserRow)
                if filter is not None:
                    members = select(UserRoleLink.email).where(
                        UserRoleLink.role_id.in_(sorted(filter.role_ids))
                    )
                    stmt = stmt.where(UserRow.email.in_(members))
            if after is not None:
                stmt = stmt.where(key_col > after)
            # One extra row tells us whether another page exists.
            stmt = stmt.order_by(key_col).limit(limit + 1)
            rows = list((await session.execute(stmt)).scalars().all())

            to_item = _role_item if table is Table.roles else _user_item
            items = [to_item(r) for r in rows[:limit]]

        next_cursor = None
        if len(rows) > limit:
            next_cursor = self.cursor_after(table, items[-1])
        return ScanPage(items=items, next_cursor=next_cursor)

    def cursor_after(self, table: Table, item: Item) -> str:
        return encode_cursor(table, item[_KEY_FIELD[table]])

    async def ping(self) -> None:
        async with self._session("ping") as session:
            await session.execute(text("SELECT 1"))


async def iter_scan(
    store: StoreClient,
    table: Table,
    *,
    page_size: int,
    filter: RoleMembershipFilter | None = None,
) -> AsyncIterator[Item]:
    # Follows cursors until the store reports no further page.
    cursor: str | None = None
    while True:
        page = await store.scan(table, filter=filter, limit=page_size, cursor=cursor)
        for item in page.items:
            yield item
        if not page.next_cursor:
            return
        cursor = page.next_cursor


async def count_items(
    store: StoreClient,
    table: Table,
    *,
    page_size: int,
    filter: RoleMembershipFilter | None = None,
) -> int:
    total = 0
    async for _ in iter_scan(store, table, page_size=page_size, filter=filter):
        total += 1
    return total


# --- Module Notes -----------------------------------------------------------
# Cursors are URL-safe base64 of {"t": table, "k": last key}; callers must treat
# them as opaque. Keyset pagination keeps resumption stable under inserts.
