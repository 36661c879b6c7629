"""
tests.test_listing

Scope-filtered user listing with cursor pagination.
"""

from __future__ import annotations

import pytest

from role_hierarchy.auth.models import CallerContext
from role_hierarchy.db.repositories.users import UserRepo
from role_hierarchy.errors import ValidationError
from role_hierarchy.models import User
from role_hierarchy.services.listing_service import ListingService

ROOT = CallerContext(subject_id="root@system.app", role_ids=frozenset(), is_root_admin=True)


@pytest.fixture
def listing(store, policy, settings) -> ListingService:
    return ListingService(store=store, policy=policy, settings=settings)


async def _populate(store, caller_email: str) -> None:
    repo = UserRepo(store)
    await repo.put(User(email=caller_email, name="Caller", roles=("B",)))
    for i in range(24):
        await repo.put(User(email=f"user{i:02d}@example.com", name=f"User {i}", roles=("C",)))
    # Out of scope for a caller holding {B}.
    await repo.put(User(email="alpha@example.com", name="Alpha", roles=("A",)))


async def _collect(listing: ListingService, caller: CallerContext, *, limit: int) -> list[list[str]]:
    pages: list[list[str]] = []
    cursor = None
    while True:
        page = await listing.list_users(caller, limit=limit, cursor=cursor)
        pages.append([u.email for u in page.users])
        if page.next_cursor is None:
            return pages
        cursor = page.next_cursor


@pytest.mark.asyncio
@pytest.mark.parametrize("caller_email", ["b@example.com", "zz@example.com"])
async def test_pages_cover_every_eligible_user_except_caller(
    listing: ListingService, store, tree, caller_email: str
) -> None:
    await _populate(store, caller_email)
    caller = CallerContext(subject_id=caller_email, role_ids=frozenset({"B"}))

    pages = await _collect(listing, caller, limit=20)

    assert len(pages[0]) == 20
    seen = [email for page in pages for email in page]
    assert len(seen) == 24
    assert len(set(seen)) == 24
    assert caller_email not in seen
    assert "alpha@example.com" not in seen


@pytest.mark.asyncio
async def test_root_admin_sees_everyone_but_itself(listing: ListingService, store, tree) -> None:
    await _populate(store, "b@example.com")
    await UserRepo(store).put(User(email=ROOT.subject_id, name="Root", roles=(), is_root_admin=True))

    seen = [e for page in await _collect(listing, ROOT, limit=7) for e in page]

    assert ROOT.subject_id not in seen
    assert len(seen) == 26


@pytest.mark.asyncio
async def test_caller_without_scope_gets_empty_page(listing: ListingService, store, tree) -> None:
    await _populate(store, "b@example.com")
    nobody = CallerContext(subject_id="nobody@example.com", role_ids=frozenset())

    page = await listing.list_users(nobody, limit=10)

    assert page.users == []
    assert page.next_cursor is None


@pytest.mark.asyncio
async def test_dangling_role_is_still_listed_for_its_holder(listing: ListingService, store) -> None:
    # The caller holds a role with no record; users sharing it are still in scope.
    await UserRepo(store).put(User(email="peer@example.com", name="Peer", roles=("GONE",)))
    caller = CallerContext(subject_id="me@example.com", role_ids=frozenset({"GONE"}))

    page = await listing.list_users(caller, limit=5)

    assert [u.email for u in page.users] == ["peer@example.com"]


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -1, 1001])
async def test_limit_bounds(listing: ListingService, tree, limit: int) -> None:
    with pytest.raises(ValidationError):
        await listing.list_users(ROOT, limit=limit)


@pytest.mark.asyncio
async def test_garbage_cursor_is_rejected(listing: ListingService, tree) -> None:
    with pytest.raises(ValidationError):
        await listing.list_users(ROOT, limit=5, cursor="not-a-cursor!!")
