"""
tests.conftest

Shared fixtures: a real SQLite directory per test (via aiosqlite in `tmp_path`)
and the core objects wired on top of it.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from role_hierarchy.db.base import Base
from role_hierarchy.db.repositories.roles import RoleRepo
from role_hierarchy.db.repositories.users import UserRepo
from role_hierarchy.db.session import create_engine, create_sessionmaker
from role_hierarchy.db.store import SqlStoreClient
from role_hierarchy.hierarchy.engine import RoleHierarchy
from role_hierarchy.hierarchy.policy import PolicyEvaluator
from role_hierarchy.identity.memory import InMemoryIdentityAccountStore
from role_hierarchy.models import Role, User
from role_hierarchy.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'directory.db'}",
        jwt_secret="test-secret",
        registration_api_key="test-registration-key",
        # Small pages so exhaustive scans cross several cursors.
        scan_page_size=2,
    )


@pytest_asyncio.fixture
async def store(settings: Settings) -> AsyncIterator[SqlStoreClient]:
    engine = create_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield SqlStoreClient(create_sessionmaker(engine))
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def tree(store: SqlStoreClient) -> dict[str, Role]:
    # A (top level) -> B -> C
    roles = {
        "A": Role(id="A", role_type="Division", name="Alpha", parent_id="ROOT"),
        "B": Role(id="B", role_type="Department", name="Beta", parent_id="A"),
        "C": Role(id="C", role_type="Team", name="Gamma", parent_id="B"),
    }
    repo = RoleRepo(store)
    for role in roles.values():
        await repo.put(role)
    return roles


@pytest_asyncio.fixture
async def user_u(store: SqlStoreClient, tree: dict[str, Role]) -> User:
    user = User(email="u@example.com", name="U", roles=("C",))
    await UserRepo(store).put(user)
    return user


@pytest.fixture
def hierarchy(store: SqlStoreClient, settings: Settings) -> RoleHierarchy:
    return RoleHierarchy(store=store, concurrency=settings.traversal_concurrency)


@pytest.fixture
def policy(hierarchy: RoleHierarchy, settings: Settings) -> PolicyEvaluator:
    return PolicyEvaluator(hierarchy=hierarchy, top_level_parent_id=settings.top_level_parent_id)


@pytest.fixture
def identity() -> InMemoryIdentityAccountStore:
    return InMemoryIdentityAccountStore()
