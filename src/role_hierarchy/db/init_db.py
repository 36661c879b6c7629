"""
role_hierarchy.db.init_db

Schema bootstrap for local development and tests.

Responsibilities:
- Create the roles/users/user_roles tables when missing.
- Seed the protected directory records on top of a fresh schema.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from role_hierarchy.db import models  # noqa: F401  # registers tables on Base.metadata
from role_hierarchy.db.base import Base
from role_hierarchy.db.seed import seed_directory
from role_hierarchy.db.store import StoreClient
from role_hierarchy.settings import Settings


async def init_db(engine: AsyncEngine, *, store: StoreClient, settings: Settings) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await seed_directory(store, settings)


# --- Module Notes -----------------------------------------------------------
# Production runs Alembic migrations and then `python -m role_hierarchy.db.seed`.
