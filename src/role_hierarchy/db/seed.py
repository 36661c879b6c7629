"""
role_hierarchy.db.seed

Directory bootstrap data.

Responsibilities:
- Ensure the Root Role and the primary root-admin user exist.
- Stay idempotent: existing records are left untouched, so a renamed root
  admin keeps its new name across restarts.

Run standalone with `python -m role_hierarchy.db.seed` after migrations.
"""

from __future__ import annotations

import asyncio

from role_hierarchy.db.repositories.roles import RoleRepo
from role_hierarchy.db.repositories.users import UserRepo
from role_hierarchy.db.session import create_engine, create_sessionmaker
from role_hierarchy.db.store import SqlStoreClient, StoreClient
from role_hierarchy.models import Role, User
from role_hierarchy.observability.logging import configure_logging, get_logger
from role_hierarchy.settings import Settings, get_settings

log = get_logger(__name__)

ROOT_ROLE_TYPE = "System"
ROOT_ROLE_NAME = "Root"


async def seed_directory(store: StoreClient, settings: Settings) -> None:
    roles = RoleRepo(store)
    users = UserRepo(store)

    if await roles.get(settings.root_role_id) is None:
        await roles.put(
            Role(
                id=settings.root_role_id,
                role_type=ROOT_ROLE_TYPE,
                name=ROOT_ROLE_NAME,
                parent_id=settings.top_level_parent_id,
            )
        )
        log.info("seed.root_role_created", role_id=settings.root_role_id)

    if await users.get(settings.root_admin_email) is None:
        # Holding the Root Role gives the admin a non-empty role set, which
        # name-only updates of this record require.
        await users.put(
            User(
                email=settings.root_admin_email,
                name=settings.root_admin_name,
                roles=(settings.root_role_id,),
                is_root_admin=True,
            )
        )
        log.info("seed.root_admin_created", email=settings.root_admin_email)


async def _run(settings: Settings) -> None:
    engine = create_engine(settings)
    try:
        await seed_directory(SqlStoreClient(create_sessionmaker(engine)), settings)
    finally:
        await engine.dispose()


def main() -> None:
    settings = get_settings()
    configure_logging(service_name=settings.service_name, level=settings.log_level, env=settings.env)
    asyncio.run(_run(settings))


if __name__ == "__main__":
    main()
