"""
role_hierarchy.services.user_directory

User Directory service.

Responsibilities:
- Create (upsert), update, delete and read user records.
- Freeze the root-admin user's role set while allowing renames.
- Coordinate user deletion with the external Identity Account Store as an
  ordered two-step sequence with an explicit partial-success status.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

from role_hierarchy.auth.models import CallerContext
from role_hierarchy.db.repositories.users import UserRepo
from role_hierarchy.db.store import StoreClient
from role_hierarchy.errors import (
    AuthorizationError,
    ErrorKind,
    NotFoundError,
    ProtectedEntityError,
    ValidationError,
)
from role_hierarchy.hierarchy.policy import PolicyEvaluator
from role_hierarchy.identity.interfaces import AccountDeletion, IdentityAccountStore
from role_hierarchy.models import User
from role_hierarchy.observability.logging import get_logger
from role_hierarchy.settings import Settings

log = get_logger(__name__)


class DeletionStatus(enum.StrEnum):
    fully_deleted = "fully-deleted"
    partially_deleted = "partially-deleted"


@dataclass(frozen=True, slots=True)
class UserDeletionResult:
    email: str
    status: DeletionStatus
    identity_outcome: AccountDeletion

    @property
    def degraded_kind(self) -> ErrorKind | None:
        if self.status is DeletionStatus.partially_deleted:
            return ErrorKind.identity_store_degraded
        return None


def _validated_roles(roles: Sequence[object] | None) -> list[str]:
    if roles is None or isinstance(roles, str):
        raise ValidationError("roles (string array) are required")
    cleaned: list[str] = []
    for role in roles:
        if not isinstance(role, str):
            raise ValidationError("roles (string array) are required")
        if role.strip() and role.strip() not in cleaned:
            cleaned.append(role.strip())
    if not cleaned:
        raise ValidationError("At least one role must be assigned")
    return cleaned


def _validated_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("User name (string) is required")
    return name.strip()


class UserDirectory:
    def __init__(
        self,
        *,
        store: StoreClient,
        policy: PolicyEvaluator,
        identity: IdentityAccountStore,
        settings: Settings,
    ) -> None:
        self._users = UserRepo(store)
        self._policy = policy
        self._identity = identity
        self._settings = settings

    def _is_root_admin_email(self, email: str) -> bool:
        return email == self._settings.root_admin_email

    async def create_user(
        self,
        caller: CallerContext,
        *,
        email: str | None,
        name: str | None,
        roles: Sequence[object] | None,
    ) -> User:
        if email is None or not email.strip():
            raise ValidationError("email is required")
        email = email.strip()
        name = _validated_name(name)
        role_ids = _validated_roles(roles)

        if self._is_root_admin_email(email):
            # An upsert here would replace the root-admin record and drop its root flag.
            raise ProtectedEntityError("Cannot overwrite the primary root admin user")

        if not await self._policy.can_create_user(caller, role_ids):
            log.info("user.create_denied", email=email, roles=role_ids)
            raise AuthorizationError("Cannot assign role outside your hierarchy")

        user = User(email=email, name=name, roles=tuple(role_ids), is_root_admin=False)
        await self._users.put(user)
        log.info("user.created", email=email, roles=role_ids)
        return user

    async def update_user(
        self,
        caller: CallerContext,
        email: str,
        *,
        name: str | None,
        roles: Sequence[object] | None,
    ) -> User:
        existing = await self._users.get(email)
        if existing is None:
            raise NotFoundError("User not found")

        name = _validated_name(name)
        new_roles = _validated_roles(roles)

        if self._is_root_admin_email(email) and set(existing.roles) != set(new_roles):
            log.info("user.root_admin_roles_change_blocked", email=email)
            raise ProtectedEntityError("Cannot change roles of the primary root admin user")

        allowed = await self._policy.can_update_user(
            caller, current_roles=existing.roles, new_roles=new_roles
        )
        if not allowed:
            log.info("user.update_denied", email=email)
            raise AuthorizationError(
                "Permission denied: cannot manage this user or assign the requested roles"
            )

        updated = User(
            email=email,
            name=name,
            roles=tuple(new_roles),
            is_root_admin=existing.is_root_admin,
        )
        await self._users.put(updated)
        log.info("user.updated", email=email, roles=new_roles)
        return updated

    async def delete_user(self, caller: CallerContext, email: str) -> UserDeletionResult:
        if self._is_root_admin_email(email):
            raise ProtectedEntityError("Cannot delete the primary root admin user")

        existing = await self._users.get(email)
        if existing is None:
            # Nothing in the directory; the identity account may still linger.
            log.info("user.delete_directory_record_absent", email=email)
        else:
            if not await self._policy.can_delete_user(caller, existing.roles):
                log.info("user.delete_denied", email=email)
                raise AuthorizationError(
                    "Permission denied: cannot delete user outside your management hierarchy"
                )
            # Step 1: the directory is authoritative. A StorageError here aborts
            # before the identity provider is touched.
            await self._users.delete(email)
            log.info("user.directory_record_deleted", email=email)

        # Step 2: best-effort identity cleanup.
        outcome = await self._identity.delete_account(email)
        if outcome is AccountDeletion.failed:
            log.error(
                "user.identity_cleanup_failed",
                email=email,
                kind=str(ErrorKind.identity_store_degraded),
            )
            return UserDeletionResult(
                email=email, status=DeletionStatus.partially_deleted, identity_outcome=outcome
            )

        log.info("user.deleted", email=email, identity_outcome=str(outcome))
        return UserDeletionResult(
            email=email, status=DeletionStatus.fully_deleted, identity_outcome=outcome
        )

    async def get_user(self, email: str) -> User:
        user = await self._users.get(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def find_user(self, email: str) -> User | None:
        return await self._users.get(email)


# --- Module Notes -----------------------------------------------------------
# A partially deleted user needs operator reconciliation in the identity provider;
# nothing retries the identity step automatically.
