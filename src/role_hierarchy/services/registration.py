"""
role_hierarchy.services.registration

Pre-approved self registration.

Responsibilities:
- Check the shared registration API key.
- Only let users that already have a directory record create a login account.
- Treat an already existing identity account as a successful no-op.
"""

from __future__ import annotations

import enum
import secrets

from role_hierarchy.db.repositories.users import UserRepo
from role_hierarchy.db.store import StoreClient
from role_hierarchy.errors import AuthenticationError, AuthorizationError, ValidationError
from role_hierarchy.identity.interfaces import IdentityAccountStore
from role_hierarchy.observability.logging import get_logger
from role_hierarchy.settings import Settings

log = get_logger(__name__)


class RegistrationOutcome(enum.StrEnum):
    registered = "registered"
    already_registered = "already-registered"


class RegistrationService:
    def __init__(
        self,
        *,
        store: StoreClient,
        identity: IdentityAccountStore,
        settings: Settings,
    ) -> None:
        self._users = UserRepo(store)
        self._identity = identity
        self._settings = settings

    def _check_api_key(self, api_key: str | None) -> None:
        expected = self._settings.registration_api_key
        if not expected or not api_key or not secrets.compare_digest(api_key, expected):
            raise AuthenticationError("Unauthorized")

    async def register(
        self, *, api_key: str | None, email: str | None, password: str | None
    ) -> RegistrationOutcome:
        self._check_api_key(api_key)
        if not email or not email.strip() or not password:
            raise ValidationError("email and password required")
        email = email.strip()

        if await self._users.get(email) is None:
            log.info("registration.not_approved", email=email)
            raise AuthorizationError("User not approved for registration")

        if await self._identity.account_exists(email):
            return RegistrationOutcome.already_registered

        await self._identity.create_account(email, password)
        log.info("registration.account_created", email=email)
        return RegistrationOutcome.registered
