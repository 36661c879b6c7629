"""
role_hierarchy.identity.http_client

HTTP client boundary to a remote identity provider.

Responsibilities:
- Attach short-lived service JWT credentials to every call.
- Map provider responses onto the `IdentityAccountStore` contract
  (404 on delete means the account is already gone).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from urllib.parse import quote

import httpx

from role_hierarchy.auth.jwt import issue_token
from role_hierarchy.auth.resolvers import jwt_config
from role_hierarchy.errors import StorageError
from role_hierarchy.identity.interfaces import AccountDeletion
from role_hierarchy.observability.logging import get_logger
from role_hierarchy.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ServiceIdentity:
    # Identity used for provider calls; subject is an internal service identity.
    subject: str = "role-hierarchy-service"
    roles: tuple[str, ...] = ("identity_admin",)


class HttpIdentityAccountStore:
    def __init__(
        self,
        *,
        settings: Settings,
        http: httpx.AsyncClient,
        identity: ServiceIdentity | None = None,
    ) -> None:
        self._settings = settings
        self._http = http
        self._identity = identity or ServiceIdentity()

    def _authz(self) -> dict[str, str]:
        token = issue_token(
            cfg=jwt_config(self._settings),
            subject=self._identity.subject,
            roles=list(self._identity.roles),
            ttl=timedelta(minutes=5),
        )
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _account_path(subject_id: str) -> str:
        return f"/v1/accounts/{quote(subject_id, safe='')}"

    async def delete_account(self, subject_id: str) -> AccountDeletion:
        try:
            r = await self._http.delete(self._account_path(subject_id), headers=self._authz())
        except httpx.HTTPError as e:
            log.warning("identity.delete_transport_error", subject=subject_id, error=str(e))
            return AccountDeletion.failed
        if r.status_code == 404:
            return AccountDeletion.not_found
        if r.is_success:
            return AccountDeletion.deleted
        log.warning("identity.delete_rejected", subject=subject_id, status_code=r.status_code)
        return AccountDeletion.failed

    async def account_exists(self, subject_id: str) -> bool:
        try:
            r = await self._http.get(self._account_path(subject_id), headers=self._authz())
            if r.status_code == 404:
                return False
            r.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageError("Identity provider unavailable") from e
        return True

    async def create_account(self, subject_id: str, password: str) -> None:
        try:
            r = await self._http.post(
                "/v1/accounts",
                headers=self._authz(),
                json={"subject": subject_id, "password": password},
            )
            r.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageError("Identity provider unavailable") from e

    async def aclose(self) -> None:
        await self._http.aclose()


# --- Module Notes -----------------------------------------------------------
# mTLS / asymmetric service auth would replace the shared HS256 secret in production;
# base_url and timeouts come from settings (`identity_base_url`, `identity_timeout_seconds`).
