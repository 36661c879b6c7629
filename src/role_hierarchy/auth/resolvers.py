"""
role_hierarchy.auth.resolvers

Caller Context Resolvers.

Responsibilities:
- Turn an inbound request into a `CallerContext` or raise `AuthenticationError`.
- Offer one verified (JWT) and one local-stub (unverified) implementation,
  selected once at process start by `build_resolver`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from starlette.requests import Request

from role_hierarchy.auth.jwt import (
    ROLES_CLAIM,
    ROOT_ADMIN_CLAIM,
    JwtConfig,
    JwtValidationError,
    decode_and_validate,
    decode_unverified,
)
from role_hierarchy.auth.models import CallerContext
from role_hierarchy.errors import AuthenticationError
from role_hierarchy.observability.logging import get_logger
from role_hierarchy.settings import Settings

log = get_logger(__name__)


class CallerContextResolver(Protocol):
    def resolve(self, request: Request) -> CallerContext: ...


def _bearer_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Missing or invalid Authorization header")
    return token.strip()


def caller_from_claims(claims: dict[str, Any]) -> CallerContext:
    subject = str(claims.get("email") or claims.get("sub") or "")
    if not subject:
        raise AuthenticationError("Invalid token subject")

    roles_raw = claims.get(ROLES_CLAIM, [])
    if not isinstance(roles_raw, list):
        raise AuthenticationError("Invalid token roles")
    roles = [r for r in roles_raw if isinstance(r, str)]
    if len(roles) != len(roles_raw):
        log.warning("auth.non_string_roles_dropped", subject=subject)

    root_admin = claims.get(ROOT_ADMIN_CLAIM, False)
    return CallerContext(
        subject_id=subject,
        role_ids=frozenset(roles),
        is_root_admin=root_admin is True or root_admin == "true",
    )


class BearerTokenResolver:
    def __init__(self, cfg: JwtConfig) -> None:
        self._cfg = cfg

    def resolve(self, request: Request) -> CallerContext:
        token = _bearer_token(request)
        try:
            claims = decode_and_validate(cfg=self._cfg, token=token)
        except JwtValidationError as e:
            raise AuthenticationError(f"Invalid token: {e}") from e
        return caller_from_claims(claims)


class UnverifiedTokenResolver:
    """
    Local stub: trusts whatever claims the bearer token carries.
    """

    def resolve(self, request: Request) -> CallerContext:
        token = _bearer_token(request)
        try:
            claims = decode_unverified(token)
        except JwtValidationError as e:
            raise AuthenticationError("Invalid dummy token format") from e
        return caller_from_claims(claims)


def jwt_config(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
    )


_FACTORIES: dict[str, Callable[[Settings], CallerContextResolver]] = {
    "jwt": lambda s: BearerTokenResolver(jwt_config(s)),
    "unverified": lambda s: UnverifiedTokenResolver(),
}


def build_resolver(settings: Settings) -> CallerContextResolver:
    if settings.auth_mode == "unverified" and settings.env == "prod":
        raise RuntimeError("auth_mode=unverified is not allowed when env=prod")
    return _FACTORIES[settings.auth_mode](settings)


# --- Module Notes -----------------------------------------------------------
# Request handlers never branch on environment: they call whichever resolver the
# app factory stored on `app.state.caller_resolver`.
