"""
role_hierarchy.auth.jwt

Bearer token helpers (PyJWT, HS256).

Responsibilities:
- Mint tokens carrying the directory claims (`sub`, `roles`, `root_admin`).
- Verify signature and registered claims for the JWT resolver.
- Read claims without verification for the local stub resolver.

Tokens are minted by the dev token endpoint and by the identity HTTP adapter
(service credentials); nothing else in the service signs tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

ROLES_CLAIM = "roles"
ROOT_ADMIN_CLAIM = "root_admin"
REQUIRED_CLAIMS = ("sub", "iss", "aud", "iat", "exp")


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str


class JwtValidationError(Exception):
    """Raised for any token that cannot be decoded or fails a claim check."""


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    roles: list[str],
    root_admin: bool = False,
    ttl: timedelta = timedelta(hours=1),
) -> str:
    issued_at = datetime.now(tz=UTC)
    claims: dict[str, Any] = {
        "sub": subject,
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + ttl).timestamp()),
        ROLES_CLAIM: list(roles),
        ROOT_ADMIN_CLAIM: root_admin,
    }
    return jwt.encode(claims, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            key=cfg.secret,
            algorithms=[cfg.alg],
            audience=cfg.audience,
            issuer=cfg.issuer,
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.PyJWTError as e:
        raise JwtValidationError(str(e)) from e


def decode_unverified(token: str) -> dict[str, Any]:
    # No signature, expiry or audience checks: dev/test stub resolver only.
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise JwtValidationError(str(e)) from e
