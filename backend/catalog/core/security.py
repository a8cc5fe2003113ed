"""Bearer token helpers.

Tokens are issued by an external identity provider in production. The service
only verifies them; ``create_access_token`` exists for development and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from jose import JWTError, jwt

from catalog.core.config import get_settings

ROLE_CLAIMS = ("role", "roles")


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be verified."""


@dataclass(frozen=True)
class Principal:
    subject: str
    roles: frozenset[str] = field(default_factory=frozenset)

    def has_any_role(self, roles: Iterable[str]) -> bool:
        return not self.roles.isdisjoint(roles)


def _collect_roles(payload: dict[str, Any]) -> frozenset[str]:
    roles: set[str] = set()
    for claim in ROLE_CLAIMS:
        value = payload.get(claim)
        if isinstance(value, str):
            roles.add(value)
        elif isinstance(value, (list, tuple)):
            roles.update(str(v) for v in value)
    return frozenset(roles)


def create_access_token(
    subject: str,
    roles: Iterable[str] = (),
    expires_minutes: int | None = None,
) -> str:
    settings = get_settings()
    minutes = (
        expires_minutes
        if expires_minutes is not None
        else settings.access_token_expire_minutes
    )
    claims = {
        "sub": subject,
        "roles": list(roles),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Principal:
    """Verify signature and expiry, then return the caller's identity and roles."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    subject = payload.get("sub")
    if not subject:
        raise InvalidTokenError("Token missing subject")
    return Principal(subject=str(subject), roles=_collect_roles(payload))
