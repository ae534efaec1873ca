"""Bearer JWT authentication and role gates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import settings
from app.domain.errors import DomainError
from app.domain.policies.timestamps import utc_now
from app.domain.value_objects.enums import Role

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


class AuthenticationError(DomainError):
    """Missing, malformed or expired credentials."""


class PermissionDeniedError(DomainError):
    """Authenticated, but the role is not allowed here."""


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str | None
    role: str


# Used for every request when AUTH_ENABLED=false.
DEV_USER = CurrentUser(id="dev", email=None, role=Role.ADMIN.value)


def create_access_token(
    subject: str,
    role: str,
    email: str | None = None,
    expires_minutes: int | None = None,
) -> str:
    expire = utc_now() + timedelta(minutes=expires_minutes or settings.jwt_expire_minutes)
    claims: dict[str, Any] = {"sub": subject, "role": role, "exp": expire}
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> CurrentUser:
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        # signature and expiry errors land here
        logger.info("Rejected token: %s", e)
        raise AuthenticationError("Invalid or expired token") from e

    subject = claims.get("sub")
    role = claims.get("role")
    if not subject or not role:
        raise AuthenticationError("Token is missing required claims")
    return CurrentUser(id=str(subject), email=claims.get("email"), role=str(role))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> CurrentUser:
    if not settings.auth_enabled:
        return DEV_USER
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Authentication required")
    return decode_access_token(credentials.credentials)


def require_roles(roles_getter: Callable[[], list[str]]) -> Callable[..., Any]:
    """Dependency factory; *roles_getter* is read per request so settings can change in tests."""

    async def _check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        allowed = roles_getter()
        if settings.auth_enabled and user.role not in allowed:
            logger.warning("User %s with role %s denied (needs one of %s)", user.id, user.role, allowed)
            raise PermissionDeniedError("You do not have permission to perform this action")
        return user

    return _check


read_access = require_roles(lambda: settings.read_roles)
write_access = require_roles(lambda: settings.write_roles)
fee_write_access = require_roles(lambda: settings.fee_write_roles)
