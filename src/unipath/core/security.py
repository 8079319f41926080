"""Password hashing and JWT helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from unipath.config import Settings, get_settings
from unipath.types import AccountRole

ROLES: tuple[AccountRole, ...] = ("student", "admin", "agent")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def resolve_role(requested: str | None, default: str = "student") -> str:
    """Role for a new account: the requested one, or ``default`` when none was asked for."""
    role = (requested or "").strip().lower() or default
    if role not in ROLES:
        raise ValueError(f"role must be one of {list(ROLES)}")
    return role


def create_access_token(
    subject: int | str,
    settings: Settings | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    settings = settings or get_settings()
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    claims: dict[str, Any] = {"sub": str(subject), "exp": expire}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings | None = None) -> dict[str, Any] | None:
    """Claims of a valid token, or None for anything expired, forged or malformed."""
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
