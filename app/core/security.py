"""Security utilities for password hashing and JWT."""

from __future__ import annotations

from datetime import timedelta
from typing import Any
from uuid import UUID

from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings
from app.shared.exceptions import UnauthenticatedException
from app.shared.utils import utc_now

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/identity/auth/login")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify plain password against hashed one."""
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    """Hash password using bcrypt."""
    return pwd_context.hash(password)


def create_access_token(subject: str, **claims: Any) -> str:
    """Create signed access token.

    Only the subject is trusted downstream; role and admin level are always
    re-read from the profile store so a stale token cannot widen access.
    """
    payload: dict[str, Any] = {
        "sub": subject,
        "type": "access",
        "exp": utc_now() + timedelta(minutes=settings.access_token_expire_minutes),
    }
    payload.update(claims)
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate JWT token."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise UnauthenticatedException("Invalid token") from exc


def subject_from_access_token(token: str) -> UUID:
    """Return the caller id carried by an access token."""
    payload = decode_token(token)
    if payload.get("type") != "access":
        raise UnauthenticatedException("Invalid access token")

    subject = payload.get("sub")
    if not subject:
        raise UnauthenticatedException("Token subject is missing")
    try:
        return UUID(str(subject))
    except ValueError as exc:
        raise UnauthenticatedException("Token subject is malformed") from exc
