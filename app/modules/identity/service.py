"""Identity business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import RoleEnum
from app.core.security import (
    create_access_token,
    hash_password,
    oauth2_scheme,
    subject_from_access_token,
    verify_password,
)
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.schemas import AccessToken, LoginRequest, UserCreate
from app.shared.exceptions import ConflictException, NotFoundException, UnauthenticatedException
from app.shared.utils import normalize_email


class IdentityService:
    """Identity domain service."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def ensure_default_roles(self) -> None:
        """Ensure all default roles exist."""
        for role_name in (RoleEnum.REGULAR, RoleEnum.ADMIN):
            role = await self.repository.get_role_by_name(role_name)
            if role is None:
                await self.repository.create_role(role_name)

    async def register(self, payload: UserCreate) -> User:
        """Register a regular account; admin access is granted separately."""
        email = normalize_email(payload.email)
        existing_user = await self.repository.get_user_by_email(email)
        if existing_user is not None:
            raise ConflictException("User with this email already exists")

        role = await self.repository.get_role_by_name(RoleEnum.REGULAR)
        if role is None:
            raise NotFoundException("Role not found")

        return await self.repository.create_user(
            email=email,
            password_hash=hash_password(payload.password),
            display_name=payload.display_name,
            role_id=role.id,
        )

    async def login(self, payload: LoginRequest) -> AccessToken:
        """Authenticate user and issue an access token."""
        user = await self.repository.get_user_by_email(normalize_email(payload.email))
        if user is None or not verify_password(payload.password, user.password_hash):
            raise UnauthenticatedException("Invalid credentials")

        if not user.is_active:
            raise UnauthenticatedException("User is inactive")

        return AccessToken(access_token=create_access_token(subject=str(user.id)))

    async def get_user_from_access_token(self, token: str) -> User:
        """Resolve user from access token."""
        user = await self.repository.get_user_by_id(subject_from_access_token(token))
        if user is None:
            raise UnauthenticatedException("User not found")
        if not user.is_active:
            raise UnauthenticatedException("User is inactive")
        return user


async def get_identity_service(session: AsyncSession = Depends(get_db_session)) -> IdentityService:
    """Dependency to provide identity service."""
    return IdentityService(IdentityRepository(session))


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    service: IdentityService = Depends(get_identity_service),
) -> User:
    """Resolve currently authenticated user from bearer token."""
    return await service.get_user_from_access_token(token)
