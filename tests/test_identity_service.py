from __future__ import annotations

from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from app.core.enums import RoleEnum
from app.core.security import create_access_token, hash_password, subject_from_access_token
from app.modules.identity.schemas import LoginRequest, UserCreate
from app.modules.identity.service import IdentityService
from app.shared.exceptions import ConflictException, UnauthenticatedException


class FakeIdentityRepository:
    def __init__(self) -> None:
        self.roles: dict[RoleEnum, SimpleNamespace] = {}
        self.users: dict[str, SimpleNamespace] = {}

    async def get_role_by_name(self, role_name: RoleEnum) -> SimpleNamespace | None:
        return self.roles.get(role_name)

    async def create_role(self, role_name: RoleEnum) -> SimpleNamespace:
        role = SimpleNamespace(id=uuid4(), name=role_name)
        self.roles[role_name] = role
        return role

    async def get_user_by_email(self, email: str) -> SimpleNamespace | None:
        return self.users.get(email)

    async def get_user_by_id(self, user_id: UUID) -> SimpleNamespace | None:
        return next((user for user in self.users.values() if user.id == user_id), None)

    async def create_user(
        self,
        email: str,
        password_hash: str,
        display_name: str | None,
        role_id: UUID,
    ) -> SimpleNamespace:
        role = next(role for role in self.roles.values() if role.id == role_id)
        user = SimpleNamespace(
            id=uuid4(),
            email=email,
            password_hash=password_hash,
            display_name=display_name,
            is_active=True,
            role=role,
            admin_level=None,
            territory_code=None,
        )
        self.users[email] = user
        return user


async def make_service() -> tuple[IdentityService, FakeIdentityRepository]:
    repository = FakeIdentityRepository()
    service = IdentityService(repository)  # type: ignore[arg-type]
    await service.ensure_default_roles()
    return service, repository


@pytest.mark.asyncio
async def test_ensure_default_roles_is_idempotent() -> None:
    service, repository = await make_service()
    await service.ensure_default_roles()

    assert set(repository.roles) == {RoleEnum.REGULAR, RoleEnum.ADMIN}


@pytest.mark.asyncio
async def test_register_creates_regular_account_with_normalized_email() -> None:
    service, _ = await make_service()

    user = await service.register(UserCreate(email="Lister@Example.com", password="StrongPass123"))

    assert user.email == "lister@example.com"
    assert user.role.name == RoleEnum.REGULAR
    assert user.admin_level is None


@pytest.mark.asyncio
async def test_register_rejects_duplicate_email() -> None:
    service, _ = await make_service()
    await service.register(UserCreate(email="dup@example.com", password="StrongPass123"))

    with pytest.raises(ConflictException):
        await service.register(UserCreate(email="DUP@example.com", password="StrongPass123"))


@pytest.mark.asyncio
async def test_login_issues_token_for_caller() -> None:
    service, repository = await make_service()
    user = await service.register(UserCreate(email="login@example.com", password="StrongPass123"))

    token = await service.login(LoginRequest(email="login@example.com", password="StrongPass123"))

    assert subject_from_access_token(token.access_token) == user.id
    assert await service.get_user_from_access_token(token.access_token) is repository.users["login@example.com"]


@pytest.mark.asyncio
async def test_login_rejects_bad_password_and_inactive_user() -> None:
    service, repository = await make_service()
    await service.register(UserCreate(email="inactive@example.com", password="StrongPass123"))

    with pytest.raises(UnauthenticatedException):
        await service.login(LoginRequest(email="inactive@example.com", password="WrongPass123"))

    repository.users["inactive@example.com"].is_active = False
    with pytest.raises(UnauthenticatedException):
        await service.login(LoginRequest(email="inactive@example.com", password="StrongPass123"))


def test_access_token_subject_must_be_uuid() -> None:
    with pytest.raises(UnauthenticatedException):
        subject_from_access_token(create_access_token(subject="not-a-uuid"))


def test_non_access_token_is_rejected() -> None:
    with pytest.raises(UnauthenticatedException):
        subject_from_access_token(create_access_token(subject=str(uuid4()), type="refresh"))


def test_password_hash_uses_bcrypt() -> None:
    hashed = hash_password("StrongPass123")

    assert hashed != "StrongPass123"
    assert hashed.startswith("$2")
