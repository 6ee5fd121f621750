from __future__ import annotations

from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from app.core.enums import AdminLevelEnum, PropertyStatusEnum, RoleEnum
from app.modules.access.permissions import CapabilitySet, resolve_capabilities
from app.modules.access.profile_store import AdminIdentity
from app.modules.access.registry import AdminRegistry
from app.modules.access.service import AccessContext
from app.modules.admin.schemas import AdminAccessUpdate
from app.modules.admin.service import AdminService
from app.modules.audit.schemas import AuditEntry
from app.shared.exceptions import ForbiddenException, NotFoundException, ValidationException


class FakePropertyRepository:
    def __init__(self, counts: dict[PropertyStatusEnum, int]) -> None:
        self.counts = counts
        self.scopes: list[str | None] = []

    async def list_scoped(
        self,
        capabilities: CapabilitySet,
        *,
        status: PropertyStatusEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list, int]:
        self.scopes.append(capabilities.territory_filter)
        return [], 0

    async def count_by_status(self, capabilities: CapabilitySet) -> dict[PropertyStatusEnum, int]:
        self.scopes.append(capabilities.territory_filter)
        return dict(self.counts)


class FakeIdentityRepository:
    def __init__(self, users: list[SimpleNamespace]) -> None:
        self.users = {user.id: user for user in users}
        self.roles = {name: SimpleNamespace(id=uuid4(), name=name) for name in RoleEnum}

    async def get_user_by_id(self, user_id: UUID) -> SimpleNamespace | None:
        return self.users.get(user_id)

    async def get_role_by_name(self, role_name: RoleEnum) -> SimpleNamespace | None:
        return self.roles.get(role_name)

    async def update_admin_access(
        self,
        user: SimpleNamespace,
        *,
        role: SimpleNamespace,
        admin_level: AdminLevelEnum | None,
        territory_code: str | None,
    ) -> SimpleNamespace:
        user.role = role
        user.admin_level = admin_level
        user.territory_code = territory_code
        return user


class FakeTerritoryRepository:
    async def get_by_code(self, code: str) -> SimpleNamespace | None:
        if code in {"GY", "JM"}:
            return SimpleNamespace(code=code, is_active=True)
        return None


class FakeAuditLogger:
    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []

    def record(self, entry: AuditEntry) -> None:
        self.entries.append(entry)


def make_access(
    level: AdminLevelEnum | None,
    territory: str | None = None,
    role: RoleEnum = RoleEnum.ADMIN,
) -> AccessContext:
    identity = AdminIdentity(
        id=uuid4(),
        email="console@listinghub.dev",
        role=role,
        admin_level=level,
        territory=territory,
    )
    return AccessContext(identity=identity, capabilities=resolve_capabilities(identity, AdminRegistry()))


def make_user() -> SimpleNamespace:
    return SimpleNamespace(
        id=uuid4(),
        role=SimpleNamespace(id=uuid4(), name=RoleEnum.REGULAR),
        admin_level=None,
        territory_code=None,
    )


def make_service(
    *,
    counts: dict[PropertyStatusEnum, int] | None = None,
    users: list[SimpleNamespace] | None = None,
) -> tuple[AdminService, FakePropertyRepository, FakeAuditLogger]:
    property_repository = FakePropertyRepository(counts or {})
    audit = FakeAuditLogger()
    service = AdminService(
        property_repository,  # type: ignore[arg-type]
        FakeIdentityRepository(users or []),  # type: ignore[arg-type]
        FakeTerritoryRepository(),  # type: ignore[arg-type]
        audit,  # type: ignore[arg-type]
    )
    return service, property_repository, audit


@pytest.mark.asyncio
async def test_overview_fills_missing_statuses_and_reports_scope() -> None:
    service, repository, _ = make_service(
        counts={PropertyStatusEnum.PENDING: 4, PropertyStatusEnum.ACTIVE: 2},
    )

    overview = await service.get_overview(make_access(AdminLevelEnum.OWNER, "GY"))

    assert overview.territory_scope == "GY"
    assert overview.properties_total == 6
    assert overview.properties_by_status[PropertyStatusEnum.PENDING] == 4
    assert overview.properties_by_status[PropertyStatusEnum.EXPIRED] == 0
    assert repository.scopes == ["GY"]


@pytest.mark.asyncio
async def test_property_queue_uses_caller_scope() -> None:
    service, repository, _ = make_service()

    await service.list_properties(
        make_access(AdminLevelEnum.SUPER),
        status=PropertyStatusEnum.PENDING,
        limit=25,
        offset=0,
    )

    assert repository.scopes == ["all"]


@pytest.mark.asyncio
async def test_regular_user_cannot_open_console() -> None:
    service, _, _ = make_service()

    with pytest.raises(ForbiddenException):
        await service.get_overview(make_access(None, role=RoleEnum.REGULAR))


@pytest.mark.asyncio
async def test_super_admin_grants_owner_access_and_audits_it() -> None:
    user = make_user()
    service, _, audit = make_service(users=[user])
    actor = make_access(AdminLevelEnum.SUPER)

    updated = await service.update_admin_access(
        user.id,
        AdminAccessUpdate(role=RoleEnum.ADMIN, admin_level=AdminLevelEnum.OWNER, territory_code="jm"),
        actor,
    )

    assert updated.role.name == RoleEnum.ADMIN
    assert updated.admin_level == AdminLevelEnum.OWNER
    assert updated.territory_code == "JM"
    [entry] = audit.entries
    assert entry.action_type == "admin_access_updated"
    assert entry.admin_id == actor.identity.id
    assert entry.target_id == str(user.id)
    assert entry.details["previous"]["role"] == "regular"


@pytest.mark.asyncio
async def test_revoking_admin_role_clears_level_and_territory() -> None:
    user = make_user()
    user.role = SimpleNamespace(id=uuid4(), name=RoleEnum.ADMIN)
    user.admin_level = AdminLevelEnum.OWNER
    user.territory_code = "GY"
    service, _, _ = make_service(users=[user])

    updated = await service.update_admin_access(
        user.id,
        AdminAccessUpdate(role=RoleEnum.REGULAR, admin_level=AdminLevelEnum.OWNER, territory_code="GY"),
        make_access(AdminLevelEnum.SUPER),
    )

    assert updated.admin_level is None
    assert updated.territory_code is None


@pytest.mark.asyncio
async def test_owner_admin_cannot_manage_admins() -> None:
    user = make_user()
    service, _, audit = make_service(users=[user])

    with pytest.raises(ForbiddenException):
        await service.update_admin_access(
            user.id,
            AdminAccessUpdate(role=RoleEnum.ADMIN, admin_level=AdminLevelEnum.SUPER),
            make_access(AdminLevelEnum.OWNER, "GY"),
        )

    assert user.admin_level is None
    assert audit.entries == []


@pytest.mark.asyncio
async def test_owner_level_requires_known_territory() -> None:
    user = make_user()
    service, _, _ = make_service(users=[user])
    actor = make_access(AdminLevelEnum.SUPER)

    with pytest.raises(ValidationException):
        await service.update_admin_access(
            user.id,
            AdminAccessUpdate(role=RoleEnum.ADMIN, admin_level=AdminLevelEnum.OWNER),
            actor,
        )
    with pytest.raises(ValidationException):
        await service.update_admin_access(
            user.id,
            AdminAccessUpdate(role=RoleEnum.ADMIN, admin_level=AdminLevelEnum.OWNER, territory_code="ZZ"),
            actor,
        )
    with pytest.raises(ValidationException):
        await service.update_admin_access(
            user.id,
            AdminAccessUpdate(role=RoleEnum.ADMIN),
            actor,
        )


@pytest.mark.asyncio
async def test_update_admin_access_for_missing_user() -> None:
    service, _, _ = make_service()

    with pytest.raises(NotFoundException):
        await service.update_admin_access(
            uuid4(),
            AdminAccessUpdate(role=RoleEnum.ADMIN, admin_level=AdminLevelEnum.BASIC),
            make_access(AdminLevelEnum.SUPER),
        )
