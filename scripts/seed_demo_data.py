"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.enums import AdminLevelEnum, PropertyStatusEnum, RoleEnum
from app.core.security import hash_password, verify_password
from app.modules.identity.models import Role, User
from app.modules.properties.models import Property
from app.modules.territories.models import Territory
from app.shared.utils import utc_now

DEMO_PASSWORD = "DemoPass123!"

DEMO_TERRITORIES = (
    ("GY", "Guyana", "GYD"),
    ("JM", "Jamaica", "JMD"),
    ("TT", "Trinidad and Tobago", "TTD"),
)


@dataclass(frozen=True, slots=True)
class DemoUser:
    email: str
    role: RoleEnum
    admin_level: AdminLevelEnum | None = None
    territory_code: str | None = None


DEMO_SUPER_ADMIN = DemoUser("demo-super@listinghub.dev", RoleEnum.ADMIN, AdminLevelEnum.SUPER)
DEMO_GY_OWNER = DemoUser("demo-owner-gy@listinghub.dev", RoleEnum.ADMIN, AdminLevelEnum.OWNER, "GY")
DEMO_JM_OWNER = DemoUser("demo-owner-jm@listinghub.dev", RoleEnum.ADMIN, AdminLevelEnum.OWNER, "JM")
DEMO_JM_BASIC = DemoUser("demo-basic-jm@listinghub.dev", RoleEnum.ADMIN, AdminLevelEnum.BASIC, "JM")
DEMO_LISTER = DemoUser("demo-lister@listinghub.dev", RoleEnum.REGULAR)

DEMO_USERS = (DEMO_SUPER_ADMIN, DEMO_GY_OWNER, DEMO_JM_OWNER, DEMO_JM_BASIC, DEMO_LISTER)

DEMO_LISTINGS = (
    ("Two-bedroom apartment in Kingston", "JM", "Kingston", "Kingston", PropertyStatusEnum.PENDING),
    ("Family house near Montego Bay", "JM", "St. James", "Montego Bay", PropertyStatusEnum.DRAFT),
    ("Riverside lot in Georgetown", "GY", "Demerara-Mahaica", "Georgetown", PropertyStatusEnum.PENDING),
)


@dataclass(slots=True)
class SeedStats:
    territories_created: int = 0
    roles_created: int = 0
    users_created: int = 0
    users_updated: int = 0
    listings_created: int = 0


async def _ensure_territories(session: AsyncSession) -> int:
    created = 0
    for code, name, currency_code in DEMO_TERRITORIES:
        territory = await session.get(Territory, code)
        if territory is None:
            session.add(Territory(code=code, name=name, currency_code=currency_code, is_active=True))
            created += 1
    await session.flush()
    return created


async def _ensure_roles(session: AsyncSession) -> int:
    created = 0
    for role_name in (RoleEnum.REGULAR, RoleEnum.ADMIN):
        existing = await session.scalar(select(Role).where(Role.name == role_name))
        if existing is None:
            session.add(Role(name=role_name))
            created += 1
    await session.flush()
    return created


async def _ensure_user(session: AsyncSession, demo: DemoUser) -> tuple[User, bool]:
    role = await session.scalar(select(Role).where(Role.name == demo.role))
    if role is None:
        raise RuntimeError(f"Role {demo.role} was not found after ensure_roles")

    user = await session.scalar(
        select(User).options(selectinload(User.role)).where(User.email == demo.email),
    )
    created = False
    if user is None:
        user = User(
            email=demo.email,
            password_hash=hash_password(DEMO_PASSWORD),
            is_active=True,
            role_id=role.id,
        )
        session.add(user)
        created = True
    else:
        if not verify_password(DEMO_PASSWORD, user.password_hash):
            user.password_hash = hash_password(DEMO_PASSWORD)
        if not user.is_active:
            user.is_active = True
        user.role_id = role.id

    user.admin_level = demo.admin_level
    user.territory_code = demo.territory_code

    await session.flush()
    await session.refresh(user, attribute_names=["role"])
    return user, created


async def _ensure_listings(session: AsyncSession, owner: User) -> int:
    created = 0
    for title, territory_code, region, city, status in DEMO_LISTINGS:
        existing = await session.scalar(
            select(Property).where(Property.owner_id == owner.id, Property.title == title),
        )
        if existing is not None:
            continue

        session.add(
            Property(
                owner_id=owner.id,
                territory_code=territory_code,
                title=title,
                description="Demo listing.",
                price=Decimal("185000.00"),
                property_type="house",
                bedrooms=2,
                bathrooms=1,
                region=region,
                city=city,
                status=status,
                submitted_at=utc_now() if status == PropertyStatusEnum.PENDING else None,
            ),
        )
        created += 1
    await session.flush()
    return created


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            stats.territories_created = await _ensure_territories(session)
            stats.roles_created = await _ensure_roles(session)

            users: dict[str, User] = {}
            for demo in DEMO_USERS:
                user, created = await _ensure_user(session, demo)
                users[demo.email] = user
                stats.users_created += int(created)
            stats.users_updated = len(DEMO_USERS) - stats.users_created

            stats.listings_created = await _ensure_listings(session, users[DEMO_LISTER.email])

            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Seed idempotent demo data for ListingHub (territories, admins of every "
            "level, a lister and a few listings awaiting moderation)."
        ),
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Territories created: {stats.territories_created}")
    print(f"- Roles created: {stats.roles_created}")
    print(f"- Users created: {stats.users_created}")
    print(f"- Users updated: {stats.users_updated}")
    print(f"- Listings created: {stats.listings_created}")
    print("")
    print("Demo credentials (non-production only):")
    for demo in DEMO_USERS:
        label = demo.admin_level or demo.role
        scope = f" [{demo.territory_code}]" if demo.territory_code else ""
        print(f"- {label}{scope}: {demo.email} / {DEMO_PASSWORD}")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
