from __future__ import annotations

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.enums import PropertyStatusEnum
from app.modules.properties.models import Property
from app.modules.properties.repository import PropertyRepository
from app.shared.exceptions import StorageFailureException


class FailingSession:
    def __init__(self) -> None:
        self.rolled_back = False
        self.committed = False

    async def scalar(self, _stmt):
        raise OperationalError("UPDATE properties", {}, Exception("connection reset"))

    async def flush(self) -> None:
        raise IntegrityError("UPDATE properties", {}, Exception("null value in column \"title\""))

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True


def test_property_territory_is_normalized_and_immutable() -> None:
    record = Property(owner_id=uuid4(), territory_code=" jm ", title="Villa")

    assert record.territory_code == "JM"
    record.territory_code = "jm"
    with pytest.raises(ValueError):
        record.territory_code = "GY"
    assert record.territory_code == "JM"


@pytest.mark.asyncio
@pytest.mark.parametrize("field_name", ["territory_code", "owner_id", "id", "created_at"])
async def test_apply_changes_refuses_immutable_fields(field_name: str) -> None:
    repository = PropertyRepository(FailingSession())  # type: ignore[arg-type]

    with pytest.raises(ValueError):
        await repository.apply_changes(uuid4(), {"status": PropertyStatusEnum.ACTIVE, field_name: "GY"})


@pytest.mark.asyncio
async def test_apply_changes_wraps_storage_errors_and_rolls_back() -> None:
    session = FailingSession()
    repository = PropertyRepository(session)  # type: ignore[arg-type]

    with pytest.raises(StorageFailureException):
        await repository.apply_changes(uuid4(), {"status": PropertyStatusEnum.ACTIVE})

    assert session.rolled_back is True
    assert session.committed is False


@pytest.mark.asyncio
async def test_save_wraps_storage_errors_and_rolls_back() -> None:
    session = FailingSession()
    repository = PropertyRepository(session)  # type: ignore[arg-type]
    record = Property(owner_id=uuid4(), territory_code="GY", title="Villa")

    with pytest.raises(StorageFailureException):
        await repository.save(record)

    assert session.rolled_back is True
    assert session.committed is False
