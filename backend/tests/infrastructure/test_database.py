"""Tests for DatabaseSessionManager — error mapping, rollback, health check."""

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, OperationalError

from trialengage.core.errors import DatabaseError
from trialengage.infrastructure.database import DatabaseSessionManager, to_database_error
from trialengage.models.company import Company
import trialengage.models  # noqa: F401


@pytest.fixture
async def manager():
    m = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await m.create_all()
    yield m
    await m.dispose()


def _company(company_id: str, admin: str) -> Company:
    return Company(
        id=company_id, name=company_id.title(),
        admin_username=admin, admin_password_hash="x",
    )


async def test_operational_error_becomes_database_error(manager):
    with pytest.raises(DatabaseError) as excinfo:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert excinfo.value.http_status == 503
    assert excinfo.value.operation == "execute"
    assert "no_such_table" not in excinfo.value.message


async def test_integrity_error_rolls_back(manager):
    async with manager.session() as db:
        db.add(_company("acme", "acme_admin"))
        await db.commit()

    with pytest.raises(DatabaseError) as excinfo:
        async with manager.session() as db:
            db.add(_company("globex", "acme_admin"))
            await db.commit()
    assert excinfo.value.operation == "commit"

    async with manager.session() as db:
        ids = (await db.execute(select(Company.id))).scalars().all()
    assert ids == ["acme"]


async def test_other_exceptions_pass_through(manager):
    with pytest.raises(KeyError):
        async with manager.session():
            raise KeyError("x")


def test_error_map_prefers_most_specific():
    integrity = IntegrityError("INSERT", {}, Exception("dup"))
    operational = OperationalError("SELECT", {}, Exception("gone"))
    assert to_database_error(integrity).operation == "commit"
    assert to_database_error(operational).operation == "execute"


async def test_health_check(manager):
    assert await manager.health_check() is True
