"""API test fixtures — async DB, FastAPI test client, tenants and tokens.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Requests go through the real get_db and DatabaseSessionManager, pointed
      at the test database, so error mapping and rollback are exercised
    - Settings, login code book and notifier overridden per test
    - Uploads and exports go to tmp_path, never the working tree

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - RecordingNotifier keeps sent messages so tests can read login codes
    - Low PBKDF2 iteration count for fixture passwords keeps the suite fast;
      verify_password reads the count from the stored hash
"""

import pytest
from httpx import ASGITransport, AsyncClient

from trialengage.api.dependencies import get_login_code_book
from trialengage.config import Settings, get_settings
from trialengage.core.domain_types import Role, UserStatus
from trialengage.core.login_codes import LoginCodeBook
from trialengage.core.passwords import hash_password
from trialengage.infrastructure.database import DatabaseSessionManager
from trialengage.infrastructure.notifier import LoggingNotifier, get_notifier
from trialengage.infrastructure.tokens import TokenCodec
from trialengage.models.company import Company
from trialengage.models.hospital import Hospital
from trialengage.models.user import User
import trialengage.infrastructure.database as db_module
import trialengage.models  # noqa: F401
from trialengage.main import app

ADMIN_KEY = "test-admin-key"
ADMIN_PASSWORD = "AcmeAdmin2024!"
USER_PASSWORD = "Investigator1!"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret="test-secret",
        platform_admin_key=ADMIN_KEY,
        default_company_id="acme",
        upload_dir=str(tmp_path / "pdfs"),
        backup_dir=str(tmp_path / "backups"),
        max_upload_bytes=64 * 1024,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def code_book(clock, test_settings):
    return LoginCodeBook(
        ttl_seconds=test_settings.login_code_ttl_seconds,
        max_attempts=test_settings.login_code_max_attempts,
        clock=clock,
    )


class RecordingNotifier(LoggingNotifier):
    def __init__(self):
        self.sent: list[dict] = []

    async def send_login_code(self, email: str, code: str, ttl_minutes: int) -> None:
        self.sent.append({"kind": "login_code", "email": email, "code": code})
        await super().send_login_code(email, code, ttl_minutes)

    async def send_approval(self, email: str, full_name: str) -> None:
        self.sent.append({"kind": "approval", "email": email})
        await super().send_approval(email, full_name)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def codec(test_settings):
    return TokenCodec(test_settings.jwt_secret, test_settings.jwt_algorithm)


@pytest.fixture
async def db_manager():
    """Fresh in-memory database per test, behind the real session manager."""
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_all()
    yield manager
    await manager.dispose()


@pytest.fixture
async def test_db(db_manager):
    async with db_manager.session_factory() as session:
        yield session


@pytest.fixture
async def client(db_manager, test_settings, code_book, notifier):
    """FastAPI test client; requests use get_db against the test manager."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_login_code_book] = lambda: code_book
    app.dependency_overrides[get_notifier] = lambda: notifier

    original_manager = db_module.db_manager
    db_module.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _add_company(db, company_id: str, name: str, **settings) -> Company:
    company = Company(
        id=company_id,
        name=name,
        admin_username=f"{company_id}_admin",
        admin_password_hash=hash_password(ADMIN_PASSWORD, iterations=1000),
        settings={"notifications": True, "auto_approval": False, **settings},
    )
    db.add(company)
    await db.commit()
    await db.refresh(company)
    return company


async def _add_user(db, company_id: str, email: str, status: UserStatus) -> User:
    user = User(
        company_id=company_id,
        email=email,
        first_name="Dana",
        last_name="Reyes",
        site="Boston",
        role="Coordinator",
        status=status.value,
        password_hash=hash_password(USER_PASSWORD, iterations=1000),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def company(test_db):
    return await _add_company(test_db, "acme", "Acme Trials")


@pytest.fixture
async def other_company(test_db):
    return await _add_company(test_db, "globex", "Globex", auto_approval=True)


@pytest.fixture
async def approved_user(test_db, company):
    return await _add_user(test_db, company.id, "dana@acme.org", UserStatus.APPROVED)


@pytest.fixture
async def pending_user(test_db, company):
    return await _add_user(test_db, company.id, "pat@acme.org", UserStatus.PENDING)


@pytest.fixture
async def hospitals(test_db, company):
    rows = [
        Hospital(company_id=company.id, name="Massachusetts General", location="Boston, MA",
                 consented_patients=45, randomized_patients=32, consent_rate=8.2),
        Hospital(company_id=company.id, name="Johns Hopkins", location="Baltimore, MD",
                 consented_patients=38, randomized_patients=28, consent_rate=7.1),
        Hospital(company_id=company.id, name="Cleveland Clinic", location="Cleveland, OH",
                 consented_patients=32, randomized_patients=24, consent_rate=6.8),
    ]
    test_db.add_all(rows)
    await test_db.commit()
    for row in rows:
        await test_db.refresh(row)
    return rows


@pytest.fixture
def admin_headers(codec, company):
    token = codec.encode(company.admin_username, company.id, Role.ADMIN)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(codec, approved_user):
    token = codec.encode(str(approved_user.id), approved_user.company_id, Role.INVESTIGATOR)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def platform_headers():
    return {"X-Admin-Key": ADMIN_KEY}
