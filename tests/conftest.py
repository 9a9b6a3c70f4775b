import os
import tempfile

# Configure the app before anything imports app.config
_TEST_DIR = tempfile.mkdtemp(prefix="formbuilder-tests-")
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-at-least-32-characters-long"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test_formbuilder.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["PUBLISH_REQUIRES_AUTH"] = "false"
os.environ["LOG_DIR"] = os.path.join(_TEST_DIR, "logs")
os.environ["SETTINGS_FILE"] = os.path.join(_TEST_DIR, "app-settings.json")

import pytest
from typing import AsyncGenerator, Generator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from app.config import settings
from app.database import Base, get_db
from app.models import Form, User
from app.core.security import create_access_token, get_password_hash
from app.services.settings_service import SettingsService
from app.api.deps import get_settings_service

# Same file as the app engine so scripts and the app see test data
TEST_DATABASE_URL = settings.DATABASE_URL

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=NullPool,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="function")
def settings_service(tmp_path) -> SettingsService:
    """Settings store in a per-test file."""
    return SettingsService(str(tmp_path / "app-settings.json"))


@pytest.fixture(scope="function")
def client(settings_service) -> Generator:
    """Create a sync test client (runs startup/shutdown, doesn't require db_session)."""
    from fastapi.testclient import TestClient
    from app.main import app

    app.dependency_overrides[get_settings_service] = lambda: settings_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def async_client(db_session: AsyncSession, settings_service) -> AsyncGenerator:
    """Create an async test client with database session override."""
    from httpx import AsyncClient, ASGITransport
    from app.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings_service] = lambda: settings_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory for users with a known password."""
    async def _make_user(
        email: str = "owner@example.com",
        password: str = "correct-horse-battery",
        name: str = "Form Owner"
    ) -> User:
        user = User(email=email, name=name, password=get_password_hash(password))
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_form(db_session: AsyncSession):
    """Factory for forms."""
    async def _make_form(
        form_id: str = None,
        is_published: bool = False,
        user: User = None,
        title: str = "Customer Feedback"
    ) -> Form:
        form = Form(
            title=title,
            description="Tell us what you think",
            schema=[
                {"id": "1", "type": "text", "label": "Name", "required": True},
                {"id": "2", "type": "email", "label": "Email", "required": True},
            ],
            settings={"showTitle": True, "submitButtonText": "Submit"},
            is_published=is_published,
            user_id=user.id if user else None,
        )
        if form_id:
            form.id = form_id
        db_session.add(form)
        await db_session.commit()
        await db_session.refresh(form)
        return form

    return _make_form


@pytest.fixture
def auth_headers():
    """Builds a Bearer header carrying a session token for a user."""
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}

    return _auth_headers
