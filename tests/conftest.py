import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session
from typing import Generator

from core.config import Settings
from core.database import Base
from main import create_app
from models.users import User
from repositories.sessions import SessionRepository
from repositories.users import UserRepository
from services.auth_service import AuthService
from utils.hashing import hash_password
from utils.ids import uuid7

TEST_PASSWORD = "TestPassword123!"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for an isolated app: fresh SQLite file and log dir per test."""
    return Settings(
        ENV="testing",
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY="test-secret-key",
        LOG_LEVEL="WARNING",
        LOG_DIR=str(tmp_path / "logs"),
    )


@pytest.fixture
def app(settings):
    """
    Application built through the factory, with all tables created.
    """
    app = create_app(settings)
    context = app.state.context

    Base.metadata.create_all(bind=context.engine)

    yield app

    Base.metadata.drop_all(bind=context.engine)
    context.close()


@pytest.fixture
def context(app):
    return app.state.context


@pytest.fixture
def session(context) -> Generator[Session, None, None]:
    """
    A database session on the same engine the app uses, for arranging
    data and asserting on what the app persisted.
    """
    db = context.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
async def client(app):
    """
    Yields an HTTP client that talks to the app in-process.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def auth_service(session, context) -> AuthService:
    return AuthService(
        users=UserRepository(session),
        sessions=SessionRepository(context.session_factory),
        tokens=context.token_service,
        max_sessions=context.settings.MAX_SESSIONS_PER_USER,
        default_photo_url=context.settings.DEFAULT_PHOTO_URL,
    )


@pytest.fixture
def verified_user(session) -> User:
    """An existing email/password account."""
    user = User(
        id=uuid7(),
        full_name="Test User",
        email="testuser@example.com",
        hashed_password=hash_password(TEST_PASSWORD),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def auth_headers(context, verified_user) -> dict:
    """Bearer header for verified_user."""
    token = context.token_service.issue(verified_user.id, verified_user.is_premium)
    return {"Authorization": f"Bearer {token}"}
