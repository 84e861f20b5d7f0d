import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path

# Keep the app's module-level engine off the developer's database file
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from portfolio.dao import UserDAO
from portfolio.database import Base
from portfolio.deps import get_db, get_storage
from portfolio.main import app
from portfolio.storage import DatabaseStorage, FileSystemStorage, MediaStorage
from portfolio.utils.jwt import create_user_token
from portfolio.utils.passwords import hash_password

# Configure basic logging for tests
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET_KEY", "testsecret")
    monkeypatch.delenv("MEDIA_BASE_URL", raising=False)
    monkeypatch.delenv("MAX_UPLOAD_BYTES", raising=False)
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)


# Database Fixture (Overrides get_db dependency)
@pytest.fixture
def session() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fs_storage(tmp_path: Path) -> FileSystemStorage:
    return FileSystemStorage(base_path=str(tmp_path / "uploads"))


@pytest.fixture
def db_storage(session: Session) -> DatabaseStorage:
    _ = session  # tables must exist
    return DatabaseStorage(TestingSessionLocal)


@pytest.fixture(params=["filesystem", "database"])
def storage(
    request: pytest.FixtureRequest,
    fs_storage: FileSystemStorage,
    db_storage: DatabaseStorage,
) -> MediaStorage:
    """Each storage backend that needs no network access."""
    if request.param == "filesystem":
        return fs_storage
    return db_storage


@pytest.fixture
def client(
    session: Session, fs_storage: FileSystemStorage
) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: fs_storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session: Session) -> Callable[..., dict[str, str]]:
    """Create a user and return bearer auth headers for them."""

    def _make_user(
        username: str = "admin",
        role: str = "admin",
        password: str = "secret123",
    ) -> dict[str, str]:
        user = UserDAO(session).create(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        token = create_user_token(user.id, user.username, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _make_user


@pytest.fixture
def admin_headers(make_user: Callable[..., dict[str, str]]) -> dict[str, str]:
    return make_user()


@pytest.fixture
def user_headers(make_user: Callable[..., dict[str, str]]) -> dict[str, str]:
    return make_user(username="visitor", role="user")
