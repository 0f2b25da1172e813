import os

# Point settings at throwaway backends before any jobtracker module is imported.
os.environ["ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["WEBDAV_URL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobtracker.core.base import Base
from jobtracker.core import config as app_config

# Import models so they register with SQLAlchemy metadata.
from jobtracker.models.job_application import JobApplication  # noqa: F401
from jobtracker.models.job_file import JobFile  # noqa: F401

from jobtracker.core.database import get_db
from jobtracker.dependencies.storage import get_file_store
from jobtracker.services.webdav import InMemoryFileStore, WebDAVError


class RecordingFileStore(InMemoryFileStore):
    """
    In-memory store that remembers every upload and can be told to fail for given file names.
    """

    def __init__(self) -> None:
        super().__init__()
        self.uploads: list[str] = []
        self.deleted: list[str] = []
        self.fail_on: set[str] = set()

    def upload_file(self, data: bytes, path: str, content_type: str | None = None) -> None:
        if path.rsplit("/", 1)[-1] in self.fail_on:
            raise WebDAVError(f"PUT {path} returned 507")
        super().upload_file(data, path, content_type)
        with self._lock:
            self.uploads.append(path)

    def delete(self, path: str) -> None:
        super().delete(path)
        with self._lock:
            self.deleted.append(path)


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # The in-memory DB persists across tests with StaticPool; reset schema per test.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def file_store():
    return RecordingFileStore()


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Restore process-global settings that individual tests tweak.
    """
    keys = [
        "MAX_UPLOAD_BYTES",
        "MAX_CONCURRENT_UPLOADS",
        "WEBDAV_ROOT",
        "WEBDAV_URL",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)


@pytest.fixture()
def app(db_session, file_store):
    from jobtracker.main import app as fastapi_app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_file_store] = lambda: file_store
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c
