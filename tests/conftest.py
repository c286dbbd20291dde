# tests/conftest.py

from pathlib import Path

import pytest
import pytz

from wavenote.config import DashboardSettings
from wavenote.database import JsonDocumentStore
from wavenote.models.user import User
from wavenote.services import AuthService, AuthSession, TaskService

from .fakes import RecordingStore


@pytest.fixture()
def settings(tmp_path: Path) -> DashboardSettings:
    """Settings pointing at a per-test data directory"""
    return DashboardSettings(
        ENVIRONMENT="testing",
        SECRET_KEY="test-secret-key",
        DATA_DIR=tmp_path / "data",
        LOGS_DIR=tmp_path / "logs",
        LOG_TO_FILE=False,
        TIMEZONE="Europe/Berlin",
    )


@pytest.fixture()
def store(tmp_path: Path) -> RecordingStore:
    return RecordingStore(tmp_path / "store")


@pytest.fixture()
def auth_service(store: JsonDocumentStore) -> AuthService:
    # Few PBKDF2 rounds keep the suite fast
    return AuthService(store, min_password_length=6, iterations=1_000)


@pytest.fixture()
def user() -> User:
    return User(uid="user-1", email="ada@example.com")


@pytest.fixture()
def session(user: User) -> AuthSession:
    """Session with a signed-in user"""
    session = AuthSession("session-1")
    session.current_user = user
    return session


@pytest.fixture()
def anonymous_session() -> AuthSession:
    return AuthSession("session-anon")


@pytest.fixture()
def task_service(store: JsonDocumentStore, session: AuthSession) -> TaskService:
    return TaskService(store, session, tz=pytz.timezone("Europe/Berlin"))
