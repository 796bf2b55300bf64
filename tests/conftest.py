# tests/conftest.py
import os

# Set up test environment variables BEFORE any other imports
os.environ.setdefault("TASKBOARD_ENVIRONMENT", "testing")
os.environ.setdefault("TASKBOARD_API_BASE_URL", "http://testserver")

from datetime import UTC, datetime

import pytest
import pytest_asyncio

from taskboard.core.config import Settings
from taskboard.core.http import ApiClient
from taskboard.core.storage import MemoryStorage, TokenStore
from taskboard.domains.auth.service import AuthService
from taskboard.domains.auth.session import AuthSession
from taskboard.domains.project.service import ProjectService
from taskboard.domains.task.service import TaskService
from taskboard.main import create_app
from tests.fake_backend import BASE_URL, FakeBackend, RecordingTransport

TEST_EMAIL = "alice@example.com"
TEST_PASSWORD = "correct-horse"
TEST_FULL_NAME = "Alice Example"

# Fixed "now" for anything date-dependent
FROZEN_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


class Navigator:
    """Records navigation requests made by a screen."""

    def __init__(self):
        self.calls: list[tuple[str, dict | None]] = []

    def __call__(self, path: str, state: dict | None = None) -> None:
        self.calls.append((path, state))

    @property
    def last(self) -> str | None:
        return self.calls[-1][0] if self.calls else None


# Backend fixtures
@pytest.fixture
def backend():
    """Fake API with one registered user."""
    fake = FakeBackend()
    fake.add_user(TEST_EMAIL, TEST_PASSWORD, TEST_FULL_NAME)
    return fake


@pytest_asyncio.fixture
async def transport(backend):
    recording = RecordingTransport(backend.app)
    yield recording
    await recording.aclose()


# Client fixtures
@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def token_store(storage):
    return TokenStore(storage)


@pytest_asyncio.fixture
async def api_client(token_store, transport):
    client = ApiClient(BASE_URL, token_store, transport=transport)
    yield client
    await client.aclose()


@pytest.fixture
def auth_service(api_client, token_store):
    return AuthService(api_client, token_store)


@pytest.fixture
def project_service(api_client):
    return ProjectService(api_client)


@pytest.fixture
def task_service(api_client):
    return TaskService(api_client)


@pytest.fixture
def session(auth_service):
    return AuthSession(auth_service)


@pytest.fixture
def logged_in(backend, token_store):
    """Store a valid token for the test user, as after a previous login."""
    token = backend.issue_token(TEST_EMAIL)
    token_store.set(token)
    return token


@pytest_asyncio.fixture
async def authenticated_session(session, logged_in):
    await session.restore()
    assert session.is_authenticated
    return session


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def test_settings():
    return Settings(api_base_url=BASE_URL, environment="testing")


@pytest_asyncio.fixture
async def app(test_settings, storage, transport):
    application = create_app(
        test_settings, storage=storage, transport=transport, clock=lambda: FROZEN_NOW
    )
    yield application
    await application.client.aclose()
