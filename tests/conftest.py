# tests/conftest.py
import pytest
import pytest_asyncio
from cryptography.fernet import Fernet

from api_client import FailureNotifier, build_client
from session_auth.storage import CredentialStore
from utils.storage import SecureStorage

from tests.helpers import BASE_URL, FakeBackend, RecordingNavigator


@pytest.fixture
def storage(tmp_path):
    return SecureStorage(directory=str(tmp_path / "credentials"), key=Fernet.generate_key().decode())


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def notifications():
    return []


@pytest_asyncio.fixture
async def make_services(storage, backend, navigator, notifications):
    """Build a client whose stored credential is loaded at construction"""
    built = []

    def factory(access="access-1", refresh="refresh-1", expires_in=3600, locale="en"):
        if access:
            CredentialStore(storage).set(access, refresh, expires_in)
        elif refresh:
            storage.set_item("refresh_token", refresh)
        services = build_client(
            navigator=navigator,
            notifier=FailureNotifier(sink=notifications.append),
            storage=storage,
            transport=backend.transport,
            base_url=BASE_URL,
            locale=locale,
        )
        built.append(services)
        return services

    yield factory

    for services in built:
        await services.aclose()
