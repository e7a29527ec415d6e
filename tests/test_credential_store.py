# tests/test_credential_store.py
import pytest

from session_auth.models import Credential
from session_auth.storage import ACCESS_TOKEN_KEY, EXPIRY_EPOCH_KEY, REFRESH_TOKEN_KEY, CredentialStore

NOW = 1_700_000_000


@pytest.fixture
def store(storage):
    return CredentialStore(storage, clock=lambda: NOW)


def test_empty_storage_loads_unauthenticated(store):
    credential = store.get()

    assert not credential.is_authenticated
    assert credential.access_token is None
    assert credential.refresh_token is None


def test_set_persists_and_reloads(store, storage):
    store.set("access-1", "refresh-1", 3600)

    reloaded = CredentialStore(storage, clock=lambda: NOW).get()
    assert reloaded == Credential(
        access_token="access-1",
        refresh_token="refresh-1",
        expiry_epoch=NOW + 3600,
        is_authenticated=True,
    )


def test_set_without_refresh_keeps_current_one(store):
    store.set("access-1", "refresh-1", 3600)
    store.set("access-2")

    assert store.access_token == "access-2"
    assert store.refresh_token == "refresh-1"
    assert store.expiry_epoch is None


def test_set_rejects_empty_access_token(store):
    store.set("access-1", "refresh-1")

    with pytest.raises(ValueError):
        store.set("")

    assert store.access_token == "access-1"


def test_clear_forgets_everything(store, storage):
    store.set("access-1", "refresh-1", 3600)

    store.clear()

    assert not store.is_authenticated
    assert store.refresh_token is None
    for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, EXPIRY_EPOCH_KEY):
        assert storage.get_item(key) is None


def test_refresh_token_alone_is_not_authenticated(storage):
    storage.set_item(REFRESH_TOKEN_KEY, "refresh-1")

    store = CredentialStore(storage)

    assert not store.is_authenticated
    assert store.refresh_token == "refresh-1"


def test_malformed_expiry_is_ignored(storage):
    storage.set_item(ACCESS_TOKEN_KEY, "access-1")
    storage.set_item(EXPIRY_EPOCH_KEY, "tomorrow")

    store = CredentialStore(storage)

    assert store.is_authenticated
    assert store.expiry_epoch is None


def test_authenticated_credential_requires_access_token():
    with pytest.raises(ValueError):
        Credential(refresh_token="refresh-1", is_authenticated=True)


def test_status(store):
    assert store.get_status()["has_tokens"] is False

    store.set("access-1", "refresh-1", 3600)
    status = store.get_status()

    assert status["has_tokens"] is True
    assert status["has_refresh_token"] is True
    assert status["is_expired"] is False
    assert status["time_until_expiry"] == "1h 0m"
    assert status["expires_in_seconds"] == 3600


def test_status_for_expired_token(storage):
    clock = {"now": NOW}
    store = CredentialStore(storage, clock=lambda: clock["now"])
    store.set("access-1", "refresh-1", 60)
    clock["now"] = NOW + 60 + 5 * 60

    status = store.get_status()

    assert status["is_expired"] is True
    assert status["time_until_expiry"] == "5m ago"
    assert status["expires_in_seconds"] == 0


def test_failed_write_leaves_previous_credential_on_disk(store, storage, monkeypatch):
    original = store.set("access-1", "refresh-1", 3600)
    write = storage.set_item

    def flaky_set_item(name, value):
        if name == REFRESH_TOKEN_KEY:
            raise OSError("disk full")
        write(name, value)

    monkeypatch.setattr(storage, "set_item", flaky_set_item)

    with pytest.raises(OSError):
        store.set("access-2", "refresh-2", 60)

    monkeypatch.undo()
    assert store.get() == original
    assert CredentialStore(storage, clock=lambda: NOW).get() == original
