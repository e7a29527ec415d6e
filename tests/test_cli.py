# tests/test_cli.py
import pytest
from rich.console import Console

from cli.main import _parse_params
from cli.status_display import get_auth_status, show_token_status
from session_auth.auth_state import AuthState
from session_auth.storage import CredentialStore


def test_parse_params():
    assert _parse_params(["page=2", "q=a=b"]) == {"page": "2", "q": "a=b"}
    assert _parse_params(None) == {}
    with pytest.raises(ValueError):
        _parse_params(["page"])


def test_auth_status_labels(storage):
    store = CredentialStore(storage)
    assert get_auth_status(store) == ("NO AUTH", "No tokens available")

    storage.set_item("refresh_token", "refresh-1")
    assert get_auth_status(CredentialStore(storage))[0] == "REFRESHABLE"

    store.set("access-1", "refresh-1")
    assert get_auth_status(store) == ("VALID", "Expiry unknown")

    store.set("access-1", "refresh-1", 5400)
    label, detail = get_auth_status(store)
    assert label == "VALID"
    assert detail.startswith("Expires in 1h")


def test_status_table_hides_secrets(storage):
    store = CredentialStore(storage)
    store.set("access-secret", "refresh-secret", 3600)
    console = Console(record=True, width=120)

    show_token_status(store, AuthState(is_authenticated=True), console)

    output = console.export_text()
    assert "Session Status" in output
    assert "access-secret" not in output
    assert "refresh-secret" not in output
