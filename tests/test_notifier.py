# tests/test_notifier.py
import httpx
import pytest
from rich.console import Console

from api_client.notifier import SERVER_ERROR_MESSAGE, FailureNotifier, describe_error
from session_auth.errors import NetworkError, error_for_response

REQUEST = httpx.Request("GET", "http://api.test/items")


def http_error(status, **kwargs):
    return error_for_response(REQUEST, httpx.Response(status, request=REQUEST, **kwargs))


@pytest.mark.parametrize(
    "error,expected",
    [
        (http_error(404), "Resource not found. The requested item does not exist."),
        (http_error(403), "Permission denied. You do not have access to this resource."),
        (http_error(401), "Authentication required. Please log in to continue."),
        (http_error(400, json={"message": "Email is taken"}), "Email is taken"),
        (http_error(400, json={"error": "Bad date", "message": "ignored"}), "Bad date"),
        (http_error(400), "Invalid request. Please check your inputs."),
        (http_error(500), SERVER_ERROR_MESSAGE),
        (http_error(503, json={"message": "maintenance"}), SERVER_ERROR_MESSAGE),
        ("Session expired - Please login again", "Session expired - Please login again"),
    ],
)
def test_describe_error(error, expected):
    assert describe_error(error) == expected


def test_network_error_message():
    error = NetworkError("timed out", request=REQUEST)
    assert describe_error(error) == "Network error - Please check your connection (timed out)"


def test_notify_uses_sink():
    messages = []
    FailureNotifier(sink=messages.append).notify(http_error(404))
    assert messages == ["Resource not found. The requested item does not exist."]


def test_notify_never_raises():
    def broken(message):
        raise RuntimeError("toast unavailable")

    FailureNotifier(sink=broken).notify("anything")


def test_default_sink_prints_to_console():
    console = Console(record=True, width=120)
    FailureNotifier(console=console).notify("[bold]Session expired[/bold]")

    output = console.export_text()
    assert "[ERROR]" in output
    assert "[bold]Session expired[/bold]" in output
