"""Status display functionality for CLI"""

from rich.table import Table
from session_auth.auth_state import AuthState
from session_auth.storage import CredentialStore


def get_auth_status(store: CredentialStore) -> tuple[str, str]:
    """
    Get authentication status and expiry info

    Args:
        store: CredentialStore instance

    Returns:
        Tuple of (status, detail_message)
    """
    status = store.get_status()

    if not status["has_tokens"]:
        if status["has_refresh_token"]:
            return "REFRESHABLE", "No access token, refresh token available"
        return "NO AUTH", "No tokens available"

    if status["is_expired"]:
        return "EXPIRED", f"Expired {status['time_until_expiry']}"

    if status["expires_at"]:
        return "VALID", f"Expires in {status['time_until_expiry']}"

    return "VALID", "Expiry unknown"


def show_token_status(store: CredentialStore, auth_state: AuthState, console):
    """
    Display detailed credential status

    Args:
        store: CredentialStore instance
        auth_state: Current auth state
        console: Rich console for output
    """
    status = store.get_status()
    label, detail = get_auth_status(store)

    table = Table(title="Session Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Status", f"{label} ({detail})")
    table.add_row("Authenticated", "Yes" if auth_state.is_authenticated else "No")
    table.add_row("Has Access Token", "Yes" if status["has_tokens"] else "No")
    table.add_row("Has Refresh Token", "Yes" if status["has_refresh_token"] else "No")

    if status["expires_at"]:
        table.add_row("Expires At", status["expires_at"])
        table.add_row("Time Until Expiry", status["time_until_expiry"])

    if auth_state.user:
        table.add_row("User", str(auth_state.user.get("email", auth_state.user.get("id", "-"))))

    table.add_row("Storage", str(store.storage.directory))

    console.print(table)
