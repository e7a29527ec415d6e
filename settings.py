from pathlib import Path
from config.loader import get_config_loader

config = get_config_loader()

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "info")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "client_debug.log")

# Backend
API_BASE_URL = config.get("API_BASE_URL", "http://localhost:3000")

# Endpoint paths (fixed by the backend contract - not user configurable)
REFRESH_PATH = "/auth/refresh"
LOGIN_PATH = "/auth/login"
SIGNUP_PATH = "/auth/register"
LOGOUT_PATH = "/auth/logout"
FORGOT_PASSWORD_PATH = "/users/me/forget-password"
GOOGLE_LOGIN_PATH = "/auth/google/login"
FACEBOOK_LOGIN_PATH = "/auth/facebook/login"
CURRENT_USER_PATH = "/users/me"
VERIFY_EMAIL_PATH = "/users/me/verify-email"
SOCIAL_CALLBACK_URL = "dabbler://auth"

# Timeouts (seconds)
# Transport timeout for every outbound call; expiry is reported as a network failure
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 20.0)
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
REFRESH_TIMEOUT = config.get("REFRESH_TIMEOUT", 20.0)

# Refresh access tokens that expire within this window
REFRESH_SKEW_SECONDS = config.get("REFRESH_SKEW_SECONDS", 300)

# Locale sent as x-lang on every call
DEFAULT_LOCALE = config.get("DEFAULT_LOCALE", "en")

# Credential storage
CREDENTIALS_DIR = config.get("CREDENTIALS_DIR", str(Path.home() / ".session-api-client"))
# Fernet key (urlsafe base64); a key file is generated inside CREDENTIALS_DIR when unset
CREDENTIALS_KEY = config.get("CREDENTIALS_KEY", "")

# Query cache
QUERY_STALE_SECONDS = config.get("QUERY_STALE_SECONDS", 300)
QUERY_CACHE_MAX_ENTRIES = config.get("QUERY_CACHE_MAX_ENTRIES", 1000)

# User-facing messages
SESSION_EXPIRED_MESSAGE = "Session expired - Please login again"
