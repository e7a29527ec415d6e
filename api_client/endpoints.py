"""Backend endpoint wrappers used by the auth flows"""

from typing import Any, Dict

from headers import AUTHORIZATION_HEADER, bearer
from settings import (
    CURRENT_USER_PATH,
    FACEBOOK_LOGIN_PATH,
    FORGOT_PASSWORD_PATH,
    GOOGLE_LOGIN_PATH,
    LOGIN_PATH,
    LOGOUT_PATH,
    REFRESH_PATH,
    SIGNUP_PATH,
    VERIFY_EMAIL_PATH,
)
from session_auth.models import CallOptions, TokenResponse
from .client import AuthenticatedClient


class AuthAPI:
    """Authentication endpoints"""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    async def login(self, email: str, password: str) -> TokenResponse:
        response = await self.client.post(
            LOGIN_PATH,
            json={"email": email, "password": password},
            options=CallOptions(skip_auth_refresh=True),
        )
        return TokenResponse.model_validate(response.json())

    async def signup(self, email: str, password: str, first_name: str, last_name: str) -> TokenResponse:
        response = await self.client.post(
            SIGNUP_PATH,
            json={
                "email": email,
                "password": password,
                "firstName": first_name,
                "lastName": last_name,
            },
            options=CallOptions(skip_auth_refresh=True),
        )
        return TokenResponse.model_validate(response.json())

    async def logout(self):
        # Sent with the current credential but never refreshed: the session is being discarded
        await self.client.post(LOGOUT_PATH, options=CallOptions(retry=True, skip_error_tooltip=True))

    async def forgot_password(self, email: str):
        await self.client.post(
            FORGOT_PASSWORD_PATH,
            json={"email": email},
            options=CallOptions(skip_auth_refresh=True),
        )

    async def exchange_token(self, token: str) -> TokenResponse:
        """Exchange a token from a social login callback for a credential"""
        response = await self.client.get(
            REFRESH_PATH,
            headers={AUTHORIZATION_HEADER: bearer(token)},
            options=CallOptions(skip_auth_refresh=True),
        )
        return TokenResponse.model_validate(response.json())

    def google_login_url(self) -> str:
        return f"{self.client.base_url}{GOOGLE_LOGIN_PATH}"

    def facebook_login_url(self) -> str:
        return f"{self.client.base_url}{FACEBOOK_LOGIN_PATH}"


class UserAPI:
    """Current user endpoints"""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    async def get_current_user(self) -> Dict[str, Any]:
        response = await self.client.get(CURRENT_USER_PATH)
        return response.json()

    async def verify_email(self):
        await self.client.post(VERIFY_EMAIL_PATH)

    async def update_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.patch(CURRENT_USER_PATH, json=data)
        return response.json()
