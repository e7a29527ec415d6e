# tests/helpers.py
import asyncio
from typing import Callable, Dict, List, Optional

import httpx

from session_auth.navigation import Navigator

BASE_URL = "http://api.test"


class FakeBackend:
    """In-process backend served through httpx.MockTransport

    Accepts only the current access token on regular routes and rotates the
    token pair on ``/auth/refresh``.
    """

    def __init__(self):
        self.valid_tokens = {"access-1"}
        self.refresh_tokens: Dict[str, tuple] = {"refresh-1": ("access-2", "refresh-2")}
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.calls: List[httpx.Request] = []
        self.refresh_gate: Optional[Callable] = None
        self.refresh_response: Optional[httpx.Response] = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path

        if path == "/auth/refresh":
            if self.refresh_gate is not None:
                await self.refresh_gate()
            if self.refresh_response is not None:
                return self.refresh_response
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            if token not in self.refresh_tokens:
                return httpx.Response(401, json={"message": "Invalid refresh token"})
            access, refresh = self.refresh_tokens[token]
            self.valid_tokens = {access}
            return httpx.Response(200, json={"accessToken": access, "refreshToken": refresh, "expiresIn": 3600})

        if path in self.routes:
            return self.routes[path](request)

        auth = request.headers.get("Authorization")
        if auth not in {f"Bearer {t}" for t in self.valid_tokens}:
            return httpx.Response(401, json={"message": "Unauthorized"})
        return httpx.Response(200, json={"path": path, "authorization": auth})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> List[str]:
        return [r.url.path for r in self.calls]

    def refresh_calls(self) -> List[httpx.Request]:
        return [r for r in self.calls if r.url.path == "/auth/refresh"]


class RecordingNavigator(Navigator):
    def __init__(self):
        self.login_prompts: List[Optional[str]] = []
        self.after_login: List[Optional[str]] = []

    def navigate_to_login(self, message=None):
        self.login_prompts.append(message)

    def navigate_after_login(self, redirect_path=None):
        self.after_login.append(redirect_path)


async def wait_until(predicate, timeout: float = 2.0):
    """Yield to the event loop until predicate() holds"""
    async def poll():
        while not predicate():
            await asyncio.sleep(0)

    await asyncio.wait_for(poll(), timeout)


