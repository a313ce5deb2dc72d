"""
Shared pytest fixtures for the gateway tests.

The Crafter CMS API is replaced by FakeCrafterApi, an httpx.MockTransport
handler with canned per-route responses that records every request it sees.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from config import Settings
from models import WebsiteInfo
from session import SessionState

API_URL = "http://crafter.test/api"
WEBSITE = WebsiteInfo(id="site-42", name="Survival Network", url="https://play.example.com")


@dataclass
class CannedResponse:
    status_code: int = 200
    json_body: Any = None
    text: Optional[str] = None

    def build(self, request: httpx.Request) -> httpx.Response:
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text, request=request)
        return httpx.Response(self.status_code, json=self.json_body, request=request)


Route = Union[CannedResponse, Callable[[httpx.Request], httpx.Response]]


class FakeCrafterApi:
    """
    Routes requests by (method, path) and keeps a call history.

    Usage:
        def test_sign_in(fake_api):
            fake_api.add("POST", "/website/v2/site-42/auth/signin",
                         json_body={"success": True})
    """

    def __init__(self):
        self._routes: Dict[Tuple[str, str], Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status_code: int = 200, json_body: Any = None,
            text: Optional[str] = None) -> None:
        self._routes[(method, "/api" + path)] = CannedResponse(status_code, json_body, text)

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._routes[(method, "/api" + path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.raw_path.decode("ascii")))
        if route is None:
            return httpx.Response(500, text="mock not configured for this route", request=request)
        if isinstance(route, CannedResponse):
            return route.build(request)
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.last_request.content)


@pytest.fixture
def settings():
    return Settings(
        CRAFTER_API_URL=API_URL + "/",
        CRAFTER_LICENSE_KEY="LIC-1234",
        CRAFTER_SECRET_KEY="top-secret",
        CRAFTER_API_TIMEOUT=5,
    )


@pytest.fixture
def fake_api():
    return FakeCrafterApi()


@pytest.fixture
def session():
    return SessionState()


@pytest.fixture
def active_session():
    state = SessionState()
    state.publish(WEBSITE)
    return state
