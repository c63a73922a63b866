"""Shared fixtures.

Every test gets fresh caches, managers and clients; nothing is shared
between tests. Admin-core HTTP traffic goes through httpx.MockTransport.
"""

import base64
import json
from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

import httpx
import pytest

from core import ClientState
from template_resolver import ResolverManager, VariableCache
from template_resolver.variables import default_resolvers
from vacademy.admin_core import AdminCoreClient

BASE_URL = "https://admin.test/admin-core-service/v1"
INSTITUTE_URL = "https://admin.test/admin-core-service/institute/v1/details"
REPORT_URL = "https://admin.test/admin-core-service/live-session-report/by-session-id"

FIXED_NOW = datetime(2024, 1, 15, 10, 30, 0, tzinfo=ZoneInfo("Asia/Kolkata"))


class FakeClock:
    """Manually advanced epoch clock for cache expiry tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_token(claims: dict) -> str:
    """Unsigned JWT carrying the given claims."""

    def _segment(data: dict) -> str:
        raw = json.dumps(data).encode()
        return base64.urlsafe_b64encode(raw).decode().rstrip("=")

    return f"{_segment({'alg': 'none'})}.{_segment(claims)}.sig"


class RecordingHandler:
    """MockTransport handler that routes by path and records requests."""

    def __init__(self, routes: dict[str, Callable[[httpx.Request], httpx.Response]] | None = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, respond in self.routes.items():
            if request.url.path.endswith(suffix):
                return respond(request)
        return httpx.Response(404, json={"message": "not found"})

    def count(self, suffix: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(suffix))


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(fake_clock) -> VariableCache:
    return VariableCache(clock=fake_clock)


@pytest.fixture
def token() -> str:
    return make_token({"sub": "admin-1", "authorities": {"inst-1": {"roles": ["ADMIN"]}}})


@pytest.fixture
def client_state(token) -> ClientState:
    return ClientState(cookies={"accessToken": token})


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def admin_client(handler) -> AdminCoreClient:
    return AdminCoreClient(
        base_url=BASE_URL,
        institute_details_url=INSTITUTE_URL,
        live_session_report_url=REPORT_URL,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def manager(admin_client, cache) -> ResolverManager:
    """Manager with the standard resolvers, a fixed clock and no deadline."""
    return ResolverManager(
        default_resolvers(admin_client, clock=lambda: FIXED_NOW),
        cache=cache,
        resolution_timeout=0,
    )
