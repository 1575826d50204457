"""
Test configuration and shared fakes for the batch image search service.
"""

import asyncio
import json
import logging
import os
from types import SimpleNamespace
from typing import Callable, Dict, List

# Keep test runs from writing data/app.log
os.environ.setdefault("LOG_FILE", "")

import pytest

from app.application.interfaces import ProviderResponse
from app.application.models import RouteConfig
from app.application.search import CategoryRouter, CredentialPool, NoThrottle, SearchClient
from app.application.use_cases.batch_search import BatchSearchUseCase
from app.core.exceptions import ProviderTransportError

logger = logging.getLogger(__name__)


def pytest_configure(config):  # pylint: disable=unused-argument
    """Quiet noisy libraries and keep app loggers verbose."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("app").setLevel(logging.DEBUG)


# -------------------- Provider responses --------------------
def _ok(*links: str) -> ProviderResponse:
    return ProviderResponse(200, json.dumps({"items": [{"link": l} for l in links]}))


def _quota(status: int = 403) -> ProviderResponse:
    body = {
        "error": {
            "code": status,
            "message": "Quota exceeded for quota metric 'Queries' of service",
            "errors": [{"reason": "rateLimitExceeded"}],
        }
    }
    return ProviderResponse(status, json.dumps(body))


def _error(status: int = 400, message: str = "Invalid Value") -> ProviderResponse:
    return ProviderResponse(status, json.dumps({"error": {"code": status, "message": message}}))


@pytest.fixture
def responses():
    """Factories for provider answers: ok(*links), quota(status), error(status)."""
    return SimpleNamespace(ok=_ok, quota=_quota, error=_error)


class FakeProvider:
    """Provider double driven by a responder(query, credential, scope_id, limit).

    The responder may return a ProviderResponse or raise (e.g. a transport
    error). Records calls and the peak number of concurrent fetches.
    """

    def __init__(self, responder: Callable[..., ProviderResponse], delay: float = 0.0):
        self.responder = responder
        self.delay = delay
        self.calls: List[Dict[str, object]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, query: str, *, credential: str, scope_id: str, limit: int):
        self.calls.append(
            {"query": query, "credential": credential, "scope_id": scope_id, "limit": limit}
        )
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            return self.responder(query, credential, scope_id, limit)
        finally:
            self.in_flight -= 1

    def credentials_used(self) -> List[str]:
        return [str(c["credential"]) for c in self.calls]


@pytest.fixture
def make_provider():
    def _make(responder, delay: float = 0.0) -> FakeProvider:
        return FakeProvider(responder, delay=delay)

    return _make


def raise_transport(*_args):
    raise ProviderTransportError("connection refused")


@pytest.fixture
def transport_failure():
    return raise_transport


# -------------------- Routing / pool / use case --------------------
CATEGORY_ROUTES = {
    "Транспорт": "CX_TRANSPORT",
    "Оборудование": "CX_EQUIPMENT",
    "Иное": "CX_MISC",
}
CATEGORY_ENV = {"CX_TRANSPORT": "cx-transport", "CX_EQUIPMENT": "cx-equipment"}


@pytest.fixture
def router() -> CategoryRouter:
    """Router where "Иное" is known but has no configured scope."""
    return CategoryRouter.from_environment(CATEGORY_ROUTES, CATEGORY_ENV)


@pytest.fixture
def route() -> RouteConfig:
    return RouteConfig(category="Транспорт", scope_id="cx-transport", source="CX_TRANSPORT")


@pytest.fixture
def pool() -> CredentialPool:
    return CredentialPool(["k1", "k2"])


@pytest.fixture
def make_use_case(router):
    """Build a BatchSearchUseCase over a provider with no politeness delay."""

    def _make(provider, keys=("k1", "k2"), **kwargs) -> BatchSearchUseCase:
        kwargs.setdefault("throttle", NoThrottle())
        client = SearchClient(provider, CredentialPool(keys))
        return BatchSearchUseCase(client, kwargs.pop("router", router), **kwargs)

    return _make
