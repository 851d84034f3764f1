import json
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from market_proxy.config import Settings
from market_proxy.gateway import MarketDataGateway
from market_proxy.main import app, get_gateway


def make_settings(**overrides) -> Settings:
    values = {
        "polygon_api_key": "poly-test-key",
        "finnhub_api_key": "finn-test-key",
        "polygon_base_url": "https://polygon.test",
        "finnhub_base_url": "https://finnhub.test/api/v1",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class Upstream:
    """Scripted stand-in for the providers; records every request it sees."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body = {}
        self.raise_exc = None

    def respond(self, body=None, status_code: int = 200):
        self.body = body if body is not None else {}
        self.status_code = status_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_exc is not None:
            raise self.raise_exc
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, content=json.dumps(self.body).encode(),
                                  headers={"content-type": "application/json"})
        return httpx.Response(self.status_code, text=str(self.body))


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def client_factory(upstream) -> Callable[..., TestClient]:
    def _make(**overrides) -> TestClient:
        gateway = MarketDataGateway(make_settings(**overrides), transport=httpx.MockTransport(upstream))
        app.dependency_overrides[get_gateway] = lambda: gateway
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_factory) -> TestClient:
    return client_factory()
