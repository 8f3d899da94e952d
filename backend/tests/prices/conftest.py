"""Fixtures for price subsystem tests.

Upstream providers are replaced by ``FakeUpstream``, an ``httpx.MockTransport``
handler keyed by URL path, so adapters run their real request and parsing code.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from app.prices.cache import ResultCache
from app.prices.catalog import CryptoCatalog
from app.prices.classifier import AssetClassifier
from app.prices.crypto import CryptoSpotAdapter
from app.prices.fx import FxRateAdapter
from app.prices.resolver import OPTIONS_TTL, PriceResolver
from app.prices.stablecoins import StablecoinEvaluator
from app.prices.stocks import EquityQuoteAdapter

PRICE_PATH = "/api/v3/simple/price"
COIN_LIST_PATH = "/api/v3/coins/list"
FX_PATH = "/latest"
QUOTE_PATH = "/api/v1/quote"
STOCK_SYMBOLS_PATH = "/api/v1/stock/symbol"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Serves canned responses per URL path and records every request."""

    def __init__(self) -> None:
        self._routes: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def json(self, path: str, body: Any, status: int = 200) -> None:
        self._routes[path] = lambda request: httpx.Response(status, json=body)

    def handle(self, path: str, handler: Handler) -> None:
        self._routes[path] = handler

    def fail(self, path: str, exc: type[httpx.TransportError]) -> None:
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise exc("upstream down", request=request)

        self._routes[path] = raise_error

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._dispatch))

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def http_client(upstream: FakeUpstream) -> httpx.AsyncClient:
    return upstream.client()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_resolver(http_client: httpx.AsyncClient, clock: FakeClock):
    """Build a fully wired PriceResolver over the fake upstream."""

    def _make(finnhub_key: str | None = None) -> PriceResolver:
        crypto = CryptoSpotAdapter(http_client)
        catalog = CryptoCatalog(crypto, clock=clock)
        return PriceResolver(
            catalog=catalog,
            classifier=AssetClassifier(catalog),
            fx=FxRateAdapter(http_client),
            crypto=crypto,
            stablecoins=StablecoinEvaluator(crypto),
            stocks=EquityQuoteAdapter(http_client, api_key=finnhub_key),
            results=ResultCache(clock=clock),
            listings=ResultCache(ttl=OPTIONS_TTL, clock=clock),
            peg_status=ResultCache(clock=clock),
        )

    return _make
