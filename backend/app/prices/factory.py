"""Factories wiring the price subsystem from environment variables."""

from __future__ import annotations

import logging
import os

import httpx

from .catalog import CryptoCatalog
from .classifier import AssetClassifier
from .crypto import CryptoSpotAdapter
from .fx import FxRateAdapter
from .ratelimit import DEFAULT_MAX_REQUESTS, DEFAULT_WINDOW, SlidingWindowLimiter
from .resolver import PriceResolver
from .stablecoins import StablecoinEvaluator
from .stocks import EquityQuoteAdapter

logger = logging.getLogger(__name__)


def _env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def create_price_resolver(client: httpx.AsyncClient) -> PriceResolver:
    """Build a PriceResolver whose adapters share ``client``.

    - FINNHUB_API_KEY set and non-empty → equity lookups enabled
    - Otherwise → equity lookups fail with a configuration error
    - FX_API_KEY is forwarded to the FX provider when set
    """
    finnhub_key = _env("FINNHUB_API_KEY")
    if finnhub_key:
        logger.info("Equity quotes: Finnhub")
    else:
        logger.info("Equity quotes: disabled (FINNHUB_API_KEY not set)")

    crypto = CryptoSpotAdapter(client)
    catalog = CryptoCatalog(crypto)
    return PriceResolver(
        catalog=catalog,
        classifier=AssetClassifier(catalog),
        fx=FxRateAdapter(client, api_key=_env("FX_API_KEY")),
        crypto=crypto,
        stablecoins=StablecoinEvaluator(crypto),
        stocks=EquityQuoteAdapter(client, api_key=finnhub_key),
    )


def create_rate_limiter() -> SlidingWindowLimiter:
    """Build the request limiter from RATE_LIMIT_MAX / RATE_LIMIT_WINDOW."""
    max_requests = int(_env("RATE_LIMIT_MAX") or DEFAULT_MAX_REQUESTS)
    window = int(_env("RATE_LIMIT_WINDOW") or DEFAULT_WINDOW)
    logger.info("Rate limit: %d requests per %ds", max_requests, window)
    return SlidingWindowLimiter(max_requests=max_requests, window=window)
