"""Equity-quote adapter (Finnhub)."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from .errors import ConfigurationError, InvalidUpstreamResponse, UnsupportedAsset
from .interface import UPSTREAM_TIMEOUT, ProviderAdapter
from .models import PriceRecord
from .schemas import EquityQuote, EquitySymbol

logger = logging.getLogger(__name__)

FINNHUB_BASE_URL = "https://finnhub.io/api/v1"


class EquityQuoteAdapter(ProviderAdapter):
    """Wraps Finnhub ``/quote`` and ``/stock/symbol``.

    Unlike crypto, a quote with any missing or non-finite OHLC field is an
    error: Finnhub signals an unknown ticker that way, and there is no
    meaningful degraded value for a stock price. An all-zero quote is the
    other form of the same signal.
    """

    provider_name = "Finnhub"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = FINNHUB_BASE_URL,
        timeout: float = UPSTREAM_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._api_key = api_key or None
        self._base_url = base_url.rstrip("/")

    @property
    def has_credential(self) -> bool:
        return self._api_key is not None

    async def fetch_quote(self, ticker: str) -> PriceRecord:
        ticker = ticker.strip().upper()
        self._require_credential()

        payload = await self._get_json(
            f"{self._base_url}/quote",
            {"symbol": ticker, "token": self._api_key},
        )
        try:
            quote = EquityQuote.model_validate(payload)
        except ValidationError as e:
            raise UnsupportedAsset(f"Invalid stock symbol or empty data for {ticker}") from e
        if quote.c == 0 and quote.pc == 0:
            raise UnsupportedAsset(f"Invalid stock symbol or empty data for {ticker}")

        percent = _percent_change(quote.c, quote.pc)
        return PriceRecord.from_daily_change(
            quote.c,
            percent,
            extra={
                "open": quote.o,
                "high": quote.h,
                "low": quote.l,
                "previousClose": quote.pc,
            },
            change_extra={
                "absolute": round(quote.c - quote.pc, 4),
                "percent": percent,
            },
        )

    async def list_symbols(self, exchange: str = "US") -> list[str]:
        """Every ticker listed on ``exchange``, uppercased and sorted."""
        self._require_credential()
        payload = await self._get_json(
            f"{self._base_url}/stock/symbol",
            {"exchange": exchange, "token": self._api_key},
        )
        if not isinstance(payload, list):
            raise InvalidUpstreamResponse("Invalid Finnhub symbol list response")

        symbols: set[str] = set()
        for item in payload:
            try:
                symbols.add(EquitySymbol.model_validate(item).symbol.upper())
            except ValidationError:
                continue
        return sorted(symbols)

    def _require_credential(self) -> None:
        if not self.has_credential:
            raise ConfigurationError("Stock pricing unavailable (API key missing)")

    def _rate_limited_message(self) -> str:
        return "Finnhub rate limit exceeded"

    def _unauthorized_message(self) -> str:
        return "Invalid Finnhub API key"

    def _unavailable_message(self, reason: str) -> str:
        return "Failed to fetch stock data from Finnhub"


def _percent_change(current: float, previous: float) -> float:
    if previous == 0:
        return 0.0
    return round((current - previous) / previous * 100, 2)
