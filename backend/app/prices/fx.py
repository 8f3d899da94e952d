"""FX-rate adapter (Frankfurter-compatible ``/latest`` endpoint)."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from .errors import InvalidUpstreamResponse, UpstreamUnavailable
from .interface import UPSTREAM_TIMEOUT, ProviderAdapter
from .models import PriceRecord
from .schemas import FxRatesResponse
from .seed_symbols import ANCHOR_CURRENCY

logger = logging.getLogger(__name__)

FX_URL = "https://api.frankfurter.app/latest"


class FxRateAdapter(ProviderAdapter):
    """Fetches spot exchange rates.

    Providers on the free tier often only quote against a fixed anchor, so a
    pair the provider cannot express directly is pivoted through USD:

        rate(B/Q) = rate(USD/Q) / rate(USD/B)

    Both legs come from one batched call. FX feeds carry no change history,
    so every change bucket is None.
    """

    provider_name = "FX provider"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None = None,
        url: str = FX_URL,
        timeout: float = UPSTREAM_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._api_key = api_key
        self._url = url

    async def fetch_rate(self, base: str, quote: str) -> PriceRecord:
        base = base.strip().upper()
        quote = quote.strip().upper()

        if base == quote:
            return PriceRecord.unchanged(1.0)

        direct = await self._fetch(base, [quote])
        rate = direct.rates.get(quote)
        as_of = direct.date

        if rate is None and ANCHOR_CURRENCY not in (base, quote):
            logger.debug("FX %s/%s not quoted directly, pivoting via %s", base, quote, ANCHOR_CURRENCY)
            pivot = await self._fetch(ANCHOR_CURRENCY, [base, quote])
            base_rate = pivot.rates.get(base)
            quote_rate = pivot.rates.get(quote)
            if base_rate and quote_rate is not None:
                rate = quote_rate / base_rate
                as_of = pivot.date

        if rate is None:
            raise UpstreamUnavailable(f"FX rate unavailable for pair {base}/{quote}")

        return PriceRecord.unchanged(round(rate, 8), extra={"asOf": as_of} if as_of else {})

    async def _fetch(self, base: str, symbols: list[str]) -> FxRatesResponse:
        params = {"base": base, "symbols": ",".join(symbols)}
        if self._api_key:
            params["access_key"] = self._api_key

        payload = await self._get_json(self._url, params)
        try:
            return FxRatesResponse.model_validate(payload)
        except ValidationError as e:
            raise InvalidUpstreamResponse("Invalid FX provider response structure") from e
