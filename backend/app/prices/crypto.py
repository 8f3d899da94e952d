"""Crypto spot-price and catalog adapter (CoinGecko)."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .errors import InvalidUpstreamResponse
from .interface import UPSTREAM_TIMEOUT, ProviderAdapter
from .models import CryptoCatalogEntry, PriceRecord
from .schemas import CoinListItem, finite_or_none

logger = logging.getLogger(__name__)

COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"


class CryptoSpotAdapter(ProviderAdapter):
    """Wraps the CoinGecko ``/simple/price`` and ``/coins/list`` endpoints.

    Spot lookups are best-effort: a payload missing the price yields
    ``price=None`` and a missing 24h change yields ``0`` rather than an error,
    because illiquid assets legitimately omit those fields.
    """

    provider_name = "Crypto provider"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = COINGECKO_BASE_URL,
        timeout: float = UPSTREAM_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._base_url = base_url.rstrip("/")

    async def fetch_price(self, asset_id: str, quote: str) -> PriceRecord:
        """Spot price of one asset in ``quote`` with derived change buckets."""
        asset_id = asset_id.lower()
        quote = quote.lower()
        payload = await self.fetch_prices([asset_id], quote)
        price, change_24h = spot_from_payload(payload, asset_id, quote)
        return PriceRecord.from_daily_change(price, change_24h)

    async def fetch_prices(self, asset_ids: list[str], quote: str) -> dict[str, Any]:
        """Raw batched spot lookup: ``{asset_id: {quote: price, quote_24h_change: pct}}``."""
        params = {
            "ids": ",".join(asset_ids),
            "vs_currencies": quote.lower(),
            "include_24hr_change": "true",
        }
        payload = await self._get_json(f"{self._base_url}/simple/price", params)
        return payload if isinstance(payload, dict) else {}

    async def fetch_catalog(self) -> list[CryptoCatalogEntry]:
        """Full coin catalog in upstream order. Malformed items are dropped."""
        payload = await self._get_json(f"{self._base_url}/coins/list", {})
        if not isinstance(payload, list):
            raise InvalidUpstreamResponse("Invalid crypto catalog response")

        entries: list[CryptoCatalogEntry] = []
        for item in payload:
            try:
                coin = CoinListItem.model_validate(item)
            except ValidationError:
                continue
            entries.append(CryptoCatalogEntry(id=coin.id, symbol=coin.symbol))

        skipped = len(payload) - len(entries)
        if skipped:
            logger.debug("Dropped %d malformed catalog entries", skipped)
        return entries


def spot_from_payload(payload: dict[str, Any], asset_id: str, quote: str) -> tuple[float | None, float]:
    """Price and 24h change for one asset of a batched spot payload."""
    asset_id = asset_id.lower()
    quote = quote.lower()
    block = payload.get(asset_id)
    if not isinstance(block, dict):
        return None, 0.0
    price = finite_or_none(block.get(quote))
    change_24h = finite_or_none(block.get(f"{quote}_24h_change"))
    return price, change_24h if change_24h is not None else 0.0
