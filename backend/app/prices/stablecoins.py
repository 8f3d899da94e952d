"""Stablecoin peg evaluation on top of the crypto spot adapter."""

from __future__ import annotations

import logging

from .crypto import CryptoSpotAdapter, spot_from_payload
from .errors import UnsupportedAsset, UpstreamUnavailable
from .models import PriceRecord, StablecoinConfig
from .seed_symbols import STABLECOINS

logger = logging.getLogger(__name__)

# A stablecoin is depegged once it drifts this many percent from its peg
DEPEG_THRESHOLD_PERCENT = 1.0


def peg_deviation(price: float, peg: float) -> float:
    """Percent deviation of price from peg, rounded to 4 decimal places."""
    if peg == 0:
        return 0.0
    return round((price - peg) / peg * 100, 4)


def peg_record(price: float, change_24h: float, config: StablecoinConfig) -> PriceRecord:
    deviation = peg_deviation(price, config.peg)
    return PriceRecord.from_daily_change(
        price,
        change_24h,
        extra={
            "peg": config.peg,
            "deviationPercent": deviation,
            "isDepegged": abs(deviation) >= DEPEG_THRESHOLD_PERCENT,
        },
    )


class StablecoinEvaluator:
    """Prices registered stablecoins against their peg currency."""

    def __init__(
        self,
        adapter: CryptoSpotAdapter,
        registry: dict[str, StablecoinConfig] | None = None,
    ) -> None:
        self._adapter = adapter
        self._registry = STABLECOINS if registry is None else registry

    def config_for(self, symbol: str) -> StablecoinConfig | None:
        return self._registry.get(symbol.strip().upper())

    def __contains__(self, symbol: str) -> bool:
        return self.config_for(symbol) is not None

    async def evaluate(self, symbol: str) -> PriceRecord:
        config = self.config_for(symbol)
        if config is None:
            raise UnsupportedAsset(f"Unsupported stablecoin: {symbol}")

        payload = await self._adapter.fetch_prices([config.coin_id], config.peg_currency)
        price, change_24h = spot_from_payload(payload, config.coin_id, config.peg_currency)
        if price is None:
            raise UpstreamUnavailable(f"Stablecoin data unavailable: {symbol}")
        return peg_record(price, change_24h, config)

    async def evaluate_all(self) -> dict[str, PriceRecord]:
        """Evaluate every registered stablecoin with one batched call per peg currency.

        Coins without a live price are left out rather than failing the batch.
        """
        by_currency: dict[str, list[StablecoinConfig]] = {}
        for config in self._registry.values():
            by_currency.setdefault(config.peg_currency, []).append(config)

        results: dict[str, PriceRecord] = {}
        for currency, configs in by_currency.items():
            payload = await self._adapter.fetch_prices([c.coin_id for c in configs], currency)
            for config in configs:
                price, change_24h = spot_from_payload(payload, config.coin_id, currency)
                if price is None:
                    logger.warning("No live price for stablecoin %s, skipping", config.symbol)
                    continue
                results[config.symbol] = peg_record(price, change_24h, config)
        return results
