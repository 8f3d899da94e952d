"""Data models for price resolution."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

CHANGE_BUCKETS: tuple[str, ...] = ("5m", "30m", "1h", "12h", "24h")


class Category(str, Enum):
    """Provider category a base symbol is routed to."""

    FX = "fx"
    STABLECOIN = "stablecoin"
    CRYPTO = "crypto"
    EQUITY = "equity"


@dataclass(frozen=True, slots=True)
class AssetPair:
    """A normalized (base, quote) pair. Both symbols are uppercase."""

    base: str
    quote: str

    @property
    def cache_key(self) -> str:
        return f"price:{self.base.lower()}-{self.quote.lower()}"

    def __str__(self) -> str:
        return f"{self.base}/{self.quote}"


@dataclass(frozen=True, slots=True)
class PriceRecord:
    """Normalized price with change-over-time buckets.

    ``change`` maps every bucket in CHANGE_BUCKETS to a percentage, ``0`` when
    the bucket is known to be unobtainable from the provider, or ``None`` when
    the provider has no change data at all (FX).

    ``extra`` holds category-specific fields (OHLC for equities, peg data for
    stablecoins) and ``change_extra`` holds extra keys merged into ``change``.
    """

    price: float | None
    change: dict[str, float | None]
    extra: dict[str, Any] = field(default_factory=dict)
    change_extra: dict[str, float] = field(default_factory=dict)

    @classmethod
    def unchanged(cls, price: float | None, **kwargs: Any) -> PriceRecord:
        """Record for a provider with no change data (every bucket is None)."""
        return cls(price=price, change={bucket: None for bucket in CHANGE_BUCKETS}, **kwargs)

    @classmethod
    def from_daily_change(cls, price: float | None, change_24h: float, **kwargs: Any) -> PriceRecord:
        """Record derived from a single 24h percentage.

        12h is approximated as half the 24h change; finer buckets need an
        intraday feed and are reported as 0.
        """
        return cls(
            price=price,
            change={
                "5m": 0,
                "30m": 0,
                "1h": 0,
                "12h": round(change_24h / 2, 2),
                "24h": round(change_24h, 2),
            },
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        change: dict[str, Any] = {**self.change_extra, **self.change}
        return {"price": self.price, **self.extra, "change": change}


@dataclass(frozen=True, slots=True)
class CryptoCatalogEntry:
    """One coin from the crypto catalog."""

    id: str
    symbol: str


@dataclass(frozen=True, slots=True)
class StablecoinConfig:
    """Static registry entry for a stablecoin."""

    symbol: str
    coin_id: str
    peg: float = 1.0
    peg_currency: str = "USD"


@dataclass(frozen=True, slots=True)
class ResolvedPrice:
    """Fully resolved price for a pair, as served and cached."""

    base: str
    quote: str
    data: PriceRecord
    timestamp: int = field(default_factory=lambda: int(time.time()))  # Unix seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "ok",
            "base": self.base,
            "quote": self.quote,
            "data": self.data.to_dict(),
            "timestamp": self.timestamp,
        }
