"""TTL-refreshed crypto catalog (symbol -> provider asset id)."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .crypto import CryptoSpotAdapter
from .errors import PriceError
from .models import CryptoCatalogEntry
from .seed_symbols import TOP_COINS

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_TTL = 60.0  # seconds


class CryptoCatalog:
    """Maps lowercased crypto symbols to catalog ids.

    The whole table is rebuilt from a full catalog fetch once it is older
    than ``ttl`` and swapped in by reference, so readers never observe a
    half-built table. A failed refresh keeps the previous table; a failed
    attempt is not retried until another ``ttl`` has passed.

    Symbols shared by several coins resolve to the first one in upstream
    order, except symbols in TOP_COINS, which always resolve to the table's
    id. TOP_COINS also answers before the first refresh has ever succeeded.
    """

    def __init__(
        self,
        adapter: CryptoSpotAdapter,
        ttl: float = DEFAULT_CATALOG_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._adapter = adapter
        self._ttl = ttl
        self._clock = clock
        self._table: dict[str, str] = {}
        self._loaded_at: float | None = None
        self._attempted_at: float | None = None

    @property
    def loaded(self) -> bool:
        """True once at least one refresh has succeeded."""
        return self._loaded_at is not None

    @property
    def is_stale(self) -> bool:
        if self._attempted_at is None:
            return True
        return self._clock() - self._attempted_at >= self._ttl

    async def ensure_fresh(self) -> None:
        """Refresh the table if its TTL has expired. Never raises."""
        if self.is_stale:
            await self.refresh()

    async def refresh(self) -> bool:
        """Fetch the full catalog and swap it in. Returns False on failure."""
        self._attempted_at = self._clock()
        try:
            entries = await self._adapter.fetch_catalog()
        except PriceError as e:
            if self.loaded:
                logger.warning("Crypto catalog refresh failed, serving previous table: %s", e)
            else:
                logger.warning("Crypto catalog unavailable, serving %d top coins only: %s", len(TOP_COINS), e)
            return False

        self._table = _build_table(entries)
        self._loaded_at = self._attempted_at
        logger.info("Crypto catalog loaded: %d symbols", len(self._table))
        return True

    def resolve(self, symbol: str) -> str | None:
        """Catalog id for a symbol, or None if unknown."""
        key = symbol.strip().lower()
        return TOP_COINS.get(key) or self._table.get(key)

    def symbols(self) -> list[str]:
        """Every resolvable symbol, lowercased and sorted."""
        return sorted(set(self._table) | set(TOP_COINS))

    def __len__(self) -> int:
        return len(set(self._table) | set(TOP_COINS))

    def __contains__(self, symbol: str) -> bool:
        return self.resolve(symbol) is not None


def _build_table(entries: list[CryptoCatalogEntry]) -> dict[str, str]:
    table: dict[str, str] = {}
    for entry in entries:
        table.setdefault(entry.symbol.lower(), entry.id)
    return table
