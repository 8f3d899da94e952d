"""Price resolver: normalizes a pair, routes it to one provider, caches the result."""

from __future__ import annotations

import logging
from typing import Any

from .cache import ResultCache
from .catalog import CryptoCatalog
from .classifier import AssetClassifier
from .crypto import CryptoSpotAdapter
from .errors import ClientError, PriceError, UnsupportedAsset
from .fx import FxRateAdapter
from .models import AssetPair, Category, PriceRecord, ResolvedPrice
from .seed_symbols import FALLBACK_STOCKS, FX_CURRENCIES, STABLECOIN_ALIASES
from .stablecoins import StablecoinEvaluator
from .stocks import EquityQuoteAdapter

logger = logging.getLogger(__name__)

DEFAULT_QUOTE = "USD"
OPTIONS_TTL = 300.0  # seconds
EQUITY_QUOTE = "USD"

_OPTIONS_KEY = "options"
_STABLECOINS_KEY = "stablecoins"


def normalize_symbol(symbol: str) -> str:
    """Uppercase a symbol and map stablecoin aliases to the canonical ticker."""
    upper = symbol.strip().upper()
    return STABLECOIN_ALIASES.get(upper, upper)


class PriceResolver:
    """Resolves ``(base, quote)`` pairs to a ResolvedPrice.

    Steps for ``resolve``:
      1. normalize both symbols
      2. return the cached response verbatim if still fresh
      3. classify the base symbol, refreshing an expired crypto catalog when
         the symbol is not FX or a stablecoin (refresh never raises)
      4. dispatch to the matching adapter
      5. write the response through to the cache, unless the provider had no
         price for the pair

    Adapter errors propagate unchanged with the pair attached as a note.
    Concurrent requests for the same uncached pair may both reach the
    upstream; the later write wins.
    """

    def __init__(
        self,
        catalog: CryptoCatalog,
        classifier: AssetClassifier,
        fx: FxRateAdapter,
        crypto: CryptoSpotAdapter,
        stablecoins: StablecoinEvaluator,
        stocks: EquityQuoteAdapter,
        results: ResultCache[ResolvedPrice] | None = None,
        listings: ResultCache[Any] | None = None,
        peg_status: ResultCache[dict[str, PriceRecord]] | None = None,
    ) -> None:
        self._catalog = catalog
        self._classifier = classifier
        self._fx = fx
        self._crypto = crypto
        self._stablecoins = stablecoins
        self._stocks = stocks
        self._results: ResultCache[ResolvedPrice] = results if results is not None else ResultCache()
        self._listings: ResultCache[Any] = listings if listings is not None else ResultCache(ttl=OPTIONS_TTL)
        self._peg_status: ResultCache[dict[str, PriceRecord]] = (
            peg_status if peg_status is not None else ResultCache()
        )

    async def resolve(self, base: str | None, quote: str | None = DEFAULT_QUOTE) -> ResolvedPrice:
        if base is None or not base.strip():
            raise ClientError("Missing base asset")
        pair = AssetPair(
            base=normalize_symbol(base),
            quote=normalize_symbol(quote) if quote and quote.strip() else DEFAULT_QUOTE,
        )

        cached = self._results.get(pair.cache_key)
        if cached is not None:
            logger.debug("Cache hit for %s", pair)
            return cached

        category = await self._classify(pair.base)
        try:
            record = await self._dispatch(category, pair)
        except PriceError as e:
            e.add_note(f"while resolving {pair} as {category.value}")
            logger.warning("Failed to resolve %s as %s: %s", pair, category.value, e.message)
            raise

        resolved = ResolvedPrice(base=pair.base, quote=pair.quote, data=record)
        if record.price is None:
            logger.info("No %s price for %s, not caching", category.value, pair)
        else:
            self._results.set(pair.cache_key, resolved)
        return resolved

    async def options(self) -> dict[str, list[str]]:
        """Selectable symbols per category, cached for OPTIONS_TTL."""
        cached = self._listings.get(_OPTIONS_KEY)
        if cached is not None:
            return cached

        await self._catalog.ensure_fresh()
        options = {
            "crypto": self._catalog.symbols(),
            "fx": sorted(FX_CURRENCIES),
            "stocks": await self._stock_symbols(),
        }
        self._listings.set(_OPTIONS_KEY, options)
        return options

    async def stablecoins(self) -> dict[str, PriceRecord]:
        """Peg status of every registered stablecoin, cached like single pairs."""
        cached = self._peg_status.get(_STABLECOINS_KEY)
        if cached is not None:
            return cached

        records = await self._stablecoins.evaluate_all()
        self._peg_status.set(_STABLECOINS_KEY, records)
        return records

    # --- Internal ---

    async def _classify(self, base: str) -> Category:
        """Classify, refreshing the catalog first only when the answer depends on it."""
        category = self._classifier.classify(base)
        if category in (Category.CRYPTO, Category.EQUITY) and self._catalog.is_stale:
            await self._catalog.refresh()
            category = self._classifier.classify(base)
        return category

    async def _dispatch(self, category: Category, pair: AssetPair) -> PriceRecord:
        if category is Category.FX:
            return await self._fx.fetch_rate(pair.base, pair.quote)

        if category is Category.STABLECOIN:
            config = self._stablecoins.config_for(pair.base)
            if config is None:
                raise UnsupportedAsset(f"Unsupported stablecoin: {pair.base}")
            if pair.quote == config.peg_currency:
                return await self._stablecoins.evaluate(pair.base)
            # Peg data is only meaningful in the peg currency
            return await self._crypto.fetch_price(config.coin_id, pair.quote)

        if category is Category.CRYPTO:
            asset_id = self._catalog.resolve(pair.base)
            if asset_id is None:
                raise UnsupportedAsset(f"Unknown crypto asset: {pair.base}")
            return await self._crypto.fetch_price(asset_id, pair.quote)

        if pair.quote != EQUITY_QUOTE:
            raise ClientError(f"Stock prices are only quoted in {EQUITY_QUOTE}")
        return await self._stocks.fetch_quote(pair.base)

    async def _stock_symbols(self) -> list[str]:
        if not self._stocks.has_credential:
            return list(FALLBACK_STOCKS)
        try:
            return await self._stocks.list_symbols()
        except PriceError as e:
            logger.warning("Equity symbol list unavailable, using fallback: %s", e)
            return list(FALLBACK_STOCKS)
