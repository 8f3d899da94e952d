"""Tests for PriceResolver."""

import httpx
import pytest

from app.prices.errors import ClientError, ConfigurationError, UpstreamUnavailable
from app.prices.resolver import normalize_symbol
from app.prices.seed_symbols import FALLBACK_STOCKS, FX_CURRENCIES

from .conftest import COIN_LIST_PATH, FX_PATH, PRICE_PATH, QUOTE_PATH, STOCK_SYMBOLS_PATH

COINS = [{"id": "kaspa", "symbol": "kas"}, {"id": "bitcoin", "symbol": "btc"}]


class TestNormalizeSymbol:
    """Unit tests for symbol normalization."""

    def test_uppercases_and_strips(self):
        assert normalize_symbol("  btc ") == "BTC"

    def test_stablecoin_alias(self):
        assert normalize_symbol("tether") == "USDT"
        assert normalize_symbol("usd coin") == "USDC"


@pytest.mark.asyncio
class TestResolve:
    """Unit tests for pair resolution and caching."""

    async def test_fx_identity_without_network(self, make_resolver, upstream):
        """Test that every supported (A, A) FX pair is 1 with no upstream call."""
        resolver = make_resolver()
        for code in FX_CURRENCIES:
            resolved = await resolver.resolve(code, code)
            assert resolved.data.price == 1
        assert upstream.requests == []

    async def test_default_quote_is_usd(self, make_resolver, upstream):
        """Test that a missing quote defaults to USD."""
        upstream.json(FX_PATH, {"rates": {"USD": 1.07}})
        resolved = await make_resolver().resolve("EUR", None)
        assert resolved.quote == "USD"
        assert resolved.data.price == 1.07

    async def test_cached_within_ttl(self, make_resolver, upstream, clock):
        """Test that a repeat lookup inside the TTL returns the same payload without refetching."""
        upstream.json(FX_PATH, {"rates": {"USD": 1.07}})
        resolver = make_resolver()

        first = await resolver.resolve("EUR", "USD")
        clock.advance(59)
        second = await resolver.resolve("eur", "usd")

        assert second is first
        assert second.to_dict() == first.to_dict()
        assert len(upstream.calls(FX_PATH)) == 1

    async def test_refetched_after_ttl(self, make_resolver, upstream, clock):
        """Test that an expired entry is resolved again."""
        upstream.json(FX_PATH, {"rates": {"USD": 1.07}})
        resolver = make_resolver()
        await resolver.resolve("EUR", "USD")

        clock.advance(60)
        upstream.json(FX_PATH, {"rates": {"USD": 1.09}})
        resolved = await resolver.resolve("EUR", "USD")

        assert resolved.data.price == 1.09
        assert len(upstream.calls(FX_PATH)) == 2

    async def test_crypto_via_catalog(self, make_resolver, upstream):
        """Test that a catalog symbol is priced by the spot adapter with its id."""
        upstream.json(COIN_LIST_PATH, COINS)
        upstream.json(PRICE_PATH, {"kaspa": {"eur": 0.11, "eur_24h_change": 4.0}})
        resolved = await make_resolver().resolve("kas", "eur")

        assert (resolved.base, resolved.quote) == ("KAS", "EUR")
        assert resolved.data.price == 0.11
        assert resolved.data.change["12h"] == 2.0
        assert upstream.calls(PRICE_PATH)[0].url.params["ids"] == "kaspa"

    async def test_catalog_outage_falls_back_to_top_coins(self, make_resolver, upstream):
        """Test that a catalog failure still prices the most common coins."""
        upstream.json(COIN_LIST_PATH, {}, status=503)
        upstream.json(PRICE_PATH, {"bitcoin": {"usd": 64000.0, "usd_24h_change": 1.0}})
        resolved = await make_resolver().resolve("BTC")
        assert resolved.data.price == 64000.0

    async def test_catalog_outage_does_not_break_fx(self, make_resolver, upstream):
        """Test that FX lookups do not depend on the crypto catalog."""
        upstream.json(COIN_LIST_PATH, {}, status=503)
        upstream.json(FX_PATH, {"rates": {"JPY": 161.2}})
        resolved = await make_resolver().resolve("EUR", "JPY")
        assert resolved.data.price == 161.2
        assert upstream.calls(COIN_LIST_PATH) == []

    async def test_stablecoin_in_peg_currency(self, make_resolver, upstream):
        """Test that a stablecoin quoted in USD carries peg data."""
        upstream.json(PRICE_PATH, {"tether": {"usd": 0.985}})
        resolved = await make_resolver().resolve("usdt")

        data = resolved.to_dict()["data"]
        assert data["peg"] == 1.0
        assert data["deviationPercent"] == -1.5
        assert data["isDepegged"] is True

    async def test_stablecoin_alias(self, make_resolver, upstream):
        """Test that a stablecoin name resolves to its canonical ticker."""
        upstream.json(PRICE_PATH, {"tether": {"usd": 1.0}})
        resolved = await make_resolver().resolve("Tether")
        assert resolved.base == "USDT"

    async def test_stablecoin_in_other_currency(self, make_resolver, upstream):
        """Test that a stablecoin quoted outside its peg currency is a plain spot price."""
        upstream.json(PRICE_PATH, {"usd-coin": {"eur": 0.92, "eur_24h_change": 0.1}})
        resolved = await make_resolver().resolve("USDC", "EUR")

        assert resolved.data.price == 0.92
        assert "peg" not in resolved.to_dict()["data"]
        params = upstream.calls(PRICE_PATH)[0].url.params
        assert params["ids"] == "usd-coin"
        assert params["vs_currencies"] == "eur"

    async def test_equity(self, make_resolver, upstream):
        """Test that unknown symbols are priced as equities."""
        upstream.json(COIN_LIST_PATH, COINS)
        upstream.json(QUOTE_PATH, {"c": 190.0, "h": 198.5, "l": 189.25, "o": 197.0, "pc": 200.0})
        resolved = await make_resolver(finnhub_key="k").resolve("aapl")

        data = resolved.to_dict()["data"]
        assert data["price"] == 190.0
        assert data["previousClose"] == 200.0
        assert data["change"]["percent"] == -5.0

    async def test_equity_without_credential(self, make_resolver, upstream):
        """Test that the equity fallback without a key is a configuration error."""
        upstream.json(COIN_LIST_PATH, COINS)
        with pytest.raises(ConfigurationError, match="API key missing"):
            await make_resolver().resolve("AAPL")
        assert upstream.calls(QUOTE_PATH) == []

    async def test_missing_base(self, make_resolver):
        """Test that an absent or blank base is a client error."""
        resolver = make_resolver()
        with pytest.raises(ClientError, match="Missing base asset"):
            await resolver.resolve(None)
        with pytest.raises(ClientError):
            await resolver.resolve("   ")

    async def test_adapter_error_propagates_with_context(self, make_resolver, upstream):
        """Test that the adapter's message is kept and the pair is attached."""
        upstream.json(FX_PATH, {}, status=502)
        with pytest.raises(UpstreamUnavailable) as exc_info:
            await make_resolver().resolve("EUR", "USD")

        assert exc_info.value.message == "FX provider unavailable (HTTP 502)"
        assert any("EUR/USD" in note for note in exc_info.value.__notes__)

    async def test_failures_are_not_cached(self, make_resolver, upstream):
        """Test that a failed lookup is retried on the next call."""
        resolver = make_resolver()
        upstream.fail(FX_PATH, httpx.ConnectError)
        with pytest.raises(UpstreamUnavailable):
            await resolver.resolve("EUR", "USD")

        upstream.json(FX_PATH, {"rates": {"USD": 1.07}})
        resolved = await resolver.resolve("EUR", "USD")
        assert resolved.data.price == 1.07

    async def test_unpriced_pairs_are_not_cached(self, make_resolver, upstream, clock):
        """Test that arbitrary quotes with no provider price leave the cache empty."""
        upstream.json(COIN_LIST_PATH, COINS)
        upstream.json(PRICE_PATH, {})
        resolver = make_resolver()

        for i in range(50):
            resolved = await resolver.resolve("BTC", f"junk{i}")
            assert resolved.data.price is None
        clock.advance(3600)

        assert len(resolver._results) == 0

    async def test_equity_outside_usd_rejected(self, make_resolver, upstream):
        """Test that a stock is never labelled with a currency it was not quoted in."""
        upstream.json(COIN_LIST_PATH, COINS)
        upstream.json(QUOTE_PATH, {"c": 190.0, "h": 198.5, "l": 189.25, "o": 197.0, "pc": 200.0})
        with pytest.raises(ClientError, match="only quoted in USD"):
            await make_resolver(finnhub_key="k").resolve("AAPL", "JPY")
        assert upstream.calls(QUOTE_PATH) == []


@pytest.mark.asyncio
class TestListings:
    """Tests for the options and stablecoin listings."""

    async def test_options_without_equity_key(self, make_resolver, upstream):
        """Test that options fall back to the static stock list."""
        upstream.json(COIN_LIST_PATH, COINS)
        options = await make_resolver().options()

        assert "kas" in options["crypto"]
        assert options["fx"] == sorted(FX_CURRENCIES)
        assert options["stocks"] == list(FALLBACK_STOCKS)
        assert upstream.calls(STOCK_SYMBOLS_PATH) == []

    async def test_options_live_stocks(self, make_resolver, upstream):
        """Test that options use the live equity listing when available."""
        upstream.json(COIN_LIST_PATH, COINS)
        upstream.json(STOCK_SYMBOLS_PATH, [{"symbol": "IBM"}, {"symbol": "AAPL"}])
        options = await make_resolver(finnhub_key="k").options()
        assert options["stocks"] == ["AAPL", "IBM"]

    async def test_options_stock_outage_falls_back(self, make_resolver, upstream):
        """Test that an equity listing failure uses the static list."""
        upstream.json(COIN_LIST_PATH, COINS)
        upstream.json(STOCK_SYMBOLS_PATH, {}, status=500)
        options = await make_resolver(finnhub_key="k").options()
        assert options["stocks"] == list(FALLBACK_STOCKS)

    async def test_options_cached_for_five_minutes(self, make_resolver, upstream, clock):
        """Test that options are rebuilt only after their TTL."""
        upstream.json(COIN_LIST_PATH, COINS)
        upstream.json(STOCK_SYMBOLS_PATH, [{"symbol": "AAPL"}])
        resolver = make_resolver(finnhub_key="k")

        await resolver.options()
        clock.advance(299)
        await resolver.options()
        assert len(upstream.calls(STOCK_SYMBOLS_PATH)) == 1

        clock.advance(1)
        await resolver.options()
        assert len(upstream.calls(STOCK_SYMBOLS_PATH)) == 2

    async def test_stablecoins_cached(self, make_resolver, upstream):
        """Test that the stablecoin listing is served from cache on repeat."""
        upstream.json(PRICE_PATH, {"tether": {"usd": 1.0}, "dai": {"usd": 0.999}})
        resolver = make_resolver()

        first = await resolver.stablecoins()
        second = await resolver.stablecoins()

        assert set(first) == {"USDT", "DAI"}
        assert second is first
        assert len(upstream.calls(PRICE_PATH)) == 1

    async def test_stablecoins_refreshed_like_single_pairs(self, make_resolver, upstream, clock):
        """Test that peg status expires after 60 seconds, not the options TTL."""
        upstream.json(PRICE_PATH, {"tether": {"usd": 1.0}})
        resolver = make_resolver()

        await resolver.stablecoins()
        clock.advance(59)
        await resolver.stablecoins()
        assert len(upstream.calls(PRICE_PATH)) == 1

        clock.advance(1)
        await resolver.stablecoins()
        assert len(upstream.calls(PRICE_PATH)) == 2
