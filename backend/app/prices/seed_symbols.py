"""Static symbol tables for classification and fallbacks."""

from .models import StablecoinConfig

# Currency codes priced through the FX provider
FX_CURRENCIES: frozenset[str] = frozenset(
    {"USD", "EUR", "GBP", "JPY", "AUD", "CAD", "CHF", "CNY", "NZD", "SEK"}
)

# Pivot currency for FX pairs the provider cannot quote directly
ANCHOR_CURRENCY = "USD"

STABLECOINS: dict[str, StablecoinConfig] = {
    "USDT": StablecoinConfig(symbol="USDT", coin_id="tether"),
    "USDC": StablecoinConfig(symbol="USDC", coin_id="usd-coin"),
    "BUSD": StablecoinConfig(symbol="BUSD", coin_id="binance-usd"),
    "DAI": StablecoinConfig(symbol="DAI", coin_id="dai"),
}

# Human-readable names accepted in place of the canonical ticker
STABLECOIN_ALIASES: dict[str, str] = {
    "TETHER": "USDT",
    "USD COIN": "USDC",
    "USDCOIN": "USDC",
    "BINANCE USD": "BUSD",
}

# Lowercased symbol -> catalog id. Served before the first catalog refresh
# succeeds, and overrides ambiguous catalog symbols (many coins share "eth").
TOP_COINS: dict[str, str] = {
    "btc": "bitcoin",
    "eth": "ethereum",
    "bnb": "binancecoin",
    "sol": "solana",
    "xrp": "ripple",
    "ada": "cardano",
    "doge": "dogecoin",
    "dot": "polkadot",
    "avax": "avalanche-2",
    "ltc": "litecoin",
    "link": "chainlink",
    "bch": "bitcoin-cash",
    "matic": "matic-network",
    "uni": "uniswap",
    "shib": "shiba-inu",
    "atom": "cosmos",
    "trx": "tron",
    "xtz": "tezos",
    "weth": "weth",
}

# Served by the options endpoint when the equity provider is unreachable
FALLBACK_STOCKS: tuple[str, ...] = (
    "AAPL",
    "AMZN",
    "GOOGL",
    "META",
    "MSFT",
    "NFLX",
    "NVDA",
    "TSLA",
    "JPM",
    "V",
)
