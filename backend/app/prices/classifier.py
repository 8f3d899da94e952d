"""Rule-table classification of base symbols into provider categories."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .catalog import CryptoCatalog
from .models import Category
from .seed_symbols import FX_CURRENCIES, STABLECOINS


@dataclass(frozen=True, slots=True)
class Rule:
    category: Category
    matches: Callable[[str], bool]


class AssetClassifier:
    """Routes a base symbol to exactly one category, first match wins.

    Priority is FX > Stablecoin > Crypto > Equity: a currency code beats a
    stablecoin with the same letters, and a registered stablecoin beats a
    catalog coin sharing its ticker. Equity matches everything and is last.
    """

    def __init__(
        self,
        catalog: CryptoCatalog,
        fx_currencies: frozenset[str] = FX_CURRENCIES,
        stablecoins: frozenset[str] | None = None,
    ) -> None:
        stable = frozenset(STABLECOINS) if stablecoins is None else stablecoins
        self.rules: tuple[Rule, ...] = (
            Rule(Category.FX, lambda s: s in fx_currencies),
            Rule(Category.STABLECOIN, lambda s: s in stable),
            Rule(Category.CRYPTO, lambda s: s in catalog),
            Rule(Category.EQUITY, lambda s: True),
        )

    def classify(self, base: str) -> Category:
        symbol = base.strip().upper()
        for rule in self.rules:
            if rule.matches(symbol):
                return rule.category
        raise AssertionError("equity rule matches every symbol")  # pragma: no cover
