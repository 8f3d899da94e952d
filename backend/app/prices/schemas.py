"""Pydantic schemas for upstream provider payloads.

Adapters validate raw JSON against these models at the boundary so the rest
of the subsystem only ever sees typed values.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, FiniteFloat


class CoinListItem(BaseModel):
    """Entry of the crypto catalog (``/coins/list``)."""

    id: str
    symbol: str
    name: str | None = None


class FxRatesResponse(BaseModel):
    """Body of the FX ``/latest`` endpoint."""

    model_config = ConfigDict(strict=True)

    base: str | None = None
    date: str | None = None
    rates: dict[str, FiniteFloat]


class EquityQuote(BaseModel):
    """Finnhub ``/quote`` body. Single-letter keys are the provider's."""

    model_config = ConfigDict(strict=True)

    c: FiniteFloat  # current price
    h: FiniteFloat  # high of day
    l: FiniteFloat  # low of day  # noqa: E741
    o: FiniteFloat  # open of day
    pc: FiniteFloat  # previous close
    t: int | None = None


class EquitySymbol(BaseModel):
    """Entry of the Finnhub ``/stock/symbol`` listing."""

    symbol: str
    description: str | None = None


def finite_or_none(value: Any) -> float | None:
    """Return value as float if it is a finite JSON number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)
