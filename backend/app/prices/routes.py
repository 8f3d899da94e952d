"""HTTP endpoints for price lookups."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from .errors import RequestRateLimited
from .ratelimit import SlidingWindowLimiter
from .resolver import DEFAULT_QUOTE, PriceResolver

logger = logging.getLogger(__name__)


def client_key(request: Request, trust_proxy: bool = False) -> str:
    """Identify the caller for rate limiting.

    Behind a trusted proxy the first ``X-Forwarded-For`` hop is the client;
    otherwise the header is caller-controlled and ignored.
    """
    if trust_proxy:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else "unknown"


def create_prices_router(
    resolver: PriceResolver,
    limiter: SlidingWindowLimiter,
    trust_proxy: bool = False,
) -> APIRouter:
    """Create the /prices router bound to a resolver and a rate limiter.

    Errors raised by the resolver are PriceError subclasses and are turned
    into ``{"status": "error", "message": ...}`` by the application's
    exception handlers.
    """

    async def enforce_rate_limit(request: Request) -> None:
        if not limiter.allow(client_key(request, trust_proxy)):
            raise RequestRateLimited("Too many requests, please slow down")

    router = APIRouter(prefix="/prices", tags=["prices"], dependencies=[Depends(enforce_rate_limit)])

    @router.get("")
    async def get_price(base: str | None = None, quote: str = DEFAULT_QUOTE) -> dict[str, Any]:
        """Resolve ``?base=<symbol>&quote=<symbol>`` (quote defaults to USD)."""
        resolved = await resolver.resolve(base, quote)
        return resolved.to_dict()

    @router.get("/options")
    async def get_options() -> dict[str, Any]:
        """Symbols selectable in each category."""
        options = await resolver.options()
        return {"status": "ok", **options}

    @router.get("/stablecoins")
    async def get_stablecoins() -> dict[str, Any]:
        """Peg status of every registered stablecoin."""
        records = await resolver.stablecoins()
        return {"status": "ok", "data": {symbol: record.to_dict() for symbol, record in records.items()}}

    @router.get("/{base}/{quote}")
    async def get_price_by_path(base: str, quote: str) -> dict[str, Any]:
        resolved = await resolver.resolve(base, quote)
        return resolved.to_dict()

    return router
