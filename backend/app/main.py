"""FastAPI application factory and entry point."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.prices import PriceError, PriceResolver, SlidingWindowLimiter, create_prices_router
from app.prices.factory import create_price_resolver, create_rate_limiter
from app.prices.interface import UPSTREAM_TIMEOUT
from app.services import create_random_router, create_signing_router, create_weather_router

logger = logging.getLogger(__name__)


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def create_app(
    client: httpx.AsyncClient | None = None,
    resolver: PriceResolver | None = None,
    limiter: SlidingWindowLimiter | None = None,
    weather_api_key: str | None = None,
    trust_proxy: bool | None = None,
) -> FastAPI:
    """Build the application. Anything not injected is created from the environment.

    The shared HTTP client, resolver caches and limiter buckets live for the
    lifetime of the returned app; the lifespan starts the limiter sweep and
    closes the client on shutdown.
    """
    if client is None:
        client = httpx.AsyncClient(timeout=UPSTREAM_TIMEOUT)
    if resolver is None:
        resolver = create_price_resolver(client)
    if limiter is None:
        limiter = create_rate_limiter()
    if weather_api_key is None:
        weather_api_key = os.environ.get("WEATHER_API_KEY", "").strip() or None
    if trust_proxy is None:
        trust_proxy = _truthy(os.environ.get("TRUST_PROXY"))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await limiter.start()
        logger.info("Relay backend started")
        yield
        await limiter.stop()
        await client.aclose()
        logger.info("Relay backend stopped")

    app = FastAPI(title="Relay Backend", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PriceError)
    async def price_error_handler(request: Request, exc: PriceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"status": "error", "message": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"status": "error", "message": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        message = f"Missing or invalid fields: {', '.join(fields)}" if fields else "Invalid request"
        return JSONResponse(status_code=400, content={"status": "error", "message": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"status": "error", "message": str(exc) or "Internal server error"})

    app.include_router(create_prices_router(resolver, limiter, trust_proxy=trust_proxy))
    app.include_router(create_weather_router(client, weather_api_key))
    app.include_router(create_random_router())
    app.include_router(create_signing_router())

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok", "message": "Relay backend is live"}

    return app


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = int(os.environ.get("PORT", "3000"))
    uvicorn.run("app.main:create_app", factory=True, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
