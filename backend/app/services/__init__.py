"""Ancillary relay endpoints: weather, randomness, HMAC signing."""

from .randomness import create_random_router
from .signing import create_signing_router
from .weather import create_weather_router

__all__ = [
    "create_random_router",
    "create_signing_router",
    "create_weather_router",
]
