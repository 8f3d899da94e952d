"""Price-resolution subsystem.

Public API:
    PriceResolver        - Normalize, classify, dispatch and cache a pair lookup
    PriceRecord          - Normalized price with change buckets
    ResolvedPrice        - PriceRecord for a pair plus timestamp, as served
    ResultCache          - Short-TTL response cache
    CryptoCatalog        - TTL-refreshed crypto symbol -> id table
    AssetClassifier      - Rule table routing symbols to a provider category
    SlidingWindowLimiter - Per-client request rate limiter
    PriceError           - Root of the error hierarchy
    create_price_resolver - Factory wiring adapters from the environment
    create_prices_router - FastAPI router factory for /prices
"""

from .cache import ResultCache
from .catalog import CryptoCatalog
from .classifier import AssetClassifier
from .errors import PriceError
from .factory import create_price_resolver
from .models import Category, PriceRecord, ResolvedPrice
from .ratelimit import SlidingWindowLimiter
from .resolver import PriceResolver
from .routes import create_prices_router

__all__ = [
    "AssetClassifier",
    "Category",
    "CryptoCatalog",
    "PriceError",
    "PriceRecord",
    "PriceResolver",
    "ResolvedPrice",
    "ResultCache",
    "SlidingWindowLimiter",
    "create_price_resolver",
    "create_prices_router",
]
