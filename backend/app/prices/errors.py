"""Exception hierarchy for the price subsystem.

Every error carries a display-safe message and the HTTP status the transport
layer should answer with.
"""

from __future__ import annotations


class PriceError(Exception):
    """Base class for all price-resolution failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientError(PriceError):
    """Missing or invalid request parameters."""

    status_code = 400


class UnsupportedAsset(ClientError):
    """Symbol cannot be priced by any category."""


class RequestRateLimited(ClientError):
    """Caller exceeded the request rate limit."""

    status_code = 429


class ConfigurationError(PriceError):
    """A credential required for a category is missing or rejected."""

    status_code = 400


class UpstreamUnavailable(PriceError):
    """Network failure, timeout, or non-2xx answer from a provider."""


class UpstreamRateLimited(UpstreamUnavailable):
    """Provider answered 429."""


class InvalidUpstreamResponse(PriceError):
    """Provider payload did not match its expected schema."""
