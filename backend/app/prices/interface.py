"""Shared base for upstream provider adapters."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import ConfigurationError, InvalidUpstreamResponse, UpstreamRateLimited, UpstreamUnavailable

logger = logging.getLogger(__name__)

# Every upstream call is bounded by this timeout (seconds)
UPSTREAM_TIMEOUT = 10.0


class ProviderAdapter:
    """Base class for adapters wrapping one upstream HTTP/JSON source.

    Adapters share a single ``httpx.AsyncClient`` owned by the application.
    ``_get_json`` is the only suspension point and maps transport failures
    onto the error hierarchy:

        429            -> UpstreamRateLimited
        401            -> ConfigurationError
        other non-2xx  -> UpstreamUnavailable
        timeout/network-> UpstreamUnavailable
        non-JSON body  -> InvalidUpstreamResponse

    Subclasses set ``provider_name`` (used in messages) and may override the
    ``_*_message`` hooks to phrase errors for their provider.
    """

    provider_name: str = "provider"

    def __init__(self, client: httpx.AsyncClient, timeout: float = UPSTREAM_TIMEOUT) -> None:
        self._client = client
        self._timeout = timeout

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        try:
            response = await self._client.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("%s answered HTTP %d", self.provider_name, status)
            if status == 429:
                raise UpstreamRateLimited(self._rate_limited_message()) from e
            if status == 401:
                raise ConfigurationError(self._unauthorized_message()) from e
            raise UpstreamUnavailable(self._unavailable_message(f"HTTP {status}")) from e
        except httpx.TimeoutException as e:
            logger.warning("%s timed out after %.1fs", self.provider_name, self._timeout)
            raise UpstreamUnavailable(self._unavailable_message("timeout")) from e
        except httpx.HTTPError as e:
            logger.warning("%s request failed: %s", self.provider_name, e)
            raise UpstreamUnavailable(self._unavailable_message("network failure")) from e

        try:
            return response.json()
        except ValueError as e:
            raise InvalidUpstreamResponse(f"Invalid {self.provider_name} response") from e

    def _rate_limited_message(self) -> str:
        return f"{self.provider_name} rate limit exceeded"

    def _unauthorized_message(self) -> str:
        return f"{self.provider_name} authentication error"

    def _unavailable_message(self, reason: str) -> str:
        return f"{self.provider_name} unavailable ({reason})"
