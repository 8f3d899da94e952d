"""Current-weather pass-through (OpenWeatherMap)."""

from __future__ import annotations

import time
from typing import Any

import httpx
from fastapi import APIRouter

from app.prices.errors import ClientError, ConfigurationError
from app.prices.interface import ProviderAdapter

WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


class WeatherNotConfigured(ConfigurationError):
    """The deployment has no weather credential."""

    status_code = 500


class WeatherClient(ProviderAdapter):
    provider_name = "Weather provider"

    def __init__(self, client: httpx.AsyncClient, api_key: str | None, url: str = WEATHER_URL) -> None:
        super().__init__(client)
        self._api_key = api_key or None
        self._url = url

    async def current(self, city: str) -> Any:
        return await self._get_json(self._url, {"q": city, "appid": self._api_key, "units": "metric"})


def create_weather_router(client: httpx.AsyncClient, api_key: str | None) -> APIRouter:
    router = APIRouter(prefix="/weather", tags=["weather"])
    weather = WeatherClient(client, api_key)

    @router.get("")
    async def get_weather(city: str | None = None) -> dict[str, Any]:
        """Current conditions for ``?city=<name>`` in metric units."""
        if not api_key:
            raise WeatherNotConfigured("Weather API key missing")
        if not city or not city.strip():
            raise ClientError("City query parameter is required")

        data = await weather.current(city.strip())
        return {"status": "ok", "city": city.strip(), "data": data, "timestamp": int(time.time())}

    return router
