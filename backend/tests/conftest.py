"""Pytest configuration and fixtures."""

import pytest

RELAY_ENV_VARS = (
    "FINNHUB_API_KEY",
    "FX_API_KEY",
    "WEATHER_API_KEY",
    "RATE_LIMIT_MAX",
    "RATE_LIMIT_WINDOW",
    "TRUST_PROXY",
)


@pytest.fixture(autouse=True)
def _clean_relay_env(monkeypatch):
    """Keep the developer's real credentials out of every test."""
    for name in RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
