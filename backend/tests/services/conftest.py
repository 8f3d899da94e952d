"""Fixtures for the ancillary service routes; reuses the fake upstream."""

from ..prices.conftest import clock, http_client, make_resolver, upstream  # noqa: F401
