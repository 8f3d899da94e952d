"""Relay backend: normalized price lookups plus weather, randomness and signing."""
