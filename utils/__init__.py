"""Shared helpers: console logging, HTTP session, config loading, formatting."""
