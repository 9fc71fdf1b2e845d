"""Utility helpers shared across the test-suite."""

from __future__ import annotations

from app import cache
from app.utils.cache import route_cache_key


def is_cached(path: str) -> bool:
    """Return ``True`` while cached data for ``path`` is present."""
    return cache.get(route_cache_key(path)) is not None
