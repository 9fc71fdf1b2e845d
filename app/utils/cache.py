"""Cached data behind page renderings, keyed by request path."""

from __future__ import annotations

from typing import Callable, Optional

from flask import current_app

from app import cache

ROUTE_CACHE_PREFIX = "route:"


def route_cache_key(path: str) -> str:
    """Return the cache key used for ``path``."""
    return f"{ROUTE_CACHE_PREFIX}{path.rstrip('/') or '/'}"


def cached_for_path(path: str, loader: Callable, timeout: Optional[int] = None):
    """Return the cached value for ``path``, loading and storing it on a miss.

    Only the data a page is built from is cached.  The page itself is
    rendered per request so per-session values such as CSRF tokens stay
    correct.
    """
    key = route_cache_key(path)
    value = cache.get(key)
    if value is None:
        value = loader()
        cache.set(key, value, timeout=timeout)
    return value


def revalidate_path(path: str) -> None:
    """Mark the cached data of ``path`` as stale."""
    cache.delete(route_cache_key(path))
    current_app.logger.debug("Revalidated cached path %s", path)
