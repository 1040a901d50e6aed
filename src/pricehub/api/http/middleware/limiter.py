"""Rate limiting helpers used by the HTTP layer."""

from __future__ import annotations

import asyncio
import time
from collections import defaultdict, deque
from collections.abc import Awaitable, Callable
from functools import lru_cache
from typing import Any

from fastapi import HTTPException, Request, Response
from loguru import logger

from src.pricehub.runtime.context import get_config

RateLimiterType = Callable[[Request, Response], Awaitable[Any]]

_local_limiters: list[LocalRateLimiter] = []


class LocalRateLimiter:
    """Sliding-window, in-process limiter keyed by client and route.

    State is per process; run a single worker or accept per-worker quotas.
    """

    def __init__(
        self, times: int, milliseconds: int, per_endpoint: bool, per_method: bool
    ) -> None:
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._times = times
        self._seconds = milliseconds / 1000
        self._per_endpoint = per_endpoint
        self._per_method = per_method
        self._last_cleanup = time.monotonic()
        self._cleanup_interval = 60.0  # seconds

    async def __call__(self, request: Request, response: Response) -> Any:
        key = self._make_key(
            request,
            per_endpoint=self._per_endpoint,
            per_method=self._per_method,
        )
        await self._throttle(key, self._times, self._seconds)

    def _make_key(
        self, request: Request, *, per_endpoint: bool, per_method: bool
    ) -> str:
        xff = request.headers.get("x-forwarded-for")
        if xff:
            client_host = xff.split(",")[0].strip()
        else:
            client_host = request.client.host if request.client else "anonymous"
        parts = [f"ip:{client_host}"]

        if per_method:
            parts.append(request.method)
        if per_endpoint:
            route = request.scope.get("route")
            template = getattr(route, "path", None)
            parts.append((template or request.url.path).rstrip("/"))
        return ":".join(parts)

    async def _cleanup_old_keys(self) -> None:
        """Remove empty or very old key entries to prevent memory leaks."""
        now = time.monotonic()
        if now - self._last_cleanup < self._cleanup_interval:
            return

        self._last_cleanup = now
        keys_to_remove = []
        for key, hits in self._hits.items():
            while hits and hits[0] <= now - self._seconds * 2:
                hits.popleft()
            if not hits:
                keys_to_remove.append(key)

        for key in keys_to_remove:
            del self._hits[key]

    async def cleanup(self) -> None:
        async with self._lock:
            tracked = len(self._hits)
            self._hits.clear()
        logger.debug("Cleaned up local rate limiter with {} tracked keys", tracked)

    async def _throttle(self, key: str, times: int, seconds: float) -> None:
        await self._cleanup_old_keys()
        now = time.monotonic()
        window_start = now - seconds
        async with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= times:
                retry_after = max(0, int(seconds - (now - hits[0])))
                logger.warning("Rate limit exceeded for {}", key)
                raise HTTPException(
                    status_code=429,
                    detail="Too many requests, please try again later",
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)


@lru_cache(maxsize=100)
def _create_rate_limiter(
    requests: int,
    window_ms: int,
    per_endpoint: bool,
    per_method: bool,
) -> LocalRateLimiter:
    """Create a rate limiter with specific configuration (cached)."""
    limiter = LocalRateLimiter(requests, window_ms, per_endpoint, per_method)
    _local_limiters.append(limiter)
    return limiter


def get_rate_limiter(
    requests: int | None = None,
    window_ms: int | None = None,
) -> LocalRateLimiter:
    """Get the shared limiter for the given quota."""
    config = get_config().rate_limiter
    return _create_rate_limiter(
        requests if requests is not None else config.requests,
        window_ms if window_ms is not None else config.window_ms,
        config.per_endpoint,
        config.per_method,
    )


def rate_limit(
    requests: int | None = None,
    window_ms: int | None = None,
) -> RateLimiterType:
    """Return a dependency enforcing request quotas.

    Quotas default to ``rate_limiter.requests`` per ``rate_limiter.window_ms``
    and the check is skipped entirely when ``rate_limiter.enabled`` is false.
    """

    async def dependency(request: Request, response: Response) -> Any:
        if not get_config().rate_limiter.enabled:
            return None
        limiter = get_rate_limiter(requests, window_ms)
        return await limiter(request, response)

    return dependency


async def close_rate_limiter() -> None:
    """Clean up rate limiter resources and clear caches."""
    _create_rate_limiter.cache_clear()
    if _local_limiters:
        logger.info("Cleaning up {} local rate limiter instances", len(_local_limiters))
        for limiter in _local_limiters:
            await limiter.cleanup()
        _local_limiters.clear()
