# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from threading import Lock

from flask import Request, request

from pos_backend.shared.config import load_config
from pos_backend.shared.errors.base import AppError
from pos_backend.shared.logging import logger


class RateLimitedError(AppError):
    def __init__(self, retry_after: float) -> None:
        super().__init__(
            code="rate_limited",
            status=HTTPStatus.TOO_MANY_REQUESTS,
            context={"retry_after_seconds": round(retry_after, 1)},
            message="Too many requests, slow down",
        )


class InMemoryRateLimiter:
    """Sliding-window limiter keyed by an arbitrary string.

    Keys whose window has drained are dropped, and the number of tracked keys
    is capped at ``max_keys`` so a flood of distinct clients cannot grow the
    table without bound.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._max_keys = max(1, int(max_keys))
        self._clock = clock
        self._lock = Lock()
        self._buckets: dict[str, deque[float]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def allow(self, key: str) -> bool:
        return self.retry_after(key) == 0.0

    def retry_after(self, key: str) -> float:
        """Record a hit and return 0.0 when allowed, else seconds until a slot frees."""
        now = self._clock()
        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                if len(self._buckets) >= self._max_keys:
                    self._evict_locked(now)
                bucket = self._buckets[key] = deque()
            self._drain(bucket, now)
            if len(bucket) >= self._limit:
                return max(self._window - (now - bucket[0]), 0.1)
            bucket.append(now)
            return 0.0

    def _drain(self, bucket: deque[float], now: float) -> None:
        while bucket and (now - bucket[0]) > self._window:
            bucket.popleft()

    def _evict_locked(self, now: float) -> None:
        for key in list(self._buckets):
            bucket = self._buckets[key]
            self._drain(bucket, now)
            if not bucket:
                del self._buckets[key]
        # Still full: forget the least recently created keys.
        while len(self._buckets) >= self._max_keys:
            del self._buckets[next(iter(self._buckets))]


def _client_key(req: Request) -> str:
    # ProxyFix rewrites remote_addr when TRUSTED_PROXY_HOPS is set.
    return req.remote_addr or "unknown"


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    config = load_config()
    enabled = config.security.enable_rate_limit
    limiter = InMemoryRateLimiter(
        limit or config.security.rate_limit_requests,
        window_seconds or config.security.rate_limit_window,
        max_keys=config.security.rate_limit_max_keys,
    )

    def decorator(f: Callable):
        if not enabled:
            return f

        @wraps(f)
        def wrapper(*args, **kwargs):
            key = f"{request.path}:{_client_key(request)}"
            retry_after = limiter.retry_after(key)
            if retry_after:
                logger.warning(f"rate_limit: blocked {key} retry_after={retry_after:.1f}s")
                raise RateLimitedError(retry_after)
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "RateLimitedError", "rate_limit"]
