# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Process-local registry of logged-out tokens.

Lookups run on every authenticated request while revocations only happen on
logout, so the store sits behind a shared-read / exclusive-write lock. Only a
SHA-256 digest of each token is kept.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from threading import Condition, Lock

from pos_backend.shared.logging import logger


class ReadWriteLock:
    """Many concurrent readers or one writer; waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class InMemoryRevocationStore:
    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._lock = ReadWriteLock()
        self._entries: dict[str, datetime | None] = {}
        self._clock = clock or (lambda: datetime.now(UTC))

    def revoke(self, token: str, expires_at: datetime | None = None) -> None:
        key = _digest(token)
        with self._lock.write():
            self._entries[key] = expires_at
            self._prune_locked()

    def is_revoked(self, token: str) -> bool:
        key = _digest(token)
        with self._lock.read():
            return key in self._entries

    def prune(self) -> int:
        with self._lock.write():
            return self._prune_locked()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def _prune_locked(self) -> int:
        # A token past its own expiry is already rejected by the codec.
        now = self._clock()
        stale = [
            key
            for key, expires_at in self._entries.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug(f"revocation: pruned {len(stale)} expired entries")
        return len(stale)


__all__ = ["InMemoryRevocationStore", "ReadWriteLock"]
