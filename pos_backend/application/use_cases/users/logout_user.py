"""Use-case for revoking access tokens."""

from __future__ import annotations

from datetime import datetime

from pos_backend.domain.users.repositories import RevocationStore


class LogoutUserUseCase:
    def __init__(self, *, revocations: RevocationStore) -> None:
        self._revocations = revocations

    def execute(self, token: str, expires_at: datetime | None = None) -> None:
        if token:
            self._revocations.revoke(token, expires_at)
