from __future__ import annotations

import os
import tempfile
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest

# Settings are read on first import of the package, so the environment has to
# be in place before any pos_backend module loads.
_TMP_DIR = tempfile.mkdtemp(prefix="pos-backend-tests-")
os.environ["JWT_SECRET"] = "test-signing-secret-0123456789abcdef"
os.environ["JWT_EXPIRY_HOURS"] = "24"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'pos.db')}"
os.environ["ENABLE_RATE_LIMIT"] = "false"
os.environ["SEED_DEFAULT_USERS"] = "true"
os.environ["APP_ENV"] = "test"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "pos.log")

from pos_backend.domain.users.entities import Role, User  # noqa: E402
from pos_backend.domain.users.repositories import PasswordHasher, UserRepository  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.verify_calls = 0

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verify_calls += 1
        return hashed == f"hashed:{password}"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._deleted: set[int] = set()
        self._seq = 1

    def _live(self) -> list[User]:
        return [u for uid, u in self._users.items() if uid not in self._deleted]

    def find_active_by_username(self, username: str) -> User | None:
        for user in self._live():
            if user.username == username and user.is_active:
                return user
        return None

    def find_by_id(self, user_id: int) -> User | None:
        if user_id in self._deleted:
            return None
        return self._users.get(user_id)

    def username_taken(self, username: str, *, exclude_id: int | None = None) -> bool:
        return any(
            u.username == username and u.id != exclude_id for u in self._users.values()
        )

    def add(self, user: User) -> User:
        stored = replace(user, id=self._seq)
        self._seq += 1
        self._users[stored.id] = stored
        return stored

    def update(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def soft_delete(self, user_id: int) -> bool:
        if user_id not in self._users or user_id in self._deleted:
            return False
        self._deleted.add(user_id)
        return True

    def list_by_role(
        self, role: Role, *, offset: int, limit: int
    ) -> tuple[list[User], int]:
        matching = sorted(
            (u for u in self._live() if u.role is role), key=lambda u: u.id, reverse=True
        )
        return matching[offset : offset + limit], len(matching)

    def count_by_role(self, role: Role) -> int:
        return sum(1 for u in self._live() if u.role is role)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


def make_user(
    users: InMemoryUserRepository,
    username: str,
    password: str,
    role: Role = Role.CASHIER,
    *,
    is_active: bool = True,
) -> User:
    return users.add(
        User(
            id=0,
            username=username,
            name=username.title(),
            password_hash=f"hashed:{password}",
            role=role,
            is_active=is_active,
        )
    )
