from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from conftest import DeterministicHasher, InMemoryUserRepository, make_user

from pos_backend.application.use_cases.users.login_user import LoginUserUseCase
from pos_backend.application.use_cases.users.logout_user import LogoutUserUseCase
from pos_backend.domain.users.entities import Role
from pos_backend.domain.users.exceptions import InvalidCredentialsError
from pos_backend.infrastructure.auth.revocation import InMemoryRevocationStore
from pos_backend.infrastructure.auth.token_codec import JwtTokenCodec


@pytest.fixture()
def codec(clock) -> JwtTokenCodec:
    return JwtTokenCodec("use-case-secret", clock=clock)


@pytest.fixture()
def login(
    users: InMemoryUserRepository, hasher: DeterministicHasher, codec: JwtTokenCodec
) -> LoginUserUseCase:
    return LoginUserUseCase(
        users=users, password_hasher=hasher, tokens=codec, token_ttl=timedelta(hours=24)
    )


def test_login_success_issues_verifiable_token(
    users: InMemoryUserRepository, login: LoginUserUseCase, codec: JwtTokenCodec, clock
) -> None:
    owner = make_user(users, "olivia", "owner123", Role.OWNER)

    result = login.execute("olivia", "owner123")

    claims = codec.verify(result.token)
    assert result.user == owner
    assert claims.user_id == owner.id
    assert claims.username == "olivia"
    assert claims.role is Role.OWNER
    assert claims.expires_at == clock.now + timedelta(hours=24)


def test_wrong_password_and_unknown_user_fail_identically(
    users: InMemoryUserRepository, login: LoginUserUseCase
) -> None:
    make_user(users, "carl", "cashier123")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("carl", "nope")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        login.execute("nobody", "nope")

    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
    assert str(wrong_password.value) == str(unknown_user.value)


def test_unknown_user_still_runs_password_check(
    login: LoginUserUseCase, hasher: DeterministicHasher
) -> None:
    with pytest.raises(InvalidCredentialsError):
        login.execute("ghost", "whatever")

    assert hasher.verify_calls == 1


def test_inactive_user_cannot_log_in(
    users: InMemoryUserRepository, login: LoginUserUseCase
) -> None:
    make_user(users, "carl", "cashier123", is_active=False)

    with pytest.raises(InvalidCredentialsError):
        login.execute("carl", "cashier123")


def test_concurrent_logins_get_independent_tokens(
    users: InMemoryUserRepository, login: LoginUserUseCase, codec: JwtTokenCodec
) -> None:
    make_user(users, "carl", "cashier123")

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: login.execute("carl", "cashier123"), range(2)))

    first, second = (r.token for r in results)
    assert first != second
    assert codec.verify(first).username == "carl"
    assert codec.verify(second).username == "carl"


def test_logout_revokes_only_that_token(
    users: InMemoryUserRepository, login: LoginUserUseCase, clock
) -> None:
    make_user(users, "carl", "cashier123")
    store = InMemoryRevocationStore(clock=clock)
    logout = LogoutUserUseCase(revocations=store)
    first = login.execute("carl", "cashier123").token
    second = login.execute("carl", "cashier123").token

    logout.execute(first, clock.now + timedelta(hours=24))

    assert store.is_revoked(first)
    assert not store.is_revoked(second)


def test_logout_with_empty_token_is_noop(clock) -> None:
    store = InMemoryRevocationStore(clock=clock)

    LogoutUserUseCase(revocations=store).execute("")

    assert len(store) == 0
