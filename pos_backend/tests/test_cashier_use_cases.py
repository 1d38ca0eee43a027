from __future__ import annotations

import pytest
from conftest import DeterministicHasher, InMemoryUserRepository, make_user

from pos_backend.application.pagination import PageRequest
from pos_backend.application.use_cases.cashiers.create_cashier import (
    CreateCashierInput,
    CreateCashierUseCase,
)
from pos_backend.application.use_cases.cashiers.delete_cashier import DeleteCashierUseCase
from pos_backend.application.use_cases.cashiers.get_cashier import GetCashierUseCase
from pos_backend.application.use_cases.cashiers.list_cashiers import ListCashiersUseCase
from pos_backend.application.use_cases.cashiers.update_cashier import (
    UpdateCashierInput,
    UpdateCashierUseCase,
)
from pos_backend.domain.users.entities import Role
from pos_backend.domain.users.exceptions import CashierNotFoundError, UserAlreadyExistsError


def test_create_cashier_forces_role_and_hashes_password(
    users: InMemoryUserRepository, hasher: DeterministicHasher
) -> None:
    use_case = CreateCashierUseCase(users=users, password_hasher=hasher)

    cashier = use_case.execute(CreateCashierInput(username="carl", password="secret1", name="Carl"))

    assert cashier.id > 0
    assert cashier.role is Role.CASHIER
    assert cashier.password_hash == "hashed:secret1"
    assert cashier.is_active


def test_create_cashier_rejects_taken_username(
    users: InMemoryUserRepository, hasher: DeterministicHasher
) -> None:
    make_user(users, "olivia", "owner123", Role.OWNER)
    use_case = CreateCashierUseCase(users=users, password_hasher=hasher)

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute(CreateCashierInput(username="olivia", password="secret1", name="X"))


def test_owner_is_not_reachable_as_cashier(users: InMemoryUserRepository) -> None:
    owner = make_user(users, "olivia", "owner123", Role.OWNER)

    with pytest.raises(CashierNotFoundError):
        GetCashierUseCase(users).execute(owner.id)
    with pytest.raises(CashierNotFoundError):
        DeleteCashierUseCase(users).execute(owner.id)


def test_update_cashier_changes_only_given_fields(
    users: InMemoryUserRepository, hasher: DeterministicHasher
) -> None:
    cashier = make_user(users, "carl", "cashier123")
    use_case = UpdateCashierUseCase(users=users, password_hasher=hasher)

    updated = use_case.execute(cashier.id, UpdateCashierInput(name="Carl Jr", is_active=False))

    assert updated.name == "Carl Jr"
    assert updated.is_active is False
    assert updated.username == "carl"
    assert updated.password_hash == cashier.password_hash


def test_update_cashier_rehashes_password_and_checks_username(
    users: InMemoryUserRepository, hasher: DeterministicHasher
) -> None:
    make_user(users, "dana", "cashier123")
    cashier = make_user(users, "carl", "cashier123")
    use_case = UpdateCashierUseCase(users=users, password_hasher=hasher)

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute(cashier.id, UpdateCashierInput(username="dana"))

    updated = use_case.execute(cashier.id, UpdateCashierInput(password="newpass"))
    assert updated.password_hash == "hashed:newpass"


def test_delete_cashier_hides_it(users: InMemoryUserRepository) -> None:
    cashier = make_user(users, "carl", "cashier123")

    DeleteCashierUseCase(users).execute(cashier.id)

    with pytest.raises(CashierNotFoundError):
        GetCashierUseCase(users).execute(cashier.id)
    with pytest.raises(CashierNotFoundError):
        DeleteCashierUseCase(users).execute(cashier.id)


def test_list_cashiers_paginates(users: InMemoryUserRepository) -> None:
    make_user(users, "olivia", "owner123", Role.OWNER)
    for i in range(12):
        make_user(users, f"cashier{i}", "cashier123")

    page = ListCashiersUseCase(users).execute(PageRequest(page=2, limit=5))

    assert page.total_items == 12
    assert page.total_pages == 3
    assert len(page.items) == 5
    assert all(user.role is Role.CASHIER for user in page.items)


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        (None, None, (1, 10)),
        (0, 0, (1, 10)),
        (-3, -1, (1, 10)),
        (4, 500, (4, 100)),
        (2, 25, (2, 25)),
    ],
)
def test_page_request_clamping(page, limit, expected) -> None:
    request = PageRequest.clamped(page, limit)

    assert (request.page, request.limit) == expected
    assert request.offset == (expected[0] - 1) * expected[1]
