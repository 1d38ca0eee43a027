# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import cached_property

from sqlalchemy.orm import Session

from pos_backend.application.services.password_hashing import \
    WerkzeugPasswordHasher
from pos_backend.application.use_cases.cashiers.create_cashier import \
    CreateCashierUseCase
from pos_backend.application.use_cases.cashiers.delete_cashier import \
    DeleteCashierUseCase
from pos_backend.application.use_cases.cashiers.get_cashier import \
    GetCashierUseCase
from pos_backend.application.use_cases.cashiers.list_cashiers import \
    ListCashiersUseCase
from pos_backend.application.use_cases.cashiers.update_cashier import \
    UpdateCashierUseCase
from pos_backend.application.use_cases.sales.create_sale_order import \
    CreateSaleOrderUseCase
from pos_backend.application.use_cases.sales.delete_sale_order import \
    DeleteSaleOrderUseCase
from pos_backend.application.use_cases.sales.get_sale_order import \
    GetSaleOrderUseCase
from pos_backend.application.use_cases.sales.list_sale_orders import \
    ListSaleOrdersUseCase
from pos_backend.application.use_cases.sales.update_sale_order import \
    UpdateSaleOrderUseCase
from pos_backend.application.use_cases.users.login_user import LoginUserUseCase
from pos_backend.application.use_cases.users.logout_user import LogoutUserUseCase
from pos_backend.domain.users.entities import AuthenticatedIdentity, Role
from pos_backend.infrastructure.audit import AuditAction, audit_log
from pos_backend.infrastructure.auth.middleware import RequestGate
from pos_backend.infrastructure.auth.revocation import InMemoryRevocationStore
from pos_backend.infrastructure.auth.token_codec import JwtTokenCodec
from pos_backend.infrastructure.db import SessionLocal
from pos_backend.infrastructure.repositories.sales.sqlalchemy_sale_order_repository import \
    SqlAlchemySaleOrderRepository
from pos_backend.infrastructure.repositories.users.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from pos_backend.interfaces.http.controllers.auth_controller import AuthController
from pos_backend.interfaces.http.controllers.cashiers_controller import \
    CashiersController
from pos_backend.interfaces.http.controllers.misc_controller import MiscController
from pos_backend.interfaces.http.controllers.sale_orders_controller import \
    SaleOrdersController
from pos_backend.shared.config import AppConfig, load_config


def _audit_access_denied(identity: AuthenticatedIdentity, allowed: tuple[Role, ...]) -> None:
    from flask import request

    audit_log(
        AuditAction.ACCESS_DENIED,
        user_id=identity.user_id,
        details={
            "path": request.path,
            "role": identity.role.value,
            "allowed": [role.value for role in allowed],
        },
        success=False,
    )


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        self.config = config or load_config()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._session_factory = session_factory or SessionLocal

    # Auth core

    @cached_property
    def token_codec(self) -> JwtTokenCodec:
        return JwtTokenCodec(
            self.config.auth.jwt_secret,
            algorithm=self.config.auth.jwt_algorithm,
            clock=self._clock,
        )

    @cached_property
    def revocation_store(self) -> InMemoryRevocationStore:
        return InMemoryRevocationStore(clock=self._clock)

    @cached_property
    def request_gate(self) -> RequestGate:
        return RequestGate(
            self.token_codec, self.revocation_store, on_denied=_audit_access_denied
        )

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self._session_factory, clock=self._clock)

    @cached_property
    def sale_order_repository(self) -> SqlAlchemySaleOrderRepository:
        return SqlAlchemySaleOrderRepository(self._session_factory, clock=self._clock)

    # Use cases

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_codec,
            token_ttl=timedelta(hours=self.config.token_ttl_hours),
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(revocations=self.revocation_store)

    @cached_property
    def list_cashiers_use_case(self) -> ListCashiersUseCase:
        return ListCashiersUseCase(self.user_repository)

    @cached_property
    def get_cashier_use_case(self) -> GetCashierUseCase:
        return GetCashierUseCase(self.user_repository)

    @cached_property
    def create_cashier_use_case(self) -> CreateCashierUseCase:
        return CreateCashierUseCase(
            users=self.user_repository, password_hasher=self.password_hasher
        )

    @cached_property
    def update_cashier_use_case(self) -> UpdateCashierUseCase:
        return UpdateCashierUseCase(
            users=self.user_repository, password_hasher=self.password_hasher
        )

    @cached_property
    def delete_cashier_use_case(self) -> DeleteCashierUseCase:
        return DeleteCashierUseCase(self.user_repository)

    @cached_property
    def list_sale_orders_use_case(self) -> ListSaleOrdersUseCase:
        return ListSaleOrdersUseCase(self.sale_order_repository)

    @cached_property
    def get_sale_order_use_case(self) -> GetSaleOrderUseCase:
        return GetSaleOrderUseCase(self.sale_order_repository)

    @cached_property
    def create_sale_order_use_case(self) -> CreateSaleOrderUseCase:
        return CreateSaleOrderUseCase(self.sale_order_repository, clock=self._clock)

    @cached_property
    def update_sale_order_use_case(self) -> UpdateSaleOrderUseCase:
        return UpdateSaleOrderUseCase(self.sale_order_repository)

    @cached_property
    def delete_sale_order_use_case(self) -> DeleteSaleOrderUseCase:
        return DeleteSaleOrderUseCase(self.sale_order_repository)

    # Controllers

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController()

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            gate=self.request_gate,
        )

    @cached_property
    def sale_orders_controller(self) -> SaleOrdersController:
        return SaleOrdersController(
            gate=self.request_gate,
            list_orders=self.list_sale_orders_use_case,
            get_order=self.get_sale_order_use_case,
            create_order=self.create_sale_order_use_case,
            update_order=self.update_sale_order_use_case,
            delete_order=self.delete_sale_order_use_case,
        )

    @cached_property
    def cashiers_controller(self) -> CashiersController:
        return CashiersController(
            gate=self.request_gate,
            list_cashiers=self.list_cashiers_use_case,
            get_cashier=self.get_cashier_use_case,
            create_cashier=self.create_cashier_use_case,
            update_cashier=self.update_cashier_use_case,
            delete_cashier=self.delete_cashier_use_case,
        )


__all__ = ["Container"]
