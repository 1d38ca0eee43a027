# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, request
from pydantic import ValidationError

from pos_backend.application.use_cases.cashiers.create_cashier import (
    CreateCashierInput, CreateCashierUseCase)
from pos_backend.application.use_cases.cashiers.delete_cashier import \
    DeleteCashierUseCase
from pos_backend.application.use_cases.cashiers.get_cashier import \
    GetCashierUseCase
from pos_backend.application.use_cases.cashiers.list_cashiers import \
    ListCashiersUseCase
from pos_backend.application.use_cases.cashiers.update_cashier import (
    UpdateCashierInput, UpdateCashierUseCase)
from pos_backend.domain.users.entities import AuthenticatedIdentity, Role
from pos_backend.infrastructure.audit import AuditAction, audit_log
from pos_backend.infrastructure.auth.middleware import RequestGate
from pos_backend.interfaces.http.dto.common import (PaginatedDTO,
                                                    PaginationQueryDTO)
from pos_backend.interfaces.http.dto.users import (CashierDTO,
                                                   CreateCashierDTO,
                                                   UpdateCashierDTO)
from pos_backend.interfaces.http.responses import client_ip, success
from pos_backend.shared.errors.validation import raise_validation_error


class CashiersController:
    """Owner-only management of cashier accounts."""

    def __init__(
        self,
        *,
        gate: RequestGate,
        list_cashiers: ListCashiersUseCase,
        get_cashier: GetCashierUseCase,
        create_cashier: CreateCashierUseCase,
        update_cashier: UpdateCashierUseCase,
        delete_cashier: DeleteCashierUseCase,
    ) -> None:
        self._gate = gate
        self._list_cashiers = list_cashiers
        self._get_cashier = get_cashier
        self._create_cashier = create_cashier
        self._update_cashier = update_cashier
        self._delete_cashier = delete_cashier

    def list(self, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        query = PaginationQueryDTO.model_validate(request.args.to_dict())
        page = self._list_cashiers.execute(query.to_page_request())
        return success(
            "Cashiers retrieved successfully", PaginatedDTO.from_page(page, CashierDTO)
        )

    def get(self, user_id: int, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        cashier = self._get_cashier.execute(user_id)
        return success("Cashier retrieved successfully", CashierDTO.model_validate(cashier))

    def create(self, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        try:
            dto = CreateCashierDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        cashier = self._create_cashier.execute(
            CreateCashierInput(username=dto.username, password=dto.password, name=dto.name)
        )
        audit_log(
            AuditAction.CASHIER_CREATED,
            user_id=identity.user_id,
            ip_address=client_ip(request),
            details={"cashier_id": cashier.id, "username": cashier.username},
        )
        return success(
            "Cashier created successfully",
            CashierDTO.model_validate(cashier),
            HTTPStatus.CREATED,
        )

    def update(self, user_id: int, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        try:
            dto = UpdateCashierDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        cashier = self._update_cashier.execute(
            user_id,
            UpdateCashierInput(
                username=dto.username,
                password=dto.password,
                name=dto.name,
                is_active=dto.is_active,
            ),
        )
        audit_log(
            AuditAction.CASHIER_UPDATED,
            user_id=identity.user_id,
            ip_address=client_ip(request),
            details={"cashier_id": user_id, "fields": sorted(dto.model_fields_set)},
        )
        return success("Cashier updated successfully", CashierDTO.model_validate(cashier))

    def delete(self, user_id: int, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        self._delete_cashier.execute(user_id)
        audit_log(
            AuditAction.CASHIER_DELETED,
            user_id=identity.user_id,
            ip_address=client_ip(request),
            details={"cashier_id": user_id},
        )
        return success("Cashier deleted successfully")

    def as_blueprint(self) -> Blueprint:
        owner_only = self._gate.require_role(Role.OWNER)
        bp = Blueprint("cashiers", __name__, url_prefix="/users/cashier")
        bp.add_url_rule("", endpoint="list", view_func=owner_only(self.list), methods=["GET"])
        bp.add_url_rule(
            "", endpoint="create", view_func=owner_only(self.create), methods=["POST"]
        )
        bp.add_url_rule(
            "/<int:user_id>", endpoint="get", view_func=owner_only(self.get), methods=["GET"]
        )
        bp.add_url_rule(
            "/<int:user_id>",
            endpoint="update",
            view_func=owner_only(self.update),
            methods=["PATCH", "PUT"],
        )
        bp.add_url_rule(
            "/<int:user_id>",
            endpoint="delete",
            view_func=owner_only(self.delete),
            methods=["DELETE"],
        )
        return bp
