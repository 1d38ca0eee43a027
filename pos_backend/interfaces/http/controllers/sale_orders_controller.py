# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, request
from pydantic import ValidationError

from pos_backend.application.use_cases.sales.create_sale_order import (
    CreateSaleOrderInput, CreateSaleOrderUseCase)
from pos_backend.application.use_cases.sales.delete_sale_order import \
    DeleteSaleOrderUseCase
from pos_backend.application.use_cases.sales.get_sale_order import \
    GetSaleOrderUseCase
from pos_backend.application.use_cases.sales.list_sale_orders import \
    ListSaleOrdersUseCase
from pos_backend.application.use_cases.sales.update_sale_order import \
    UpdateSaleOrderUseCase
from pos_backend.domain.users.entities import AuthenticatedIdentity, Role
from pos_backend.infrastructure.audit import AuditAction, audit_log
from pos_backend.infrastructure.auth.middleware import RequestGate
from pos_backend.interfaces.http.dto.common import (PaginatedDTO,
                                                    PaginationQueryDTO)
from pos_backend.interfaces.http.dto.sale_orders import (CreateSaleOrderDTO,
                                                         SaleOrderDTO,
                                                         UpdateSaleOrderDTO)
from pos_backend.interfaces.http.responses import client_ip, success
from pos_backend.shared.errors.validation import raise_validation_error


class SaleOrdersController:
    def __init__(
        self,
        *,
        gate: RequestGate,
        list_orders: ListSaleOrdersUseCase,
        get_order: GetSaleOrderUseCase,
        create_order: CreateSaleOrderUseCase,
        update_order: UpdateSaleOrderUseCase,
        delete_order: DeleteSaleOrderUseCase,
    ) -> None:
        self._gate = gate
        self._list_orders = list_orders
        self._get_order = get_order
        self._create_order = create_order
        self._update_order = update_order
        self._delete_order = delete_order

    def list(self, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        query = PaginationQueryDTO.model_validate(request.args.to_dict())
        page = self._list_orders.execute(query.to_page_request())
        return success(
            "Sale orders retrieved successfully", PaginatedDTO.from_page(page, SaleOrderDTO)
        )

    def get(self, order_id: int, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        order = self._get_order.execute(order_id)
        return success("Sale order retrieved successfully", SaleOrderDTO.model_validate(order))

    def create(self, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        try:
            dto = CreateSaleOrderDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        order = self._create_order.execute(
            CreateSaleOrderInput(
                customer_name=dto.customer_name,
                notes=dto.notes,
                lines=[item.to_line() for item in dto.items],
            ),
            created_by_id=identity.user_id,
        )
        audit_log(
            AuditAction.SALE_ORDER_CREATED,
            user_id=identity.user_id,
            ip_address=client_ip(request),
            details={"order_id": order.id, "order_number": order.order_number},
        )
        return success(
            "Sale order created successfully",
            SaleOrderDTO.model_validate(order),
            HTTPStatus.CREATED,
        )

    def update(self, order_id: int, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        try:
            dto = UpdateSaleOrderDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        order = self._update_order.execute(order_id, dto.to_changes())
        audit_log(
            AuditAction.SALE_ORDER_UPDATED,
            user_id=identity.user_id,
            ip_address=client_ip(request),
            details={"order_id": order_id},
        )
        return success("Sale order updated successfully", SaleOrderDTO.model_validate(order))

    def delete(self, order_id: int, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        self._delete_order.execute(order_id)
        audit_log(
            AuditAction.SALE_ORDER_DELETED,
            user_id=identity.user_id,
            ip_address=client_ip(request),
            details={"order_id": order_id},
        )
        return success("Sale order deleted successfully")

    def as_blueprint(self) -> Blueprint:
        staff = self._gate.require_role(Role.CASHIER, Role.OWNER)
        bp = Blueprint("sale_orders", __name__, url_prefix="/sale-orders")
        bp.add_url_rule("", endpoint="list", view_func=staff(self.list), methods=["GET"])
        bp.add_url_rule("", endpoint="create", view_func=staff(self.create), methods=["POST"])
        bp.add_url_rule(
            "/<int:order_id>", endpoint="get", view_func=staff(self.get), methods=["GET"]
        )
        bp.add_url_rule(
            "/<int:order_id>",
            endpoint="update",
            view_func=staff(self.update),
            methods=["PATCH", "PUT"],
        )
        bp.add_url_rule(
            "/<int:order_id>",
            endpoint="delete",
            view_func=staff(self.delete),
            methods=["DELETE"],
        )
        return bp
