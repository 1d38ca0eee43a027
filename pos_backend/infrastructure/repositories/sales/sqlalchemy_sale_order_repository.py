# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from pos_backend.domain.sales.entities import OrderAuthor
from pos_backend.domain.sales.entities import SaleOrder as DomainSaleOrder
from pos_backend.domain.sales.entities import SaleOrderChanges, SaleOrderLine
from pos_backend.domain.sales.entities import SaleOrderItem as DomainSaleOrderItem
from pos_backend.domain.sales.entities import order_total
from pos_backend.domain.sales.repositories import SaleOrderRepository
from pos_backend.domain.users.entities import Role
from pos_backend.infrastructure.db.models import SaleOrder, SaleOrderItem
from pos_backend.infrastructure.unit_of_work import unit_of_work_scope
from pos_backend.shared.errors import InfrastructureError


def _to_domain(row: SaleOrder) -> DomainSaleOrder:
    author = row.created_by
    return DomainSaleOrder(
        id=row.id,
        order_number=row.order_number,
        customer_name=row.customer_name,
        notes=row.notes or "",
        total_amount=float(row.total_amount or 0),
        created_by_id=row.created_by_id,
        created_by=OrderAuthor(
            id=author.id,
            username=author.username,
            name=author.name or "",
            role=Role.parse(author.role),
        )
        if author is not None
        else None,
        items=tuple(
            DomainSaleOrderItem(
                id=item.id,
                sale_order_id=item.sale_order_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=float(item.unit_price),
                subtotal=float(item.subtotal),
                created_at=item.created_at,
                updated_at=item.updated_at,
            )
            for item in row.items
            if item.deleted_at is None
        ),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _item_rows(lines: Sequence[SaleOrderLine]) -> list[SaleOrderItem]:
    return [
        SaleOrderItem(
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            subtotal=line.subtotal,
        )
        for line in lines
    ]


class SqlAlchemySaleOrderRepository(SaleOrderRepository):
    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        clock: Callable[[], datetime] | None = None,
    ):
        self._session_factory = session_factory
        self._clock = clock or (lambda: datetime.now(UTC))

    def add(
        self,
        *,
        order_number: str,
        customer_name: str,
        notes: str,
        created_by_id: int,
        lines: Sequence[SaleOrderLine],
        created_at: datetime,
    ) -> DomainSaleOrder:
        with unit_of_work_scope(self._session_factory) as session:
            row = SaleOrder(
                order_number=order_number,
                customer_name=customer_name,
                notes=notes,
                total_amount=order_total(lines),
                created_by_id=created_by_id,
                created_at=created_at,
                updated_at=created_at,
            )
            row.items = _item_rows(lines)
            session.add(row)
            session.flush()
            order_id = row.id
        found = self.find_by_id(order_id)
        if found is None:
            raise InfrastructureError(
                "sale_order_not_persisted", context={"order_id": order_id}
            )
        return found

    def find_by_id(self, order_id: int) -> DomainSaleOrder | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = self._load(session, order_id)
            return _to_domain(row) if row else None

    def list(self, *, offset: int, limit: int) -> tuple[list[DomainSaleOrder], int]:
        with unit_of_work_scope(self._session_factory) as session:
            total = (
                session.query(func.count(SaleOrder.id))
                .filter(SaleOrder.deleted_at.is_(None))
                .scalar()
            )
            rows = (
                session.query(SaleOrder)
                .options(joinedload(SaleOrder.created_by), selectinload(SaleOrder.items))
                .filter(SaleOrder.deleted_at.is_(None))
                .order_by(SaleOrder.created_at.desc(), SaleOrder.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [_to_domain(row) for row in rows], int(total or 0)

    def apply_changes(
        self, order_id: int, changes: SaleOrderChanges
    ) -> DomainSaleOrder | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = self._load(session, order_id)
            if row is None:
                return None
            now = self._clock()
            if changes.customer_name is not None:
                row.customer_name = changes.customer_name.strip()
            if changes.notes is not None:
                row.notes = changes.notes
            if changes.lines is not None:
                for item in row.items:
                    if item.deleted_at is None:
                        item.deleted_at = now
                row.items.extend(_item_rows(changes.lines))
                row.total_amount = order_total(changes.lines)
            row.updated_at = now
        return self.find_by_id(order_id)

    def soft_delete(self, order_id: int) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            row = self._load(session, order_id)
            if row is None:
                return False
            now = self._clock()
            row.deleted_at = now
            for item in row.items:
                if item.deleted_at is None:
                    item.deleted_at = now
            return True

    @staticmethod
    def _load(session: Session, order_id: int) -> SaleOrder | None:
        return (
            session.query(SaleOrder)
            .options(joinedload(SaleOrder.created_by), selectinload(SaleOrder.items))
            .filter(SaleOrder.id == order_id, SaleOrder.deleted_at.is_(None))
            .first()
        )


__all__ = ["SqlAlchemySaleOrderRepository"]
