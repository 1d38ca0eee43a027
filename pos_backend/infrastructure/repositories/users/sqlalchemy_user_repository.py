# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from pos_backend.domain.users.entities import Role
from pos_backend.domain.users.entities import User as DomainUser
from pos_backend.domain.users.repositories import UserRepository
from pos_backend.infrastructure.db.models import User
from pos_backend.infrastructure.unit_of_work import unit_of_work_scope


def to_domain_user(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        name=row.name or "",
        password_hash=row.password_hash,
        role=Role.parse(row.role),
        is_active=bool(row.is_active),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        clock: Callable[[], datetime] | None = None,
    ):
        self._session_factory = session_factory
        self._clock = clock or (lambda: datetime.now(UTC))

    def find_active_by_username(self, username: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(User)
                .filter(
                    User.username == username,
                    User.deleted_at.is_(None),
                    User.is_active.is_(True),
                )
                .first()
            )
            return to_domain_user(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(User)
                .filter(User.id == user_id, User.deleted_at.is_(None))
                .first()
            )
            return to_domain_user(row) if row else None

    def username_taken(self, username: str, *, exclude_id: int | None = None) -> bool:
        # soft deleted rows still hold the unique username
        with unit_of_work_scope(self._session_factory) as session:
            query = session.query(User.id).filter(User.username == username)
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            return query.first() is not None

    def add(self, user: DomainUser) -> DomainUser:
        with unit_of_work_scope(self._session_factory) as session:
            row = User(
                username=user.username,
                name=user.name,
                password_hash=user.password_hash,
                role=user.role.value,
                is_active=user.is_active,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return to_domain_user(row)

    def update(self, user: DomainUser) -> DomainUser:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user.id)
            if row is None or row.deleted_at is not None:
                raise LookupError(f"user {user.id} does not exist")
            row.username = user.username
            row.name = user.name
            row.password_hash = user.password_hash
            row.role = user.role.value
            row.is_active = user.is_active
            session.flush()
            session.refresh(row)
            return to_domain_user(row)

    def soft_delete(self, user_id: int) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row is None or row.deleted_at is not None:
                return False
            row.deleted_at = self._clock()
            return True

    def list_by_role(
        self, role: Role, *, offset: int, limit: int
    ) -> tuple[list[DomainUser], int]:
        with unit_of_work_scope(self._session_factory) as session:
            base = session.query(User).filter(
                User.role == role.value, User.deleted_at.is_(None)
            )
            total = base.with_entities(func.count(User.id)).scalar() or 0
            rows = (
                base.order_by(User.created_at.desc(), User.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [to_domain_user(row) for row in rows], int(total)

    def count_by_role(self, role: Role) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            total = (
                session.query(func.count(User.id))
                .filter(User.role == role.value, User.deleted_at.is_(None))
                .scalar()
            )
            return int(total or 0)


__all__ = ["SqlAlchemyUserRepository", "to_domain_user"]
