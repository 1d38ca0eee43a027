# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import DomainError, InvariantViolation
from .sales.entities import SaleOrder, SaleOrderChanges, SaleOrderItem, SaleOrderLine
from .users.entities import AuthenticatedIdentity, IdentityClaims, LoginResult, Role, User

__all__ = [
    "AuthenticatedIdentity",
    "DomainError",
    "IdentityClaims",
    "InvariantViolation",
    "LoginResult",
    "Role",
    "SaleOrder",
    "SaleOrderChanges",
    "SaleOrderItem",
    "SaleOrderLine",
    "User",
]
