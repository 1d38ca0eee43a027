# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from pos_backend.domain.users.entities import Role, User
from pos_backend.domain.users.repositories import PasswordHasher, UserRepository
from pos_backend.shared.config.settings import SeedConfig
from pos_backend.shared.logging import logger


class SeedError(Exception):
    pass


def seed_default_users(
    users: UserRepository, password_hasher: PasswordHasher, config: SeedConfig
) -> bool:
    """Create the default owner and cashier accounts on an empty install.

    Nothing happens once any owner exists. Returns True when users were created.
    """
    if not config.enabled:
        logger.info("seed: SEED_DEFAULT_USERS disabled, skipping")
        return False
    if users.count_by_role(Role.OWNER) > 0:
        logger.debug("seed: owner already present, skipping")
        return False

    defaults = (
        (config.owner_username, config.owner_password, "Store Owner", Role.OWNER),
        (config.cashier_username, config.cashier_password, "Cashier", Role.CASHIER),
    )
    now = datetime.now(UTC)
    try:
        for username, password, name, role in defaults:
            if users.username_taken(username):
                logger.warning(f"seed: username '{username}' already taken, not seeding it")
                continue
            users.add(
                User(
                    id=0,
                    username=username,
                    name=name,
                    password_hash=password_hasher.hash(password),
                    role=role,
                    created_at=now,
                    updated_at=now,
                )
            )
            logger.info(f"seed: created default {role.value} '{username}'")
    except Exception as e:
        logger.error(f"seed: failed to create default users: {e}")
        raise SeedError(f"Failed to create default users: {e}") from e

    if config.uses_default_passwords():
        logger.warning("seed: default users use the built-in passwords, change them")
    return True


__all__ = ["SeedError", "seed_default_users"]
