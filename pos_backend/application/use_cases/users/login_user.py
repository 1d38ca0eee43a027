# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from datetime import timedelta

from pos_backend.domain.users.entities import IdentityClaims, LoginResult
from pos_backend.domain.users.exceptions import InvalidCredentialsError
from pos_backend.domain.users.repositories import PasswordHasher, TokenCodec, UserRepository
from pos_backend.shared.logging import logger


class LoginUserUseCase:
    """Exchange a username and password for a signed session token.

    Unknown usernames, inactive accounts and wrong passwords all raise the same
    ``InvalidCredentialsError``. A password check runs on every path, against
    a throwaway hash when the user does not exist, so response timing does not
    reveal which usernames are registered.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        tokens: TokenCodec,
        token_ttl: timedelta,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._tokens = tokens
        self._token_ttl = token_ttl
        self._dummy_hash = password_hasher.hash(secrets.token_urlsafe(16))

    def execute(
        self, username: str, password: str, ip_address: str | None = None
    ) -> LoginResult:
        user = self._users.find_active_by_username(username)
        hashed = user.password_hash if user else self._dummy_hash
        password_valid = self._password_hasher.verify(password, hashed)

        if user is None or not password_valid:
            logger.info(f"auth.login: rejected username={username} ip={ip_address}")
            raise InvalidCredentialsError()

        token = self._tokens.issue(IdentityClaims.for_user(user), self._token_ttl)
        logger.info(f"auth.login: issued token user_id={user.id} role={user.role.value}")
        return LoginResult(token=token, user=user)
