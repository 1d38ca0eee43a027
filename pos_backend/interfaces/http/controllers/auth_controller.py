# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, request
from pydantic import ValidationError

from pos_backend.application.use_cases.users.login_user import LoginUserUseCase
from pos_backend.application.use_cases.users.logout_user import LogoutUserUseCase
from pos_backend.domain.users.entities import AuthenticatedIdentity
from pos_backend.domain.users.exceptions import InvalidCredentialsError
from pos_backend.infrastructure.audit import AuditAction, audit_log
from pos_backend.infrastructure.auth.middleware import RequestGate
from pos_backend.interfaces.http.dto.auth import (LoginRequestDTO,
                                                  LoginResponseDTO,
                                                  LoginUserDTO)
from pos_backend.interfaces.http.responses import client_ip, success
from pos_backend.shared.errors.validation import raise_validation_error
from pos_backend.shared.logging import logger
from pos_backend.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        gate: RequestGate,
    ) -> None:
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._gate = gate

    @rate_limit()
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_ip(request)

        try:
            result = self._login_use_case.execute(dto.username, dto.password, ip_address)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                user_id=None,
                ip_address=ip_address,
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=result.user.id,
            ip_address=ip_address,
            details={"username": result.user.username, "role": result.user.role.value},
            success=True,
        )
        logger.info(f"auth.login: ok user_id={result.user.id}")
        payload = LoginResponseDTO(
            token=result.token, user=LoginUserDTO.model_validate(result.user)
        )
        return success("Login successful", payload)

    def logout(self, identity: AuthenticatedIdentity) -> tuple[Response, int]:
        self._logout_use_case.execute(identity.token, identity.expires_at)

        audit_log(
            AuditAction.LOGOUT,
            user_id=identity.user_id,
            ip_address=client_ip(request),
            details={},
            success=True,
        )
        logger.info(f"auth.logout: ok user_id={identity.user_id}")
        return success("Logout successful")

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/auth")
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/logout", view_func=self._gate.login_required(self.logout), methods=["POST"]
        )
        return bp
