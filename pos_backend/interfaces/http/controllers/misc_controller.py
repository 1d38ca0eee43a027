# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify

from pos_backend.infrastructure.health import check_database
from pos_backend.interfaces.http.responses import success
from pos_backend.shared.logging import logger


class MiscController:
    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"ok": True}
        try:
            check_database()
            status["database"] = "ok"
        except Exception as exc:
            logger.error(f"health: database check failed: {type(exc).__name__}")
            status["ok"] = False
            status["database"] = "unavailable"
            code = HTTPStatus.SERVICE_UNAVAILABLE
            payload = {
                "code": int(code),
                "status": "failed",
                "message": "Service unavailable",
                "data": status,
            }
            return jsonify(payload), int(code)
        return success("Service is healthy", status)
