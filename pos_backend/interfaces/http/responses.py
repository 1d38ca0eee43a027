# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Response, jsonify
from pydantic import BaseModel


def success(
    message: str, data: Any = None, status: HTTPStatus = HTTPStatus.OK
) -> tuple[Response, int]:
    """Wrap ``data`` in the standard envelope; ``data`` is omitted when None."""
    payload: dict[str, Any] = {
        "code": int(status),
        "status": "success",
        "message": message,
    }
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    if data is not None:
        payload["data"] = data
    return jsonify(payload), int(status)


def client_ip(request) -> str | None:
    # ProxyFix rewrites remote_addr when TRUSTED_PROXY_HOPS is set.
    return request.remote_addr


__all__ = ["client_ip", "success"]
