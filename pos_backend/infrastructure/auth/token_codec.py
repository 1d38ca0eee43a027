# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed session tokens (HS256 JWT).

The payload carries ``user_id``, ``username``, ``role``, ``iat``, ``exp`` and a
random ``jti`` so two logins in the same second still get distinct tokens.
Expiry is checked against the injected clock rather than PyJWT's wall clock so
callers and tests agree on what "now" means.

The HMAC over ``header.payload`` is checked on the raw text before anything is
decoded, so altering any character of a token is reported as a bad signature.
Only input with no signature segment at all counts as malformed at that stage.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.algorithms import HMACAlgorithm
from jwt.exceptions import (
    DecodeError,
    InvalidTokenError,
)
from jwt.exceptions import (
    InvalidSignatureError as JwtInvalidSignatureError,
)
from jwt.utils import base64url_decode, base64url_encode

from pos_backend.domain.exceptions import InvariantViolation
from pos_backend.domain.users.entities import IdentityClaims
from pos_backend.domain.users.exceptions import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
)

Clock = Callable[[], datetime]

_HMAC_HASHES = {
    "HS256": HMACAlgorithm.SHA256,
    "HS384": HMACAlgorithm.SHA384,
    "HS512": HMACAlgorithm.SHA512,
}
SUPPORTED_ALGORITHMS = tuple(_HMAC_HASHES)
_REQUIRED_CLAIMS = ("user_id", "username", "role", "iat", "exp")


def utc_now() -> datetime:
    return datetime.now(UTC)


class JwtTokenCodec:
    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        clock: Clock = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret must not be empty")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"unsupported signing algorithm {algorithm!r}")
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock
        self._signer = HMACAlgorithm(_HMAC_HASHES[algorithm])
        self._key = self._signer.prepare_key(secret)

    def issue(self, claims: IdentityClaims, ttl: timedelta) -> str:
        issued_at = int(self._clock().timestamp())
        payload: dict[str, Any] = {
            "user_id": claims.user_id,
            "username": claims.username,
            "role": claims.role.value,
            "iat": issued_at,
            "exp": issued_at + int(ttl.total_seconds()),
            "jti": secrets.token_hex(8),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> IdentityClaims:
        self._check_signature(token)
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["exp", "iat"],
                },
            )
        except JwtInvalidSignatureError as exc:
            raise InvalidSignatureError() from exc
        except (DecodeError, InvalidTokenError) as exc:
            raise MalformedTokenError() from exc

        return self._claims_from_payload(payload)

    def _check_signature(self, token: str) -> None:
        signing_input, dot, signature = (token or "").rpartition(".")
        if not dot or not signing_input or not signature:
            raise MalformedTokenError()
        try:
            raw_signature = base64url_decode(signature)
        except ValueError as exc:
            raise InvalidSignatureError() from exc
        # Reject non-canonical base64 so the spare low bits cannot be flipped.
        if base64url_encode(raw_signature) != signature.encode("utf-8"):
            raise InvalidSignatureError()
        if not self._signer.verify(signing_input.encode("utf-8"), self._key, raw_signature):
            raise InvalidSignatureError()

    def _claims_from_payload(self, payload: dict[str, Any]) -> IdentityClaims:
        if any(name not in payload for name in _REQUIRED_CLAIMS):
            raise MalformedTokenError()

        exp = payload["exp"]
        if isinstance(exp, bool) or not isinstance(exp, int):
            raise MalformedTokenError()
        if exp <= int(self._clock().timestamp()):
            raise ExpiredTokenError()

        try:
            return IdentityClaims(
                user_id=payload["user_id"],
                username=payload["username"],
                role=payload["role"],
                expires_at=datetime.fromtimestamp(exp, UTC),
            )
        except (InvariantViolation, OverflowError, OSError, ValueError) as exc:
            raise MalformedTokenError() from exc


__all__ = ["Clock", "JwtTokenCodec", "utc_now"]
