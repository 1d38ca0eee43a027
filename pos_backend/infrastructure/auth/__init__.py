# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .middleware import AccessController, RequestGate
from .revocation import InMemoryRevocationStore, ReadWriteLock
from .token_codec import JwtTokenCodec

__all__ = [
    "AccessController",
    "InMemoryRevocationStore",
    "JwtTokenCodec",
    "ReadWriteLock",
    "RequestGate",
]
