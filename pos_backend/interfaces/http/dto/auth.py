# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pos_backend.domain.users.entities import Role


class LoginRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=128)


class LoginUserDTO(BaseModel):
    id: int
    username: str
    name: str
    role: Role

    model_config = ConfigDict(from_attributes=True)


class LoginResponseDTO(BaseModel):
    token: str
    user: LoginUserDTO
