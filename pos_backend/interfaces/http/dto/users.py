# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pos_backend.domain.users.entities import Role


class CreateCashierDTO(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=1, max_length=255)

    @field_validator("username", "name", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class UpdateCashierDTO(BaseModel):
    username: str | None = Field(None, min_length=3, max_length=100)
    password: str | None = Field(None, min_length=6, max_length=128)
    name: str | None = Field(None, min_length=1, max_length=255)
    is_active: bool | None = None

    @field_validator("username", "name", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class CashierDTO(BaseModel):
    id: int
    username: str
    name: str
    role: Role
    is_active: bool
    created_at: datetime | None
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)
