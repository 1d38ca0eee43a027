# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_INSECURE_SECRETS = ("dev", "development", "test", "secret", "changeme")


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///pos.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env", validate_by_name=True, extra="ignore"
    )


class AuthConfig(BaseSettings):
    jwt_secret: str = Field(alias="JWT_SECRET", min_length=1)
    jwt_expiry_hours: int = Field(24, ge=1, alias="JWT_EXPIRY_HOURS")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")

    model_config = SettingsConfigDict(
        env_file=".env", validate_by_name=True, extra="ignore"
    )

    @field_validator("jwt_secret", mode="after")
    @classmethod
    def _reject_blank_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("JWT_SECRET must not be blank")
        return value

    @field_validator("jwt_algorithm", mode="after")
    @classmethod
    def _only_hmac(cls, value: str) -> str:
        if value not in ("HS256", "HS384", "HS512"):
            raise ValueError("JWT_ALGORITHM must be one of HS256, HS384, HS512")
        return value


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, ge=0.1, alias="RL_WINDOW")
    rate_limit_max_keys: int = Field(10_000, ge=1, alias="RL_MAX_KEYS")

    # Reverse proxies in front of the app; X-Forwarded-For is ignored when 0
    trusted_proxy_hops: int = Field(0, ge=0, alias="TRUSTED_PROXY_HOPS")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = SettingsConfigDict(
        env_file=".env", validate_by_name=True, extra="ignore"
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


class SeedConfig(BaseSettings):
    enabled: bool = Field(True, alias="SEED_DEFAULT_USERS")
    owner_username: str = Field("owner", alias="SEED_OWNER_USERNAME")
    owner_password: str = Field("owner123", alias="SEED_OWNER_PASSWORD")
    cashier_username: str = Field("cashier", alias="SEED_CASHIER_USERNAME")
    cashier_password: str = Field("cashier123", alias="SEED_CASHIER_PASSWORD")

    model_config = SettingsConfigDict(
        env_file=".env", validate_by_name=True, extra="ignore"
    )

    @field_validator("enabled", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    def uses_default_passwords(self) -> bool:
        return self.owner_password == "owner123" or self.cashier_password == "cashier123"


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _seed_config_factory() -> SeedConfig:
    return SeedConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str | None = Field(None, alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")
    log_rotation: str = Field("20 MB", alias="LOG_ROTATION")
    log_retention: str = Field("14 days", alias="LOG_RETENTION")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    seed: SeedConfig = Field(default_factory=_seed_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.auth.jwt_secret.lower() in _INSECURE_SECRETS or len(self.auth.jwt_secret) < 16:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure JWT_SECRET detected in production!\n"
                "   JWT_SECRET must be a strong random value in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        if self.seed.enabled and self.seed.uses_default_passwords():
            print(
                "\n❌ CRITICAL SECURITY ERROR: Default seed passwords in production!\n"
                "   Set SEED_OWNER_PASSWORD and SEED_CASHIER_PASSWORD or SEED_DEFAULT_USERS=false.\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    @property
    def token_ttl_hours(self) -> int:
        return self.auth.jwt_expiry_hours


def _build_config() -> AppConfig:
    try:
        return AppConfig()
    except ValidationError as exc:
        fields = sorted(
            {".".join(str(part) for part in err.get("loc", ())) or "unknown" for err in exc.errors()}
        )
        print(
            "\n❌ CONFIGURATION ERROR: the service cannot start.\n"
            f"   Invalid or missing settings: {', '.join(fields)}\n"
            "   JWT_SECRET is required and must not be empty.\n",
            file=sys.stderr,
        )
        raise SystemExit(1) from exc


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return _build_config()


__all__ = ["AppConfig", "AuthConfig", "DatabaseConfig", "SecurityConfig", "SeedConfig", "load_config"]
