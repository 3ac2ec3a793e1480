"""Pydantic models describing MailLink configuration documents."""
from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ValidationError(ValueError):
    """Raised when configuration data does not satisfy the schema."""


class AccountsConfig(BaseModel):
    """Where the account registry lives and how long entries are kept."""

    model_config = ConfigDict(extra="forbid")

    path: str = "~/.local/state/maillink/accounts.yaml"
    retention_days: int = Field(default=30, gt=0)


class LoggingConfig(BaseModel):
    """Structured logging defaults."""

    model_config = ConfigDict(extra="forbid")

    component: str = "maillink"
    level: Literal["DEBUG", "INFO", "WARN", "ERROR"] = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.upper()
            if value == "WARNING":
                return "WARN"
        return value


class RuntimeConfig(BaseModel):
    """Root configuration loaded from ``config.yaml``."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    accounts: AccountsConfig = Field(default_factory=AccountsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: int) -> int:
        if value != 1:
            raise ValidationError("config.yaml version must be 1")
        return value


class AccountEntry(BaseModel):
    """One remembered account email and the index it was last seen under."""

    model_config = ConfigDict(extra="forbid")

    email: str = Field(min_length=1)
    account_index: str = Field(pattern=r"^[0-9]+$")
    seen_at: datetime


class AccountRegistryV1(BaseModel):
    """Document persisted by :class:`maillink.config.accounts.AccountRegistry`."""

    model_config = ConfigDict(extra="forbid")

    version: Literal[1] = 1
    accounts: List[AccountEntry] = Field(default_factory=list)

    @classmethod
    def minimal(cls) -> "AccountRegistryV1":
        return cls()
