"""MailLink configuration package.

What:
  Provide one import surface for configuration loading, validation, and the
  account registry.

Why:
  Callers go through the loader helpers so every document passes schema
  validation before use.

Interfaces:
  - load_runtime_config / get_runtime_config / reset_runtime_config: Resolve
    ``config.yaml`` and cache the resulting model.
  - load_accounts / dump_accounts: Registry document (de)serialisation.
  - AccountRegistry: Filesystem-backed registry of account indexes.
  - RuntimeConfig / ValidationError and the loader exception types.
"""

from .accounts import AccountRegistry
from .loader import (
    AccountRegistryError,
    ConfigLoadError,
    RuntimeConfigError,
    dump_accounts,
    get_runtime_config,
    load_accounts,
    load_runtime_config,
    reset_runtime_config,
)
from .schema import RuntimeConfig, ValidationError

__all__ = [
    "AccountRegistry",
    "AccountRegistryError",
    "ConfigLoadError",
    "RuntimeConfigError",
    "load_accounts",
    "dump_accounts",
    "get_runtime_config",
    "load_runtime_config",
    "reset_runtime_config",
    "RuntimeConfig",
    "ValidationError",
]
