"""Strict loaders and serializers for MailLink configuration documents.

What:
  Locate, parse, validate, and serialise the YAML documents MailLink reads:
  the runtime ``config.yaml`` and the account registry file.

Why:
  Both files live outside the package and can be malformed or hand-edited.
  Centralising parsing guarantees consistent validation and error messages so
  the CLI and the registry can trust the resulting models.

How:
  Resolve candidate paths from an explicit argument, the
  ``MAILLINK_CONFIG_PATH`` environment variable, and well-known defaults. Parse
  YAML with :func:`yaml.safe_load`, validate with the Pydantic models from
  :mod:`maillink.config.schema`, and wrap every failure in a typed exception
  carrying the offending path.

Interfaces:
  - :func:`load_runtime_config` / :func:`get_runtime_config` /
    :func:`reset_runtime_config`: Manage ``config.yaml`` discovery and caching.
  - :func:`load_accounts` / :func:`dump_accounts`: Convert the account
    registry document to and from bytes.
  - :class:`ConfigLoadError`, :class:`RuntimeConfigError`,
    :class:`AccountRegistryError`.

Invariants:
  - Every external payload passes strict Pydantic validation before it is
    returned.
  - An explicitly requested configuration path (argument or environment) must
    exist; only the implicit default locations may be absent, in which case the
    built-in defaults apply.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

import yaml
from pydantic import ValidationError as _PydanticValidationError

from .schema import AccountRegistryV1, RuntimeConfig


class ConfigLoadError(Exception):
    """Base error for configuration parsing or validation failures.

    What:
      Represent fatal issues encountered while reading or validating MailLink
      documents.

    Why:
      Grouping failures under a single type lets the CLI report user mistakes
      with one handler.

    How:
      Derive from :class:`Exception`; callers include the failing path in the
      message.
    """


class RuntimeConfigError(ConfigLoadError):
    """Error raised when ``config.yaml`` cannot be loaded or validated."""


class AccountRegistryError(ConfigLoadError):
    """Error raised when the account registry file is unreadable or invalid."""


_CONFIG_ENV = "MAILLINK_CONFIG_PATH"
_DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("config.yaml"),
    Path("~/.config/maillink/config.yaml"),
)
_RUNTIME_CACHE: Optional[Tuple[Optional[Path], RuntimeConfig]] = None


def _candidate_paths(path: Optional[Path]) -> Iterable[Tuple[Path, bool]]:
    """Yield ``(path, required)`` pairs in priority order.

    What:
      Produce the ordered list of locations that should be inspected for
      ``config.yaml``.

    Why:
      Operators override the location through a function argument or an
      environment variable; a typo there must not silently fall back to
      defaults, hence the ``required`` flag.

    How:
      Check the explicit argument, ``MAILLINK_CONFIG_PATH``, then the default
      locations, expanding ``~`` and skipping duplicates.

    Args:
      path: Explicit path requested by the caller, or ``None``.

    Yields:
      Candidate paths ordered from most specific to least specific.
    """

    seen: set[Path] = set()
    if path is not None:
        candidate = path.expanduser()
        seen.add(candidate)
        yield candidate, True
    env_path = os.environ.get(_CONFIG_ENV)
    if env_path:
        candidate = Path(env_path).expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate, True
    for default in _DEFAULT_LOCATIONS:
        candidate = default.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate, False


def _describe_yaml_error(exc: yaml.YAMLError) -> str:
    """Summarise ``exc`` by problem and position, without the source snippet."""

    problem = getattr(exc, "problem", None) or type(exc).__name__
    mark = getattr(exc, "problem_mark", None)
    if mark is None:
        return problem
    return f"{problem} (line {mark.line + 1}, column {mark.column + 1})"


def _describe_validation_error(exc: _PydanticValidationError) -> str:
    """List failing field locations and messages; input values are left out."""

    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors(include_input=False)
    )


def _parse_yaml_mapping(text: str, source: Path | str, error: type[ConfigLoadError]) -> dict[str, Any]:
    """Parse ``text`` and insist on a top-level mapping."""

    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise error(f"Invalid YAML in {source}: {_describe_yaml_error(exc)}") from exc
    if not isinstance(payload, dict):
        raise error(f"{source} must contain a mapping at the top-level")
    return payload


def _load_runtime_from_path(path: Path) -> RuntimeConfig:
    """Load and validate ``config.yaml`` from a specific path.

    Raises:
      RuntimeConfigError: If the file cannot be read or fails validation.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeConfigError(f"Configuration file missing: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise RuntimeConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    payload = _parse_yaml_mapping(text, path, RuntimeConfigError)
    try:
        return RuntimeConfig.model_validate(payload)
    except _PydanticValidationError as exc:
        raise RuntimeConfigError(f"Invalid config.yaml ({path}): {exc}") from exc


def load_runtime_config(
    path: Optional[Path | str] = None,
    *,
    reload: bool = False,
) -> RuntimeConfig:
    """Resolve, parse, and cache the runtime configuration.

    What:
      Locate ``config.yaml`` using the precedence chain, parse it, and return
      a validated :class:`RuntimeConfig`.

    Why:
      The CLI and the registry both read settings; caching avoids repeated
      disk IO while ``reload`` allows deterministic refreshes in tests.

    How:
      Consult the module cache unless ``reload`` is requested, iterate the
      candidates until an existing file is found, and fall back to
      ``RuntimeConfig()`` when only optional defaults were searched.

    Args:
      path: Optional explicit location of ``config.yaml``.
      reload: When ``True`` forces a fresh load bypassing the cache.

    Returns:
      The validated runtime configuration.

    Raises:
      RuntimeConfigError: If a required file is missing or any file is
      invalid.
    """

    global _RUNTIME_CACHE

    requested_path = Path(path).expanduser() if isinstance(path, (str, Path)) else None
    if not reload and _RUNTIME_CACHE is not None:
        cached_path, cached_config = _RUNTIME_CACHE
        if requested_path is None or cached_path == requested_path:
            return cached_config

    for candidate, required in _candidate_paths(requested_path):
        if not candidate.exists():
            if required:
                raise RuntimeConfigError(f"Configuration file missing: {candidate}")
            continue
        config = _load_runtime_from_path(candidate)
        _RUNTIME_CACHE = (candidate, config)
        return config

    config = RuntimeConfig()
    _RUNTIME_CACHE = (None, config)
    return config


def get_runtime_config() -> RuntimeConfig:
    """Return the cached runtime configuration, loading it on demand."""

    return load_runtime_config()


def reset_runtime_config() -> None:
    """Clear the runtime configuration cache."""

    global _RUNTIME_CACHE
    _RUNTIME_CACHE = None


def load_accounts(payload: bytes, *, source: Path | str = "<registry>") -> AccountRegistryV1:
    """Deserialize the account registry document.

    Args:
      payload: Raw YAML bytes read from disk.
      source: Path used in error messages.

    Returns:
      The validated :class:`AccountRegistryV1` model. Empty files produce an
      empty registry.

    Raises:
      AccountRegistryError: If the bytes are not valid YAML or fail
      validation.
    """

    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise AccountRegistryError(f"Registry {source} is not UTF-8: {exc}") from exc
    data = _parse_yaml_mapping(text, source, AccountRegistryError)
    if not data:
        return AccountRegistryV1.minimal()
    try:
        return AccountRegistryV1.model_validate(data)
    except _PydanticValidationError as exc:
        raise AccountRegistryError(
            f"Invalid account registry ({source}): {_describe_validation_error(exc)}"
        ) from exc


def dump_accounts(registry: AccountRegistryV1) -> bytes:
    """Serialise ``registry`` into UTF-8 YAML bytes."""

    return yaml.safe_dump(registry.model_dump(mode="json"), sort_keys=False).encode("utf-8")
