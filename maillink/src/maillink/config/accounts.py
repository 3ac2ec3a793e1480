"""MailLink account registry persistence.

What:
  Remember which account index each logged-in email address was last seen
  under, so a change in the ``/mail/u/<n>/`` ordering can be reported.

Why:
  Canonical addresses embed the account index. When the user signs in or out
  of another account, the webmail client renumbers sessions and an old link
  may open a different mailbox. Keeping a short history makes that visible
  before a link is stored somewhere durable.

How:
  Wrap :func:`maillink.config.loader.load_accounts` and
  :func:`~maillink.config.loader.dump_accounts`. Every write reloads the file,
  applies the change, drops entries older than the retention window, and
  saves the document again. Missing files are bootstrapped with an empty
  registry.

Interfaces:
  :class:`AccountRegistry` exposing ``load``, ``save``, ``entries``,
  ``record`` and ``prune``.

Invariants & Safety:
  - Only email addresses, account indexes and timestamps are stored.
  - Methods are non-transactional; each helper reloads the document first.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

from .loader import AccountRegistryError, dump_accounts, load_accounts
from .schema import AccountEntry, AccountRegistryV1, RuntimeConfig
from ..utils.logging import JsonLogger, get_logger


class AccountRegistry:
    """High-level wrapper around the account registry file.

    What:
      Encapsulates filesystem access and retention rules so callers work with
      :class:`AccountEntry` objects instead of raw YAML.

    Why:
      Reorder detection and the ``accounts`` CLI command share the same
      invariants (one entry per email, bounded age); keeping them here avoids
      drift between the two.

    How:
      Creates the parent directory and an empty document on construction, then
      performs a load-modify-save cycle on every write.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        retention_days: int = 30,
        logger: Optional[JsonLogger] = None,
    ) -> None:
        self._path = Path(path).expanduser()
        self._retention = timedelta(days=retention_days)
        self._logger = logger or get_logger("maillink.accounts")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise AccountRegistryError(f"Unable to create {self._path.parent}: {exc}") from exc
        if not self._path.exists():
            self.save(AccountRegistryV1.minimal())

    @classmethod
    def from_config(cls, runtime: RuntimeConfig, *, logger: Optional[JsonLogger] = None) -> "AccountRegistry":
        return cls(
            runtime.accounts.path,
            retention_days=runtime.accounts.retention_days,
            logger=logger,
        )

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AccountRegistryV1:
        """Load the registry, recreating it when the file disappeared."""

        try:
            payload = self._path.read_bytes()
        except FileNotFoundError:
            registry = AccountRegistryV1.minimal()
            self.save(registry)
            return registry
        except OSError as exc:
            raise AccountRegistryError(f"Unable to read {self._path}: {exc}") from exc
        return load_accounts(payload, source=self._path)

    def save(self, registry: AccountRegistryV1) -> None:
        try:
            self._path.write_bytes(dump_accounts(registry))
        except OSError as exc:
            raise AccountRegistryError(f"Unable to write {self._path}: {exc}") from exc

    def entries(self) -> List[AccountEntry]:
        return list(self.load().accounts)

    def record(self, email: str, account_index: str, *, now: Optional[datetime] = None) -> Optional[str]:
        """Store ``email`` under ``account_index`` and report a renumbering.

        What:
          Upserts the entry for ``email`` with a fresh timestamp.

        Why:
          A known email appearing under a different index means the session
          ordering changed since the last visit, so links built from the old
          index may open the wrong account.

        How:
          Reloads the registry, compares the stored index, replaces the entry,
          drops expired entries, and saves.

        Args:
          email: Address of the logged-in account.
          account_index: Index from the current address (digits as text).
          now: Override for the current time, used by tests.

        Returns:
          The previously stored index when it differs from ``account_index``,
          otherwise ``None``.
        """

        now = now or datetime.now(timezone.utc)
        registry = self.load()
        previous: Optional[str] = None
        kept: List[AccountEntry] = []
        for entry in registry.accounts:
            if entry.email == email:
                if entry.account_index != account_index:
                    previous = entry.account_index
                continue
            kept.append(entry)
        kept.append(AccountEntry(email=email, account_index=account_index, seen_at=now))
        registry.accounts = self._fresh(kept, now)
        self.save(registry)
        if previous is not None:
            self._logger.warning(
                "account_reorder_detected",
                email=email,
                previous_index=previous,
                account_index=account_index,
            )
        return previous

    def prune(self, *, now: Optional[datetime] = None) -> int:
        """Drop expired entries and return how many were removed."""

        now = now or datetime.now(timezone.utc)
        registry = self.load()
        kept = self._fresh(registry.accounts, now)
        removed = len(registry.accounts) - len(kept)
        if removed:
            registry.accounts = kept
            self.save(registry)
            self._logger.info("account_registry_pruned", removed=removed)
        return removed

    def _fresh(self, entries: List[AccountEntry], now: datetime) -> List[AccountEntry]:
        cutoff = now - self._retention
        return [entry for entry in entries if _aware(entry.seen_at) > cutoff]


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
