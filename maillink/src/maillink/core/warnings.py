"""Edge-case warnings attached to a message link.

What:
  Detect the two situations in which a canonical address may not open the
  expected message for its reader: the account ordering changed, or the
  message was sent in confidential mode.

Why:
  The canonical address is only as durable as the account index inside it
  and the message's own access rules. Surfacing these cases lets the caller
  ask the user to double-check before storing the link.

How:
  :func:`detect_warnings` consults :class:`maillink.config.accounts.AccountRegistry`
  when an account email is known and appends a confidential-mode warning when
  requested.

Interfaces:
  :data:`WarningType`, :class:`LinkWarning`, :func:`detect_warnings`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

from ..config.accounts import AccountRegistry

WarningType = Literal["gmail_account_reorder", "gmail_confidential"]


@dataclass(frozen=True)
class LinkWarning:
    """Human-readable warning tagged with a machine-readable type."""

    type: WarningType
    message: str


def detect_warnings(
    account_email: Optional[str],
    account_index: str,
    confidential: bool,
    *,
    registry: Optional[AccountRegistry] = None,
) -> List[LinkWarning]:
    """Return the warnings that apply to the current link.

    Args:
      account_email: Email of the logged-in account, when known.
      account_index: Index extracted from the address.
      confidential: Whether the open message uses confidential mode.
      registry: Registry used for reorder detection; skipped when ``None``.

    Raises:
      AccountRegistryError: Propagated from the registry.
    """

    warnings: List[LinkWarning] = []
    if account_email and registry is not None:
        if registry.record(account_email, account_index) is not None:
            warnings.append(
                LinkWarning(
                    type="gmail_account_reorder",
                    message=(
                        "Gmail account order may have changed. The email link uses account index "
                        f"{account_index}. Please verify the link opens the correct email."
                    ),
                )
            )
    if confidential:
        warnings.append(
            LinkWarning(
                type="gmail_confidential",
                message=(
                    "This email is in confidential mode. The link may not work for other users "
                    "or may expire."
                ),
            )
        )
    return warnings
