"""Assemble everything known about the message behind an address.

What:
  Combine the :class:`~maillink.core.fragment.Locator` for an address with
  caller-supplied page facts (account email, subject, confidential flag) and
  the warnings that apply, producing one :class:`MessageLinkInfo` record.

Why:
  Callers that offer a "copy durable link" action need the locator and the
  caveats together. Warning detection touches the registry file and may fail;
  that must never prevent the link itself from being returned.

How:
  Interpret the address, run :func:`~maillink.core.warnings.detect_warnings`,
  and on :class:`~maillink.config.loader.AccountRegistryError` log the failure
  and fall back to an empty warning list.

Interfaces:
  :class:`MessageLinkInfo`, :func:`describe_message_link`.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ..config.accounts import AccountRegistry
from ..config.loader import AccountRegistryError
from ..utils.logging import JsonLogger, get_logger
from .fragment import interpret
from .warnings import LinkWarning, detect_warnings


@dataclass(frozen=True)
class MessageLinkInfo:
    """Locator fields plus page facts and warnings."""

    account_index: str
    message_id: Optional[str]
    canonical_address: str
    account_email: Optional[str] = None
    confidential: bool = False
    subject: Optional[str] = None
    warnings: List[LinkWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def describe_message_link(
    address: str,
    *,
    account_email: Optional[str] = None,
    confidential: bool = False,
    subject: Optional[str] = None,
    registry: Optional[AccountRegistry] = None,
    logger: Optional[JsonLogger] = None,
) -> MessageLinkInfo:
    """Interpret ``address`` and attach warnings.

    Args:
      address: Address of the active webmail tab.
      account_email: Logged-in account email, enables reorder detection.
      confidential: Whether the open message is in confidential mode.
      subject: Optional subject shown alongside the link.
      registry: Account registry; reorder detection is skipped without one.
      logger: Logger for registry failures.

    Returns:
      The assembled :class:`MessageLinkInfo`. Registry failures yield an
      empty warning list instead of an exception.
    """

    logger = logger or get_logger("maillink.link_info")
    locator = interpret(address)
    try:
        warnings = detect_warnings(
            account_email,
            locator.account_index,
            confidential,
            registry=registry,
        )
    except AccountRegistryError as exc:
        logger.error("warning_detection_failed", error=str(exc))
        warnings = []
    logger.debug(
        "message_link_described",
        account_index=locator.account_index,
        has_message=locator.has_message,
        warnings=len(warnings),
    )
    return MessageLinkInfo(
        account_index=locator.account_index,
        message_id=locator.message_id,
        canonical_address=locator.canonical_address,
        account_email=account_email,
        confidential=confidential,
        subject=subject,
        warnings=warnings,
    )
