"""Interpret webmail addresses into durable message locators.

What:
  Turn the address shown while a message is open (for example
  ``https://mail.google.com/mail/u/1/#search/invoice/FMfcgz...``) into a
  :class:`Locator` carrying the account index, the message identifier, and a
  canonical address that no longer depends on the list being browsed.

Why:
  Fragment routes embed transient context (a search, a label, a category) that
  is meaningless once a link is shared or stored. Callers only need to know
  which account and which message; everything else is dropped, and nothing is
  fabricated when no single message is identified.

How:
  1. Capture ``/mail/u/<digits>/`` from the part before ``#`` (default ``"0"``).
  2. Split the fragment on ``/`` and look the first segment up in
     :data:`maillink.core.dialects.VIEW_DIALECTS`.
  3. Let the dialect decide whether the segment count fits, take the final
     segment, strip an optional ``?...`` suffix and validate the identifier
     alphabet.
  4. Build ``https://mail.google.com/mail/u/<n>/#all/<id>`` or hand the input
     back unchanged.

Interfaces:
  :class:`Locator`, :func:`interpret`, :func:`extract_account_index`,
  :func:`split_fragment`, :func:`extract_message_id`,
  :func:`build_canonical_address`.

Invariants & Safety:
  - :func:`interpret` never raises for a string input; anything not recognised
    resolves to the fallback locator (no message, canonical equals input).
  - A trailing ``/`` after an identifier is malformed and falls back, while a
    trailing ``?...`` suffix is tolerated. Both behaviours are relied upon.
  - No state is shared between calls.
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .dialects import STABLE_VIEW, lookup_dialect

DEFAULT_ACCOUNT_INDEX = "0"
CANONICAL_PREFIX = "https://mail.google.com/mail/u/"

_ACCOUNT_RE = re.compile(r"/mail/u/([0-9]+)/")
_MESSAGE_ID_RE = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class Locator:
    """Result of interpreting one address.

    What:
      Holds ``account_index`` (digits, kept as text), ``message_id`` (or
      ``None``) and ``canonical_address``.

    Why:
      Callers only have to check :attr:`has_message` before offering
      message-specific actions; there is no error branch to handle.

    How:
      Frozen dataclass built fresh by :func:`interpret`.
    """

    account_index: str
    message_id: Optional[str]
    canonical_address: str

    @property
    def has_message(self) -> bool:
        return self.message_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def extract_account_index(address: str) -> str:
    """Return the ``/mail/u/<n>/`` digits found before the fragment.

    The digits are returned verbatim, so ``"15"`` stays ``"15"`` and a leading
    zero is preserved. Missing account paths default to ``"0"``.
    """

    head = address.partition("#")[0]
    match = _ACCOUNT_RE.search(head)
    return match.group(1) if match else DEFAULT_ACCOUNT_INDEX


def split_fragment(address: str) -> Optional[str]:
    """Return the text after the first ``#`` or ``None`` without one."""

    _, sep, fragment = address.partition("#")
    return fragment if sep else None


def extract_message_id(fragment: str) -> Optional[str]:
    """Locate and validate the message identifier inside ``fragment``.

    What:
      Apply the dialect rule for the fragment's view keyword and return the
      identifier when it is unambiguous.

    Why:
      This is the single generic routine behind every view; per-view
      knowledge lives in the dialect table only.

    How:
      Split on ``/``, reject unknown and non-message keywords, check the number
      of trailing segments, require the name/query segment to be present for
      multi-segment dialects, and validate the final segment after dropping any
      ``?...`` sub-route parameters.

    Args:
      fragment: Text after ``#`` (without the ``#`` itself).

    Returns:
      The identifier, or ``None`` when the view is not anchored to a message.
    """

    keyword, *trailing = fragment.split("/")
    dialect = lookup_dialect(keyword)
    if dialect is None or not dialect.accepts(len(trailing)):
        return None
    if len(trailing) > 1 and not trailing[0]:
        return None
    candidate = trailing[-1].partition("?")[0]
    if not _MESSAGE_ID_RE.fullmatch(candidate):
        return None
    return candidate


def build_canonical_address(account_index: str, message_id: str) -> str:
    """Return the stable ``#all/<id>`` address for ``message_id``."""

    return f"{CANONICAL_PREFIX}{account_index}/#{STABLE_VIEW}/{message_id}"


def interpret(address: str) -> Locator:
    """Interpret ``address`` into a :class:`Locator`.

    Args:
      address: Full address of the active webmail tab.

    Returns:
      A locator with a canonical ``#all/<id>`` address when a message is
      identified, otherwise a locator echoing ``address`` unchanged.
    """

    account_index = extract_account_index(address)
    fragment = split_fragment(address)
    message_id = extract_message_id(fragment) if fragment is not None else None
    if message_id is None:
        return Locator(account_index=account_index, message_id=None, canonical_address=address)
    return Locator(
        account_index=account_index,
        message_id=message_id,
        canonical_address=build_canonical_address(account_index, message_id),
    )
