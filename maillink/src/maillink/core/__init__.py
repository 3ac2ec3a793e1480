"""MailLink core: address interpretation and link descriptions.

What:
  Re-export the interpreter, the view dialect table, and the link description
  helpers.

Why:
  Callers import from ``maillink.core`` without depending on module names; the
  interpreter itself stays free of any configuration or IO dependency.

Interfaces:
  ``interpret``, ``Locator``, ``build_canonical_address``, ``VIEW_DIALECTS``,
  ``ViewDialect``, ``DialectKind``, ``lookup_dialect``, ``describe_message_link``,
  ``MessageLinkInfo``, ``LinkWarning``, ``detect_warnings``.
"""

from .dialects import STABLE_VIEW, VIEW_DIALECTS, DialectKind, ViewDialect, lookup_dialect
from .fragment import Locator, build_canonical_address, interpret
from .link_info import MessageLinkInfo, describe_message_link
from .warnings import LinkWarning, detect_warnings

__all__ = [
    "interpret",
    "Locator",
    "build_canonical_address",
    "STABLE_VIEW",
    "VIEW_DIALECTS",
    "DialectKind",
    "ViewDialect",
    "lookup_dialect",
    "describe_message_link",
    "MessageLinkInfo",
    "LinkWarning",
    "detect_warnings",
]
