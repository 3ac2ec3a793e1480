"""Declarative table of webmail view dialects.

What:
  Describe every view keyword that can appear as the first segment of a
  webmail fragment (``#inbox/...``, ``#search/...``) together with the
  structural rule used to find a trailing message identifier.

Why:
  The routing scheme is the only domain knowledge the interpreter needs.
  Keeping it in one table means a new view is a new row, while the extraction
  routine in :mod:`maillink.core.fragment` stays generic.

How:
  Each row is a frozen :class:`ViewDialect`. ``segments`` counts the fragment
  segments that must follow the keyword, the identifier included. Free-text
  dialects treat ``segments`` as a minimum and always read the identifier from
  the final segment. The table is exposed as a read-only mapping.

Interfaces:
  :class:`DialectKind`, :class:`ViewDialect`, :data:`VIEW_DIALECTS`,
  :data:`STABLE_VIEW`, :func:`lookup_dialect`.

Invariants & Safety:
  - The table is immutable after import and safe for concurrent reads.
  - :data:`STABLE_VIEW` is a simple dialect so canonical addresses interpret
    back to themselves.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


class DialectKind(str, Enum):
    """Structural families of view keywords."""

    SIMPLE = "simple"
    NAMED = "named"
    FREE_TEXT = "free_text"
    NON_MESSAGE = "non_message"


@dataclass(frozen=True)
class ViewDialect:
    """One row of the view table.

    What:
      Couples a view keyword with the number of segments expected after it.

    Why:
      The interpreter only needs to know how far away the identifier sits and
      whether the view can show a single message at all.

    How:
      ``segments`` is an exact count for simple and named dialects and a lower
      bound for free-text ones. Non-message dialects carry ``0``.
    """

    keyword: str
    kind: DialectKind
    segments: int

    @property
    def message_capable(self) -> bool:
        return self.kind is not DialectKind.NON_MESSAGE

    def accepts(self, trailing: int) -> bool:
        """Return ``True`` when ``trailing`` segments fit this dialect."""

        if not self.message_capable:
            return False
        if self.kind is DialectKind.FREE_TEXT:
            return trailing >= self.segments
        return trailing == self.segments


def _rows(kind: DialectKind, segments: int, keywords: Iterable[str]) -> dict[str, ViewDialect]:
    return {keyword: ViewDialect(keyword, kind, segments) for keyword in keywords}


VIEW_DIALECTS: Mapping[str, ViewDialect] = MappingProxyType(
    {
        **_rows(
            DialectKind.SIMPLE,
            1,
            ("inbox", "all", "sent", "drafts", "starred", "snoozed", "scheduled"),
        ),
        **_rows(DialectKind.NAMED, 2, ("label", "category")),
        **_rows(DialectKind.FREE_TEXT, 2, ("search",)),
        **_rows(DialectKind.NON_MESSAGE, 0, ("compose", "settings", "contacts")),
    }
)

# "all" resolves a message whichever folder or label currently holds it.
STABLE_VIEW = "all"


def lookup_dialect(keyword: str) -> Optional[ViewDialect]:
    """Return the dialect registered for ``keyword`` or ``None``."""

    return VIEW_DIALECTS.get(keyword)
