"""MailLink logging helpers with deterministic JSON emission and redaction.

What:
  Offer a tiny facade over Python streams so every MailLink component emits
  JSON log lines with consistent fields and automatic removal of personal
  details.

Why:
  Links are copied from a user's mailbox; logs must never carry the account
  email or message subject even while debugging the registry or the CLI. A
  single-line JSON layout keeps the output trivial to grep and to assert on in
  tests.

How:
  :class:`JsonLogger` holds a target stream, a component label, and a minimum
  severity. ``extra`` dictionaries are copied and scrubbed recursively before
  being serialised with :func:`json.dump`.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`.

Invariants & Safety:
  - Every payload includes ``ts``, ``lvl``, ``msg`` and ``component``.
  - ``account_email``, ``email`` and ``subject`` are replaced with
    ``[redacted]``, including inside nested dictionaries.
  - Streams are flushed after every write.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"account_email", "email", "subject"})
_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


@dataclass
class JsonLogger:
    """Structured JSON logger with automatic redaction.

    What:
      Emits single-line JSON entries carrying a timestamp, severity, component
      tag, and optional context fields.

    Why:
      Centralising structured logging avoids duplicating the redaction logic
      and gives tests a stable schema to parse.

    How:
      Stores the destination stream, component label and threshold, and
      exposes :meth:`debug`, :meth:`info`, :meth:`warning` and :meth:`error`
      on top of :meth:`log`.
    """

    stream: Any = field(default_factory=lambda: sys.stderr)
    component: str = "maillink"
    level: str = "INFO"

    def enabled_for(self, level: str) -> bool:
        threshold = _LEVELS.get(self.level.upper(), _LEVELS["INFO"])
        return _LEVELS.get(level.upper(), _LEVELS["INFO"]) >= threshold

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Emit a structured JSON log entry.

        Args:
          level: Severity name (``"debug"``, ``"info"``, ``"warn"``, ``"error"``).
          message: Core log message.
          extra: Optional context dictionary that will be redacted recursively.
        """

        if not self.enabled_for(level):
            return
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            payload.update(self._redact(extra))
        json.dump(payload, self.stream, separators=(",", ":"), default=str)
        self.stream.write("\n")
        self.stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, extra=kwargs)

    @staticmethod
    def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``data`` with sensitive values masked."""

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in SENSITIVE_KEYS:
                result[key] = REDACTED
            elif isinstance(value, dict):
                result[key] = JsonLogger._redact(value)
            else:
                result[key] = value
        return result


def get_logger(component: str, *, level: str = "INFO", stream: Any = None) -> JsonLogger:
    """Construct a :class:`JsonLogger` for ``component``.

    What:
      Returns a ready-to-use logger bound to ``component``.

    Why:
      Call sites should not instantiate :class:`JsonLogger` directly so the
      defaults (stream, redaction keys) can evolve in one place.

    How:
      Delegates to :class:`JsonLogger`, defaulting to ``stderr`` so command
      output on ``stdout`` stays machine-readable.

    Args:
      component: Logical subsystem name included in every payload.
      level: Minimum severity to emit.
      stream: Optional target stream; ``sys.stderr`` when omitted.

    Returns:
      Configured :class:`JsonLogger` instance.
    """

    if stream is None:
        return JsonLogger(component=component, level=level)
    return JsonLogger(stream=stream, component=component, level=level)
