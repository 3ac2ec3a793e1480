"""
Module: maillink.__init__

What:
  Package root for MailLink, which turns webmail addresses into durable,
  view-independent message links.

Interfaces:
  - config: Runtime configuration and the account registry.
  - core: Fragment interpreter, view dialects, and link descriptions.
  - utils: Structured logging.

The most common entry point, :func:`maillink.core.interpret`, is re-exported
here.
"""

from .core import Locator, interpret

__all__ = [
    "config",
    "core",
    "utils",
    "interpret",
    "Locator",
]
