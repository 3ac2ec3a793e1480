"""Shared MailLink utilities."""

from .logging import JsonLogger, get_logger

__all__ = ["JsonLogger", "get_logger"]
