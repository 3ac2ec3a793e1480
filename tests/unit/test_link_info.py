"""
Module: tests/unit/test_link_info.py

What:
    Cover warning detection and the assembled link description, including the
    degraded path when the registry cannot be read.

Why:
    A broken registry must never cost the user their link; it only costs the
    warnings.
"""

import io
import json
from unittest.mock import MagicMock

from maillink.config.accounts import AccountRegistry
from maillink.config.loader import AccountRegistryError
from maillink.core.link_info import describe_message_link
from maillink.core.warnings import detect_warnings
from maillink.utils.logging import get_logger

ADDRESS = "https://mail.google.com/mail/u/1/#label/Work/ABC123"


def test_no_warnings_without_email_or_confidential_flag():
    assert detect_warnings(None, "0", False) == []


def test_confidential_warning():
    [warning] = detect_warnings(None, "0", True)

    assert warning.type == "gmail_confidential"
    assert "confidential mode" in warning.message


def test_email_without_registry_is_ignored():
    assert detect_warnings("a@example.com", "0", False, registry=None) == []


def test_reorder_warning_mentions_new_index(tmp_path):
    registry = AccountRegistry(tmp_path / "accounts.yaml", logger=get_logger("t", stream=io.StringIO()))
    assert detect_warnings("a@example.com", "0", False, registry=registry) == []

    warnings = detect_warnings("a@example.com", "2", True, registry=registry)

    assert [warning.type for warning in warnings] == ["gmail_account_reorder", "gmail_confidential"]
    assert "account index 2" in warnings[0].message


def test_describe_message_link_combines_locator_and_facts():
    info = describe_message_link(
        ADDRESS,
        account_email="a@example.com",
        confidential=True,
        subject="Quarterly report",
    )

    assert info.account_index == "1"
    assert info.message_id == "ABC123"
    assert info.warnings == []
    assert info.canonical_address == "https://mail.google.com/mail/u/1/#all/ABC123"
    assert info.account_email == "a@example.com"
    assert info.subject == "Quarterly report"
    assert [warning.type for warning in info.warnings] == ["gmail_confidential"]


def test_describe_message_link_fallback_address():
    info = describe_message_link("https://mail.google.com/mail/u/0/#settings/general")

    assert info.message_id is None
    assert info.canonical_address == "https://mail.google.com/mail/u/0/#settings/general"
    assert info.warnings == []


def test_registry_failure_degrades_to_no_warnings():
    """
    What:
        Registry errors are logged and the link is still returned.

    How:
        Use a registry double whose ``record`` raises and capture the log.
    """
    registry = MagicMock(spec=AccountRegistry)
    registry.record.side_effect = AccountRegistryError("disk full")
    stream = io.StringIO()

    info = describe_message_link(
        ADDRESS,
        account_email="a@example.com",
        confidential=True,
        registry=registry,
        logger=get_logger("t", stream=stream),
    )

    assert info.message_id == "ABC123"
    assert info.warnings == []
    payload = json.loads(stream.getvalue().splitlines()[0])
    assert payload["msg"] == "warning_detection_failed"
    assert payload["error"] == "disk full"


def test_to_dict_is_json_serialisable():
    info = describe_message_link(ADDRESS, confidential=True)

    data = json.loads(json.dumps(info.to_dict()))

    assert data["warnings"][0]["type"] == "gmail_confidential"
    assert data["message_id"] == "ABC123"


def test_registry_failure_log_never_carries_stored_email(tmp_path):
    """
    What:
        A registry entry that fails validation is reported without its values.

    Why:
        The stored email would otherwise reach the log through the error text,
        where key-based redaction cannot see it.

    How:
        Store an entry missing ``seen_at`` for a short address, describe a link,
        and check the logged error names the field but not the address.
    """
    registry = AccountRegistry(tmp_path / "accounts.yaml", logger=get_logger("t", stream=io.StringIO()))
    registry.path.write_text("accounts:\n  - email: s@e.io\n    account_index: '0'\n")
    stream = io.StringIO()

    info = describe_message_link(
        ADDRESS,
        account_email="other@example.com",
        registry=registry,
        logger=get_logger("t", stream=stream),
    )

    assert info.message_id == "ABC123"
    assert info.warnings == []
    line = stream.getvalue()
    assert "warning_detection_failed" in line
    assert "seen_at" in line
    assert "s@e.io" not in line


def test_registry_yaml_error_log_never_carries_stored_email(tmp_path):
    registry = AccountRegistry(tmp_path / "accounts.yaml", logger=get_logger("t", stream=io.StringIO()))
    registry.path.write_text("accounts:\n  - email: s@e.io\n    account_index: [0\n")
    stream = io.StringIO()

    describe_message_link(
        ADDRESS,
        account_email="other@example.com",
        registry=registry,
        logger=get_logger("t", stream=stream),
    )

    line = stream.getvalue()
    assert "Invalid YAML" in line
    assert "s@e.io" not in line
