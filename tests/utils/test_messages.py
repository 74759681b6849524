"""Tests for the COMMON_MESSAGES table."""
from __future__ import annotations

import pytest

from clinic_admin.utils.messages import COMMON_MESSAGES, common_message

EXPECTED_KEYS = {
    "SERVER_ERROR",
    "UNKNOWN_ERROR",
    "VALIDATION_INVALID",
    "ACTION_FAILED",
    "NOT_FOUND",
    "UNAUTHORIZED",
    "FORBIDDEN",
}


def test_message_keys_are_fixed():
    assert set(COMMON_MESSAGES) == EXPECTED_KEYS


@pytest.mark.parametrize("key", sorted(EXPECTED_KEYS))
def test_every_message_is_non_empty(key):
    assert isinstance(COMMON_MESSAGES[key], str)
    assert COMMON_MESSAGES[key].strip()
    assert common_message(key).strip()


def test_table_is_read_only():
    with pytest.raises(TypeError):
        COMMON_MESSAGES["SERVER_ERROR"] = "changed"  # type: ignore[index]


def test_unknown_key_falls_back_to_unknown_error():
    assert common_message("NOPE") == COMMON_MESSAGES["UNKNOWN_ERROR"]
