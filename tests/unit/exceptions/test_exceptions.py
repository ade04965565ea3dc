# -*- coding: utf-8 -*-
"""Unit tests for the error taxonomy."""

from __future__ import annotations

import pytest

from wallet_link.exceptions import (
    AlreadyBoundError,
    AlreadyResolvedError,
    NotFoundError,
    SessionExpiredError,
    SessionNotFoundError,
    StorageError,
    TransactionNotFoundError,
    ValidationError,
    WalletLinkError,
)


def test_only_storage_errors_are_retryable() -> None:
    errors: list[WalletLinkError] = [
        SessionNotFoundError("l"),
        SessionExpiredError("l"),
        AlreadyBoundError("l"),
        AlreadyResolvedError("t"),
        ValidationError("bad"),
    ]

    assert not any(e.retryable for e in errors)
    assert StorageError("db").retryable is True


@pytest.mark.parametrize("error", [SessionNotFoundError("l"), TransactionNotFoundError("t")])
def test_not_found_kinds_share_base(error: WalletLinkError) -> None:
    assert isinstance(error, NotFoundError)


def test_expired_is_distinct_from_not_found() -> None:
    assert not isinstance(SessionExpiredError("l"), NotFoundError)


def test_payloads_carry_code_and_details() -> None:
    assert ValidationError("invalid recipient address", field="to_address").to_payload() == {
        "error": "validation_error",
        "message": "invalid recipient address",
        "retryable": False,
        "field": "to_address",
    }
    assert AlreadyResolvedError("t", status="executed").to_payload()["status"] == "executed"
    assert SessionExpiredError("l").to_payload()["error"] == "session_expired"
