"""Tests for library exceptions (error_code, message, details)."""

import logging

import pytest

from firestore_admin.domain.exceptions import (
    ConfigurationError,
    FirestoreAdminException,
    InvalidQueryError,
    RemoteError,
    UnsupportedTypeError,
    report_remote_error,
)


def test_base_exception_default_error_code() -> None:
    """FirestoreAdminException uses the class name as error_code when not provided."""
    exc = FirestoreAdminException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "FirestoreAdminException"
    assert exc.details == {}


def test_unsupported_type_error() -> None:
    """UnsupportedTypeError carries the type name and UNSUPPORTED_TYPE code."""
    exc = UnsupportedTypeError("set")
    assert exc.message == "Unsupported value type: set"
    assert exc.error_code == "UNSUPPORTED_TYPE"
    assert exc.type_name == "set"
    assert isinstance(exc, FirestoreAdminException)


def test_remote_error_from_payload() -> None:
    """RemoteError.from_payload copies code, status, message and details from the error body."""
    exc = RemoteError.from_payload(
        {"code": 400, "message": "Invalid", "status": "INVALID_ARGUMENT", "details": [{"x": 1}]},
        call="getDocument",
    )
    assert exc.code == 400
    assert exc.status == "INVALID_ARGUMENT"
    assert exc.message == "Invalid"
    assert exc.error_code == "REMOTE_ERROR"
    assert exc.details == {
        "code": 400,
        "status": "INVALID_ARGUMENT",
        "details": [{"x": 1}],
        "call": "getDocument",
    }


def test_remote_error_from_non_dict_payload() -> None:
    """A non-dict error payload becomes the message with no code."""
    exc = RemoteError.from_payload("boom")
    assert exc.code is None
    assert exc.message == "boom"


def test_invalid_query_and_configuration_errors() -> None:
    """InvalidQueryError records the field; ConfigurationError sets its code."""
    assert InvalidQueryError("bad op", field="age").details == {"field": "age"}
    assert ConfigurationError("missing").error_code == "CONFIGURATION_ERROR"


def test_report_remote_error_logs_and_returns(caplog: pytest.LogCaptureFixture) -> None:
    """report_remote_error logs call, message and details and returns the RemoteError."""
    with caplog.at_level(logging.ERROR):
        exc = report_remote_error(
            {"code": 403, "message": "denied", "details": ["why"]}, "updateDocument"
        )
    assert isinstance(exc, RemoteError)
    assert "updateDocument" in caplog.text
    assert "denied" in caplog.text
    assert "why" in caplog.text
