from __future__ import annotations

import pytest

from legacylens.exceptions import (
    AbortError,
    AnalysisError,
    AttemptTimeoutError,
    OperationAbortedError,
    PayloadTooLargeError,
    ResponseValidationError,
    UpstreamResponseError,
)

#########################################
#     Tests for abort-class errors      #
#########################################


def test_attempt_timeout_error() -> None:
    err = AttemptTimeoutError()
    assert isinstance(err, AbortError)
    assert err.kind == "AttemptTimeout"
    assert str(err) == "AttemptTimeout"


def test_attempt_timeout_error_is_not_builtin_timeout() -> None:
    assert not isinstance(AttemptTimeoutError(), TimeoutError)


def test_operation_aborted_error() -> None:
    err = OperationAbortedError()
    assert isinstance(err, AbortError)
    assert err.kind == "OperationAborted"
    assert str(err) == "OperationAborted"


def test_operation_aborted_error_message() -> None:
    assert str(OperationAbortedError("user cancelled")) == "user cancelled"


####################################
#     Tests for AnalysisError      #
####################################


def test_analysis_error_defaults() -> None:
    err = AnalysisError("boom")
    assert err.message == "boom"
    assert err.code == "INTERNAL"
    assert err.status_code == 500
    assert err.detail is None
    assert str(err) == "boom"


def test_analysis_error_to_dict() -> None:
    assert AnalysisError("boom").to_dict() == {"error": "INTERNAL", "message": "boom"}


def test_analysis_error_to_dict_with_detail() -> None:
    err = AnalysisError("bad", code="BAD_JSON", status_code=422, detail=[{"loc": ["tables"]}])
    assert err.to_dict() == {
        "error": "BAD_JSON",
        "message": "bad",
        "detail": [{"loc": ["tables"]}],
    }


@pytest.mark.parametrize(
    ("error_cls", "code", "status_code"),
    [
        (PayloadTooLargeError, "FILE_TOO_LARGE", 413),
        (UpstreamResponseError, "BAD_UPSTREAM", 502),
        (ResponseValidationError, "BAD_JSON", 422),
    ],
)
def test_analysis_error_subclasses(
    error_cls: type[AnalysisError], code: str, status_code: int
) -> None:
    err = error_cls("failure")
    assert isinstance(err, AnalysisError)
    assert err.code == code
    assert err.status_code == status_code


def test_analysis_error_subclass_overrides() -> None:
    err = UpstreamResponseError("failure", code="CUSTOM", status_code=503)
    assert err.code == "CUSTOM"
    assert err.status_code == 503
