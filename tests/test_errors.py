"""Unit tests for errors.py - Error types and classification."""

import asyncio

import pytest

from errors import (
    AccessDeniedError,
    ConflictError,
    EmptyResultError,
    ErrorKind,
    NotFoundError,
    OperationTimeoutError,
    RemoteAPIError,
    ResourceNotFoundError,
    ServiceUnavailableError,
    ThrottlingError,
    ValidationError,
    WaitTimeoutError,
    classify,
    is_not_found,
    is_not_found_equivalent,
)


class TestRemoteAPIError:
    """Tests for RemoteAPIError and subclasses."""

    def test_str_without_code(self):
        assert str(RemoteAPIError("boom")) == "boom"

    def test_str_with_code(self):
        err = ResourceNotFoundError("no project", status=404, code="ResourceNotFoundException")
        assert str(err) == "ResourceNotFoundException: no project"
        assert err.status == 404

    @pytest.mark.parametrize(
        "error_class,kind",
        [
            (ResourceNotFoundError, ErrorKind.NOT_FOUND),
            (AccessDeniedError, ErrorKind.ACCESS_DENIED),
            (ThrottlingError, ErrorKind.TRANSIENT),
            (ServiceUnavailableError, ErrorKind.TRANSIENT),
            (ConflictError, ErrorKind.FATAL),
            (ValidationError, ErrorKind.FATAL),
            (RemoteAPIError, ErrorKind.FATAL),
        ],
    )
    def test_kinds(self, error_class, kind):
        assert classify(error_class("x")) is kind


class TestNotFoundError:
    """Tests for the finder's not-found error."""

    def test_wraps_last_error(self):
        cause = AccessDeniedError("denied")
        err = NotFoundError(last_error=cause, last_request={"name": "p"})
        assert str(err) == "denied"
        assert err.last_error is cause
        assert err.last_request == {"name": "p"}

    def test_default_message(self):
        assert str(NotFoundError()) == "couldn't find resource"

    def test_explicit_message(self):
        assert str(NotFoundError(message="gone")) == "gone"


class TestClassify:
    """Tests for classify and helpers."""

    def test_not_found_error(self):
        assert classify(NotFoundError()) is ErrorKind.NOT_FOUND

    def test_empty_result_is_fatal(self):
        assert classify(EmptyResultError()) is ErrorKind.FATAL
        assert str(EmptyResultError()) == "empty result"

    def test_timeouts_are_transient(self):
        assert classify(asyncio.TimeoutError()) is ErrorKind.TRANSIENT
        assert classify(OperationTimeoutError(5)) is ErrorKind.TRANSIENT
        assert classify(WaitTimeoutError("present", "absent", 5)) is ErrorKind.TRANSIENT

    def test_unknown_errors_are_fatal(self):
        assert classify(ValueError("x")) is ErrorKind.FATAL

    def test_not_found_equivalent(self):
        assert is_not_found_equivalent(ResourceNotFoundError("x"))
        assert is_not_found_equivalent(AccessDeniedError("x"))
        assert is_not_found_equivalent(NotFoundError())
        assert not is_not_found_equivalent(ThrottlingError("x"))
        assert not is_not_found_equivalent(None)

    def test_is_not_found_only_matches_finder_error(self):
        assert is_not_found(NotFoundError())
        assert not is_not_found(ResourceNotFoundError("x"))
        assert not is_not_found(None)
