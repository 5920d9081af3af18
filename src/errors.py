"""
Error types and classification for remote project operations.

Remote API clients raise ``RemoteAPIError`` subclasses. The Finder wraps
"cannot see it" failures into ``NotFoundError`` so that callers treat an
object they are not allowed to read the same as one that does not exist.
"""

import asyncio
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Classification outcome for a failed remote operation."""

    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    TRANSIENT = "transient"
    FATAL = "fatal"


class RemoteAPIError(Exception):
    """Base error raised by a remote API client."""

    kind: ErrorKind = ErrorKind.FATAL

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"{self.code}: {self.message}"
        return self.message


class ResourceNotFoundError(RemoteAPIError):
    """The requested resource does not exist."""

    kind = ErrorKind.NOT_FOUND


class AccessDeniedError(RemoteAPIError):
    """The caller is not allowed to see or change the resource."""

    kind = ErrorKind.ACCESS_DENIED


class ThrottlingError(RemoteAPIError):
    """The request was throttled by the service."""

    kind = ErrorKind.TRANSIENT


class ServiceUnavailableError(RemoteAPIError):
    """The service failed to handle the request (5xx)."""

    kind = ErrorKind.TRANSIENT


class ConflictError(RemoteAPIError):
    """The request conflicts with the current state of the resource."""


class ValidationError(RemoteAPIError):
    """The service rejected the request as invalid."""


class NotFoundError(Exception):
    """
    Raised by finders when the remote object is absent or invisible.

    Carries the original remote error and the request that produced it.
    """

    def __init__(
        self,
        last_error: Optional[BaseException] = None,
        last_request: Any = None,
        message: str = "",
    ):
        self.last_error = last_error
        self.last_request = last_request
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.message:
            return self.message
        if self.last_error is not None:
            return str(self.last_error)
        return "couldn't find resource"


class EmptyResultError(Exception):
    """A successful response was missing its mandatory identifying field."""

    def __init__(self, last_request: Any = None, message: str = "empty result"):
        self.last_request = last_request
        super().__init__(message)


class OperationTimeoutError(asyncio.TimeoutError):
    """A lifecycle operation did not finish before its deadline."""

    def __init__(self, timeout: Optional[float]):
        self.timeout = timeout
        super().__init__(f"operation did not complete within {timeout}s")


class WaitTimeoutError(Exception):
    """A bounded wait ran out of time before reaching a target state."""

    def __init__(self, last_state: str, expected: str, timeout: float):
        self.last_state = last_state
        self.expected = expected
        self.timeout = timeout
        super().__init__(
            f"timeout while waiting for state to become '{expected}' "
            f"(last state: '{last_state}', timeout: {timeout}s)"
        )


def classify(err: BaseException) -> ErrorKind:
    """
    Map an error raised during a remote operation to an ErrorKind.

    Args:
        err: The raised exception.

    Returns:
        NOT_FOUND, ACCESS_DENIED, TRANSIENT or FATAL.
    """
    if isinstance(err, NotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(err, RemoteAPIError):
        return err.kind
    if isinstance(err, (asyncio.TimeoutError, WaitTimeoutError)):
        return ErrorKind.TRANSIENT
    return ErrorKind.FATAL


def is_not_found_equivalent(err: Optional[BaseException]) -> bool:
    """True for errors that must reconcile the same way as a missing object."""
    if err is None:
        return False
    return classify(err) in (ErrorKind.NOT_FOUND, ErrorKind.ACCESS_DENIED)


def is_not_found(err: Optional[BaseException]) -> bool:
    """True only for the finder's distinguished not-found error."""
    return isinstance(err, NotFoundError)
