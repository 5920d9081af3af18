"""
Diagnostics - structured failure records returned by lifecycle operations.

Every lifecycle verb returns a ``Diagnostics`` collection. An empty
collection means success. Records are only ever appended, so a verb that
runs an update followed by a read reports the failures of both.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from errors import ErrorKind, classify


class Severity(Enum):
    """Severity of a diagnostic."""

    ERROR = "error"
    WARNING = "warning"


class Action(Enum):
    """Lifecycle action a diagnostic is reported against."""

    CREATING = "creating"
    READING = "reading"
    UPDATING = "updating"
    DELETING = "deleting"
    IMPORTING = "importing"


@dataclass
class Diagnostic:
    """A single structured failure record."""

    severity: Severity
    summary: str
    action: Action
    resource_kind: str
    resource_id: str
    error_kind: ErrorKind = ErrorKind.FATAL
    detail: str = ""
    error: Optional[BaseException] = field(default=None, repr=False, compare=False)

    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


def diag_error(
    service: str,
    action: Action,
    resource_kind: str,
    resource_id: str,
    err: BaseException,
    error_kind: Optional[ErrorKind] = None,
) -> Diagnostic:
    """
    Build an error diagnostic for a failed action.

    The summary reads like ``creating CodeCatalyst Project (proj1): empty output``.

    Args:
        service: Human readable name of the remote service.
        action: The lifecycle action that failed.
        resource_kind: Resource kind, e.g. 'Project'.
        resource_id: Identifier (or display name before one exists).
        err: The underlying error.
        error_kind: Overrides the classification of ``err``.
    """
    return Diagnostic(
        severity=Severity.ERROR,
        summary=f"{action.value} {service} {resource_kind} ({resource_id}): {err}",
        action=action,
        resource_kind=resource_kind,
        resource_id=resource_id,
        error_kind=error_kind or classify(err),
        detail=str(err),
        error=err,
    )


class Diagnostics:
    """Ordered, append-only collection of diagnostics."""

    def __init__(self, items: Optional[Iterable[Diagnostic]] = None):
        self._items: List[Diagnostic] = list(items or [])

    def append(self, diagnostic: Diagnostic) -> "Diagnostics":
        self._items.append(diagnostic)
        return self

    def extend(self, diagnostics: Iterable[Diagnostic]) -> "Diagnostics":
        for diagnostic in diagnostics:
            self._items.append(diagnostic)
        return self

    def has_error(self) -> bool:
        return any(d.is_error() for d in self._items)

    def errors(self) -> List[Diagnostic]:
        return [d for d in self._items if d.is_error()]

    def summaries(self) -> List[str]:
        return [d.summary for d in self._items]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._items[index]

    def __repr__(self) -> str:
        return f"Diagnostics({self._items!r})"
