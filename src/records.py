"""
Local record for a space project.

Holds the caller's desired fields together with the values last observed
from the remote service. Change detection compares the two.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# Fields whose change triggers a remote update.
MUTABLE_FIELDS = ("description",)

OBSERVED_FIELDS = ("name", "space_name", "description")

_UNSET = object()


@dataclass
class ProjectRecord:
    """Desired and observed state for one project."""

    space_name: str
    display_name: str
    description: Optional[str] = None
    name: str = ""
    is_new_resource: bool = False
    observed: Dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.name

    @property
    def exists(self) -> bool:
        """True while the record represents an object believed to exist remotely."""
        return bool(self.name)

    def set_id(self, identifier: Optional[str]) -> None:
        self.name = identifier or ""

    def clear_id(self) -> None:
        self.name = ""

    def has_change(self, field_name: str) -> bool:
        """
        Whether a mutable field differs from its last observed value.

        Only fields in MUTABLE_FIELDS are tracked, so identifiers and the
        parent space never count as changes.
        """
        if field_name not in MUTABLE_FIELDS:
            return False
        observed = self.observed.get(field_name, _UNSET)
        if observed is _UNSET:
            return getattr(self, field_name) is not None
        return getattr(self, field_name) != observed

    def has_changes(self, *field_names: str) -> bool:
        return any(self.has_change(f) for f in field_names)

    def mark_observed(self) -> None:
        """Snapshot the current observed fields as the last known remote state."""
        self.observed = {f: getattr(self, f) for f in OBSERVED_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "space_name": self.space_name,
            "display_name": self.display_name,
            "description": self.description,
            "observed": dict(self.observed),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectRecord":
        return cls(
            space_name=data["space_name"],
            display_name=data["display_name"],
            description=data.get("description"),
            name=data.get("name") or "",
            observed=dict(data.get("observed") or {}),
        )
