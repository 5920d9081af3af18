"""
Resource Reconciler Base - Abstract interface for resource reconcilers.

A reconciler owns the lifecycle of one resource kind. It exposes the four
lifecycle verbs and a ``reconcile`` entry point that picks the right verb
for a record's current state.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from clients.base import ProjectsClient
from diagnostics import Action, Diagnostics
from records import MUTABLE_FIELDS, ProjectRecord

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Result from a reconciler's reconcile() call."""

    success: bool = False
    message: str = ""
    action: Optional[Action] = None
    drift_detected: bool = False
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @classmethod
    def from_diagnostics(
        cls,
        diagnostics: Diagnostics,
        action: Optional[Action] = None,
        drift_detected: bool = False,
    ) -> "ReconcileResult":
        return cls(
            success=not diagnostics.has_error(),
            message="; ".join(diagnostics.summaries()),
            action=action,
            drift_detected=drift_detected,
            diagnostics=diagnostics,
        )


class ResourceReconciler(ABC):
    """
    Abstract base class for resource reconcilers.

    Each verb takes the local record, an explicit client handle and an
    optional deadline in seconds, and returns the diagnostics it collected.
    An empty Diagnostics means success.
    """

    @property
    @abstractmethod
    def resource_kind(self) -> str:
        """Resource kind handled by this reconciler (e.g. 'Project')."""
        pass

    @abstractmethod
    async def create(
        self,
        record: ProjectRecord,
        client: ProjectsClient,
        timeout: Optional[float] = None,
    ) -> Diagnostics:
        """Create the remote object described by the record."""
        pass

    @abstractmethod
    async def read(
        self,
        record: ProjectRecord,
        client: ProjectsClient,
        timeout: Optional[float] = None,
    ) -> Diagnostics:
        """Refresh the record from the remote object."""
        pass

    @abstractmethod
    async def update(
        self,
        record: ProjectRecord,
        client: ProjectsClient,
        timeout: Optional[float] = None,
    ) -> Diagnostics:
        """Push changed desired fields to the remote object."""
        pass

    @abstractmethod
    async def delete(
        self,
        record: ProjectRecord,
        client: ProjectsClient,
        timeout: Optional[float] = None,
    ) -> Diagnostics:
        """Remove the remote object."""
        pass

    async def reconcile(
        self, record: ProjectRecord, client: ProjectsClient, destroy: bool = False
    ) -> ReconcileResult:
        """
        Drive the remote object toward the record's desired state.

        Args:
            record: The local record.
            client: Remote API client handle.
            destroy: Delete the remote object instead of converging it.

        Returns:
            ReconcileResult with the diagnostics of every verb that ran.
        """
        if destroy:
            diagnostics = await self.delete(record, client)
            return ReconcileResult.from_diagnostics(diagnostics, Action.DELETING)

        if not record.exists:
            diagnostics = await self.create(record, client)
            return ReconcileResult.from_diagnostics(diagnostics, Action.CREATING)

        # Read overwrites mutable fields with remote values; keep the desired ones.
        desired = {name: getattr(record, name) for name in MUTABLE_FIELDS}

        diagnostics = await self.read(record, client)
        if diagnostics.has_error():
            return ReconcileResult.from_diagnostics(diagnostics, Action.READING)

        if not record.exists:
            logger.info(
                f"{self.resource_kind} disappeared remotely, recreating "
                f"'{record.display_name}'"
            )
            self._restore(record, desired)
            diagnostics.extend(await self.create(record, client))
            return ReconcileResult.from_diagnostics(
                diagnostics, Action.CREATING, drift_detected=True
            )

        self._restore(record, desired)
        diagnostics.extend(await self.update(record, client))
        return ReconcileResult.from_diagnostics(diagnostics, Action.UPDATING)

    def _restore(self, record: ProjectRecord, desired: dict) -> None:
        for name, value in desired.items():
            setattr(record, name, value)
