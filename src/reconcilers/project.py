"""
Project Reconciler - lifecycle of a project owned by a space.

The remote service scopes every project by its space, so each request
carries the record's ``space_name`` alongside the project identifier.
"""

import asyncio
import logging
from typing import Awaitable, Optional, Tuple

from clients.base import ProjectsClient
from clients.models import (
    CreateProjectInput,
    DeleteProjectInput,
    GetProjectInput,
    GetProjectOutput,
    UpdateProjectInput,
)
from config import TimeoutsConfig
from diagnostics import Action, Diagnostic, Diagnostics, diag_error
from errors import (
    EmptyResultError,
    ErrorKind,
    NotFoundError,
    OperationTimeoutError,
    classify,
    is_not_found,
    is_not_found_equivalent,
)
from events import EventBus, EventType, ProjectEvent
from reconcilers.base import ResourceReconciler
from records import ProjectRecord
from waiter import PollOutcome, PollState, RefreshFunc, wait_for_state

logger = logging.getLogger(__name__)

RESOURCE_KIND = "Project"


async def find_project_by_name(
    client: ProjectsClient, name: str, space_name: str
) -> GetProjectOutput:
    """
    Fetch a project by name within a space.

    Raises:
        NotFoundError: The project does not exist or the caller cannot see it.
        EmptyResultError: The service answered without the project name.
    """
    request = GetProjectInput(name=name, space_name=space_name)

    try:
        out = await client.get_project(request)
    except Exception as err:
        if is_not_found_equivalent(err):
            raise NotFoundError(last_error=err, last_request=request) from err
        raise

    if out is None or not out.name:
        raise EmptyResultError(request)

    return out


def status_project(client: ProjectsClient, name: str, space_name: str) -> RefreshFunc:
    """Build a probe reporting whether a project is present, absent or failing."""

    async def probe() -> PollOutcome:
        try:
            out = await find_project_by_name(client, name, space_name)
        except NotFoundError:
            return PollOutcome.absent()
        except Exception as err:
            return PollOutcome.failed(err)

        return PollOutcome.present(out.name, out)

    return probe


class ProjectReconciler(ResourceReconciler):
    """
    Reconciler for space projects.

    Create trusts only the identifier from the create response and then
    reads the project back. Read clears the identifier when a previously
    known project has gone away. Update is a no-op unless the description
    changed. Delete treats an already deleted project as success.
    """

    def __init__(
        self,
        timeouts: Optional[TimeoutsConfig] = None,
        service_name: str = "CodeCatalyst",
        event_bus: Optional[EventBus] = None,
    ):
        self.timeouts = timeouts or TimeoutsConfig()
        self.service_name = service_name
        self.event_bus = event_bus

    @property
    def resource_kind(self) -> str:
        return RESOURCE_KIND

    # Lifecycle verbs

    async def create(
        self,
        record: ProjectRecord,
        client: ProjectsClient,
        timeout: Optional[float] = None,
    ) -> Diagnostics:
        return await self._run(
            Action.CREATING,
            record.display_name,
            self._create(record, client),
            self._deadline(timeout, self.timeouts.create),
        )

    async def read(
        self,
        record: ProjectRecord,
        client: ProjectsClient,
        timeout: Optional[float] = None,
    ) -> Diagnostics:
        return await self._run(
            Action.READING,
            record.name,
            self._read(record, client),
            self._deadline(timeout, self.timeouts.read),
        )

    async def update(
        self,
        record: ProjectRecord,
        client: ProjectsClient,
        timeout: Optional[float] = None,
    ) -> Diagnostics:
        return await self._run(
            Action.UPDATING,
            record.name,
            self._update(record, client),
            self._deadline(timeout, self.timeouts.update),
        )

    async def delete(
        self,
        record: ProjectRecord,
        client: ProjectsClient,
        timeout: Optional[float] = None,
    ) -> Diagnostics:
        deadline = self._deadline(timeout, self.timeouts.delete)
        return await self._run(
            Action.DELETING,
            record.name,
            self._delete(record, client, deadline),
            deadline,
        )

    async def import_project(
        self,
        name: str,
        space_name: str,
        client: ProjectsClient,
        timeout: Optional[float] = None,
    ) -> Tuple[ProjectRecord, Diagnostics]:
        """
        Adopt an existing remote project into a new local record.

        Args:
            name: Identifier of the existing project.
            space_name: Space that owns the project.
            client: Remote API client handle.
            timeout: Deadline in seconds (defaults to the read timeout).

        Returns:
            The populated record and any diagnostics.
        """
        record = ProjectRecord(space_name=space_name, display_name="", name=name)
        diags = await self._run(
            Action.IMPORTING,
            name,
            self._read(record, client, adopt_display_name=True),
            self._deadline(timeout, self.timeouts.read),
        )

        if not diags.has_error() and not record.exists:
            diags.append(
                self._diag(
                    Action.IMPORTING,
                    name,
                    NotFoundError(message="cannot import non-existent remote object"),
                )
            )

        return record, diags

    # Operation bodies

    async def _create(
        self, record: ProjectRecord, client: ProjectsClient
    ) -> Diagnostics:
        diags = Diagnostics()

        try:
            request = CreateProjectInput(
                space_name=record.space_name,
                display_name=record.display_name,
                description=record.description or "",
            )
            out = await client.create_project(request)
        except Exception as err:
            return diags.append(self._diag(Action.CREATING, record.display_name, err))

        if out is None or not out.name:
            return diags.append(
                self._diag(
                    Action.CREATING,
                    record.display_name,
                    EmptyResultError(request, "empty output"),
                )
            )

        record.set_id(out.name)
        record.is_new_resource = True
        try:
            diags.extend(await self._read(record, client))
        finally:
            record.is_new_resource = False

        if not diags.has_error():
            await self._publish(EventType.CREATED, record)
        return diags

    async def _read(
        self,
        record: ProjectRecord,
        client: ProjectsClient,
        adopt_display_name: bool = False,
    ) -> Diagnostics:
        diags = Diagnostics()

        if not record.exists:
            return diags

        try:
            out = await find_project_by_name(client, record.name, record.space_name)
        except Exception as err:
            if not record.is_new_resource and is_not_found(err):
                logger.warning(
                    f"{self.service_name} {RESOURCE_KIND} ({record.name}) not found, "
                    f"removing from state"
                )
                name = record.name
                record.clear_id()
                await self._publish(EventType.REMOVED, record, name=name)
                return diags

            # Not found right after our own create is a protocol violation.
            error_kind = ErrorKind.FATAL if is_not_found(err) else None
            return diags.append(
                self._diag(Action.READING, record.name, err, error_kind=error_kind)
            )

        record.set_id(out.name)
        if out.space_name:
            record.space_name = out.space_name
        record.description = out.description
        if adopt_display_name and out.display_name:
            record.display_name = out.display_name
        record.mark_observed()

        return diags

    async def _update(
        self, record: ProjectRecord, client: ProjectsClient
    ) -> Diagnostics:
        diags = Diagnostics()

        if not record.has_changes("description"):
            return diags

        if not record.exists:
            return diags.append(
                self._diag(
                    Action.UPDATING,
                    record.display_name,
                    NotFoundError(message="project has no identifier"),
                )
            )

        request = UpdateProjectInput(
            name=record.name,
            space_name=record.space_name,
            display_name=record.display_name,
            description=record.description or "",
        )

        logger.debug(
            f"Updating {self.service_name} {RESOURCE_KIND} ({record.name}): {request!r}"
        )

        try:
            await client.update_project(request)
        except Exception as err:
            return diags.append(self._diag(Action.UPDATING, record.name, err))

        diags.extend(await self._read(record, client))

        if not diags.has_error() and record.exists:
            await self._publish(EventType.UPDATED, record)
        return diags

    async def _delete(
        self, record: ProjectRecord, client: ProjectsClient, deadline: float
    ) -> Diagnostics:
        diags = Diagnostics()

        if not record.exists:
            logger.debug(
                f"{self.service_name} {RESOURCE_KIND} for '{record.display_name}' "
                f"has no identifier, nothing to delete"
            )
            return diags

        name = record.name
        logger.info(f"Deleting {self.service_name} {RESOURCE_KIND} {name}")

        try:
            await client.delete_project(
                DeleteProjectInput(name=name, space_name=record.space_name)
            )
        except Exception as err:
            if classify(err) is not ErrorKind.NOT_FOUND:
                return diags.append(self._diag(Action.DELETING, name, err))
            logger.info(
                f"{self.service_name} {RESOURCE_KIND} {name} already deleted"
            )
        else:
            if self.timeouts.wait_for_delete:
                try:
                    await wait_for_state(
                        status_project(client, name, record.space_name),
                        target={PollState.ABSENT},
                        timeout=deadline,
                        poll_interval=self.timeouts.poll_interval,
                    )
                except Exception as err:
                    return diags.append(self._diag(Action.DELETING, name, err))

        record.clear_id()
        await self._publish(EventType.DELETED, record, name=name)
        return diags

    # Helpers

    def _deadline(self, timeout: Optional[float], default: float) -> float:
        return timeout if timeout is not None else default

    async def _run(
        self,
        action: Action,
        resource_id: str,
        operation: Awaitable[Diagnostics],
        timeout: float,
    ) -> Diagnostics:
        """Run an operation body under a deadline."""
        try:
            return await asyncio.wait_for(operation, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"{action.value} {self.service_name} {RESOURCE_KIND} "
                f"({resource_id}) timed out after {timeout}s"
            )
            return Diagnostics().append(
                self._diag(action, resource_id, OperationTimeoutError(timeout))
            )

    def _diag(
        self,
        action: Action,
        resource_id: str,
        err: BaseException,
        error_kind: Optional[ErrorKind] = None,
    ) -> Diagnostic:
        return diag_error(
            self.service_name,
            action,
            RESOURCE_KIND,
            resource_id,
            err,
            error_kind=error_kind,
        )

    async def _publish(
        self,
        event_type: EventType,
        record: ProjectRecord,
        name: Optional[str] = None,
    ) -> None:
        if self.event_bus is None:
            return
        await self.event_bus.publish(
            ProjectEvent.from_record(event_type, RESOURCE_KIND, record, name=name)
        )
