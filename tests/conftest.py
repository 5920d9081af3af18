"""Pytest configuration and fixtures."""

from typing import Callable, Dict, List, Optional, Tuple

import pytest

from clients.base import ProjectsClient
from clients.models import (
    CreateProjectInput,
    CreateProjectOutput,
    DeleteProjectInput,
    DeleteProjectOutput,
    GetProjectInput,
    GetProjectOutput,
    UpdateProjectInput,
    UpdateProjectOutput,
)
from config import TimeoutsConfig
from errors import ResourceNotFoundError
from reconcilers.project import ProjectReconciler
from records import ProjectRecord


class FakeProjectsClient(ProjectsClient):
    """In-memory projects API that records every call."""

    def __init__(self):
        self.projects: Dict[Tuple[str, str], Dict[str, Optional[str]]] = {}
        self.calls: List[Tuple[str, object]] = []
        self.failures: Dict[str, List[BaseException]] = {}
        self.normalize_description: Callable[[str], Optional[str]] = lambda d: d
        self._counter = 0

    @property
    def name(self) -> str:
        return "fake"

    def fail_next(self, method: str, error: BaseException) -> None:
        """Make the next call to ``method`` raise ``error``."""
        self.failures.setdefault(method, []).append(error)

    def add_project(
        self, space_name: str, name: str, display_name: str, description: str = ""
    ) -> None:
        self.projects[(space_name, name)] = {
            "name": name,
            "space_name": space_name,
            "display_name": display_name,
            "description": description,
        }

    def call_names(self) -> List[str]:
        return [method for method, _ in self.calls]

    def _record(self, method: str, request: object) -> None:
        self.calls.append((method, request))
        pending = self.failures.get(method)
        if pending:
            raise pending.pop(0)

    def _missing(self, space_name: str, name: str) -> ResourceNotFoundError:
        return ResourceNotFoundError(
            f"Project {name} not found in space {space_name}", status=404
        )

    async def create_project(self, request: CreateProjectInput) -> CreateProjectOutput:
        self._record("create_project", request)
        self._counter += 1
        name = f"{request.display_name}-{self._counter:04d}"
        self.add_project(
            request.space_name,
            name,
            request.display_name,
            self.normalize_description(request.description),
        )
        return CreateProjectOutput(**self.projects[(request.space_name, name)])

    async def get_project(self, request: GetProjectInput) -> GetProjectOutput:
        self._record("get_project", request)
        project = self.projects.get((request.space_name, request.name))
        if project is None:
            raise self._missing(request.space_name, request.name)
        return GetProjectOutput(**project)

    async def update_project(self, request: UpdateProjectInput) -> UpdateProjectOutput:
        self._record("update_project", request)
        project = self.projects.get((request.space_name, request.name))
        if project is None:
            raise self._missing(request.space_name, request.name)
        project["display_name"] = request.display_name
        project["description"] = self.normalize_description(request.description)
        return UpdateProjectOutput(**project)

    async def delete_project(self, request: DeleteProjectInput) -> DeleteProjectOutput:
        self._record("delete_project", request)
        project = self.projects.pop((request.space_name, request.name), None)
        if project is None:
            raise self._missing(request.space_name, request.name)
        return DeleteProjectOutput(
            name=project["name"],
            space_name=project["space_name"],
            display_name=project["display_name"],
        )


@pytest.fixture
def fake_client():
    """An empty in-memory projects API."""
    return FakeProjectsClient()


@pytest.fixture
def timeouts():
    """Short deadlines so waits finish quickly."""
    return TimeoutsConfig(
        create=5, read=5, update=5, delete=5, poll_interval=0.01
    )


@pytest.fixture
def reconciler(timeouts):
    """Project reconciler without an event bus."""
    return ProjectReconciler(timeouts=timeouts)


@pytest.fixture
def new_record():
    """Desired state for a project that does not exist yet."""
    return ProjectRecord(space_name="space1", display_name="proj1", description="")


@pytest.fixture
def existing_record(fake_client):
    """A record already in sync with a remote project."""
    fake_client.add_project("space1", "proj1-id", "proj1", "original")
    record = ProjectRecord(
        space_name="space1",
        display_name="proj1",
        description="original",
        name="proj1-id",
    )
    record.mark_observed()
    return record
