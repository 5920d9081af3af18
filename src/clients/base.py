"""
Projects Client Base - Abstract interface for the remote projects API.

Reconcilers receive a client handle on every call. Implementations raise
``errors.RemoteAPIError`` subclasses so failures can be classified.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

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


class ProjectsClient(ABC):
    """Abstract base class for projects API clients."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this client implementation."""
        pass

    async def initialize(self, config: Dict[str, Any]) -> None:
        """
        Initialize the client with configuration.

        Args:
            config: Client-specific configuration dictionary
        """

    async def close(self) -> None:
        """Release any connections held by the client."""

    @abstractmethod
    async def create_project(self, request: CreateProjectInput) -> CreateProjectOutput:
        """Create a project and return the service's view of it."""
        pass

    @abstractmethod
    async def get_project(self, request: GetProjectInput) -> GetProjectOutput:
        """Fetch a project by name within a space."""
        pass

    @abstractmethod
    async def update_project(self, request: UpdateProjectInput) -> UpdateProjectOutput:
        """Replace a project's mutable fields."""
        pass

    @abstractmethod
    async def delete_project(self, request: DeleteProjectInput) -> DeleteProjectOutput:
        """Delete a project."""
        pass

    @classmethod
    def load_config_from_env(cls) -> Dict[str, Any]:
        """
        Load client-specific configuration from environment variables.

        Returns:
            Dictionary of configuration values for this client.
        """
        return {}
