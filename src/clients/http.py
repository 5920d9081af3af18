"""
HTTP Projects Client - aiohttp implementation of ProjectsClient.

Talks to the collaboration service REST API:

    POST   /v1/spaces/{space}/projects
    GET    /v1/spaces/{space}/projects/{name}
    PATCH  /v1/spaces/{space}/projects/{name}
    DELETE /v1/spaces/{space}/projects/{name}
"""

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp

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
from config import ClientConfig
from errors import (
    AccessDeniedError,
    ConflictError,
    RemoteAPIError,
    ResourceNotFoundError,
    ServiceUnavailableError,
    ThrottlingError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_TYPE_HEADER = "x-amzn-ErrorType"

_STATUS_ERRORS = {
    400: ValidationError,
    401: AccessDeniedError,
    403: AccessDeniedError,
    404: ResourceNotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: ThrottlingError,
}


def error_from_response(
    status: int, body: str, error_type: Optional[str] = None
) -> RemoteAPIError:
    """
    Build a typed RemoteAPIError from a failed HTTP response.

    Args:
        status: HTTP status code.
        body: Raw response body.
        error_type: Value of the service's error type header, if any.
    """
    message = body or f"HTTP {status}"
    code = error_type.split(":")[0] if error_type else None

    try:
        data = json.loads(body) if body else {}
    except json.JSONDecodeError:
        data = {}

    if isinstance(data, dict):
        message = data.get("message") or data.get("Message") or message
        code = code or data.get("code") or data.get("__type")

    if status in _STATUS_ERRORS:
        error_class = _STATUS_ERRORS[status]
    elif status >= 500:
        error_class = ServiceUnavailableError
    else:
        error_class = RemoteAPIError

    return error_class(message, status=status, code=code)


class HTTPProjectsClient(ProjectsClient):
    """Projects client backed by an aiohttp session."""

    def __init__(self):
        self.api_base_url: str = "https://codecatalyst.global.api.aws"
        self.token: Optional[str] = None
        self.request_timeout: int = 30
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return "http"

    @classmethod
    def load_config_from_env(cls) -> Dict[str, Any]:
        client_config = ClientConfig.from_env()
        return {
            "api_base_url": client_config.api_base_url,
            "token": client_config.token,
            "request_timeout": client_config.request_timeout,
        }

    async def initialize(self, config: Dict[str, Any]) -> None:
        self.api_base_url = config.get("api_base_url", self.api_base_url).rstrip("/")
        self.token = config.get("token")
        self.request_timeout = config.get("request_timeout", self.request_timeout)

        if not self.token:
            logger.warning(
                "API token not configured. Set SPACES_API_TOKEN environment variable."
            )

        logger.debug(
            f"HTTP projects client initialized: api_base_url={self.api_base_url}, "
            f"request_timeout={self.request_timeout}s"
        )

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def create_project(self, request: CreateProjectInput) -> CreateProjectOutput:
        data = await self._request(
            "POST",
            self._projects_path(request.space_name),
            {"displayName": request.display_name, "description": request.description},
        )
        return CreateProjectOutput.model_validate(data)

    async def get_project(self, request: GetProjectInput) -> GetProjectOutput:
        data = await self._request(
            "GET", self._project_path(request.space_name, request.name)
        )
        return GetProjectOutput.model_validate(data)

    async def update_project(self, request: UpdateProjectInput) -> UpdateProjectOutput:
        data = await self._request(
            "PATCH",
            self._project_path(request.space_name, request.name),
            {"displayName": request.display_name, "description": request.description},
        )
        return UpdateProjectOutput.model_validate(data)

    async def delete_project(self, request: DeleteProjectInput) -> DeleteProjectOutput:
        data = await self._request(
            "DELETE", self._project_path(request.space_name, request.name)
        )
        return DeleteProjectOutput.model_validate(data)

    # Private helper methods

    def _projects_path(self, space_name: str) -> str:
        return f"/v1/spaces/{quote(space_name, safe='')}/projects"

    def _project_path(self, space_name: str, name: str) -> str:
        return f"{self._projects_path(space_name)}/{quote(name, safe='')}"

    def _get_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.request_timeout)
            )
        return self._session

    async def _request(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body."""
        url = f"{self.api_base_url}{path}"
        session = self._get_session()

        async with session.request(
            method, url, headers=self._get_headers(), json=payload
        ) as response:
            if response.status >= 400:
                body = await response.text()
                error = error_from_response(
                    response.status, body, response.headers.get(ERROR_TYPE_HEADER)
                )
                logger.debug(f"{method} {path} failed: {response.status} - {error}")
                raise error

            if response.status == 204:
                return {}

            data = await response.json(content_type=None)
            return data or {}
