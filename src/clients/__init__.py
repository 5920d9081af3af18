"""
Remote API clients.

Clients implement ProjectsClient and are passed explicitly to every
reconciler operation.
"""

from clients.base import ProjectsClient
from clients.http import HTTPProjectsClient

__all__ = ["ProjectsClient", "HTTPProjectsClient"]
