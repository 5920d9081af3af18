"""
Resource reconcilers.

Each reconciler owns the create/read/update/delete lifecycle of one
resource kind.
"""

from reconcilers.base import ReconcileResult, ResourceReconciler
from reconcilers.project import (
    ProjectReconciler,
    find_project_by_name,
    status_project,
)

__all__ = [
    "ReconcileResult",
    "ResourceReconciler",
    "ProjectReconciler",
    "find_project_by_name",
    "status_project",
]
