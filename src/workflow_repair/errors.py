"""Errors raised while verifying and repairing workflows."""

from __future__ import annotations

from dataclasses import dataclass


class RepairError(Exception):
    """Base class for workflow repair errors."""


@dataclass(eq=False)
class WorkflowNotFound(RepairError):
    """Raised when the execution store has no workflow with the given id."""

    workflow_id: str

    def __str__(self) -> str:
        return f"Workflow not found: {self.workflow_id!r}"


class BackendFailure(RepairError):
    """Raised when the execution store or the queue layer cannot be read or written."""


class RepairDisabled(RepairError):
    """Raised when the repair service is switched off in settings."""
