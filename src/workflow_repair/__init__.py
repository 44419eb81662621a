"""Workflow repair.

Keeps the execution store and the queue layer of a workflow orchestrator in
agreement by re-enqueueing workflows and tasks that should be queued but are
not:
- RUNNING workflows missing from the decider queue
- SCHEDULED tasks missing from their task-definition queue
"""

__version__ = "0.1.0"

from workflow_repair.config import RepairSettings
from workflow_repair.service import WorkflowRepairService

__all__ = ["__version__", "RepairSettings", "WorkflowRepairService"]
