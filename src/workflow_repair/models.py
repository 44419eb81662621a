"""Read-only views of workflows and tasks as stored by the orchestrator."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WorkflowStatus(str, Enum):
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    TERMINATED = "TERMINATED"
    TIMED_OUT = "TIMED_OUT"
    PAUSED = "PAUSED"


class TaskStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    TIMED_OUT = "TIMED_OUT"
    SKIPPED = "SKIPPED"


class Task(BaseModel):
    """A task instance of a workflow.

    `task_def_name` doubles as the name of the queue the task waits in until a
    worker (or the async system task executor) polls it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    task_id: str = Field(alias="taskId", min_length=1)
    task_type: str = Field(alias="taskType")
    task_def_name: str = Field(alias="taskDefName", min_length=1)
    status: TaskStatus
    callback_after_seconds: int = Field(default=0, alias="callbackAfterSeconds", ge=0)


class Workflow(BaseModel):
    """A workflow instance.

    `tasks` is only populated when the caller asked the execution store for them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    workflow_id: str = Field(alias="workflowId", min_length=1)
    status: WorkflowStatus
    tasks: list[Task] = Field(default_factory=list)

    def without_tasks(self) -> Workflow:
        return self.model_copy(update={"tasks": []})
