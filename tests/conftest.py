"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from workflow_repair.dao import ExecutionDAO, QueueDAO
from workflow_repair.metrics import RepairMetrics
from workflow_repair.models import Task, TaskStatus, Workflow, WorkflowStatus
from workflow_repair.service import WorkflowRepairService
from workflow_repair.stores import JsonExecutionDAO, JsonQueueDAO
from workflow_repair.system_tasks import SystemTaskRegistry, default_registry


class QueueContents:
    """Backs a mocked QueueDAO with a set of (queue, id) pairs."""

    def __init__(self) -> None:
        self.messages: set[tuple[str, str]] = set()

    def add(self, queue_name: str, message_id: str) -> None:
        self.messages.add((queue_name, message_id))

    def contains(self, queue_name: str, message_id: str) -> bool:
        return (queue_name, message_id) in self.messages

    def push(self, queue_name: str, message_id: str, delay_seconds: int) -> None:
        self.messages.add((queue_name, message_id))


def make_task(
    task_id: str,
    *,
    task_type: str = "SIMPLE",
    task_def_name: str = "simpleQ",
    status: TaskStatus = TaskStatus.SCHEDULED,
    callback_after_seconds: int = 0,
) -> Task:
    return Task(
        task_id=task_id,
        task_type=task_type,
        task_def_name=task_def_name,
        status=status,
        callback_after_seconds=callback_after_seconds,
    )


def make_workflow(
    workflow_id: str,
    *,
    status: WorkflowStatus = WorkflowStatus.RUNNING,
    tasks: list[Task] | None = None,
) -> Workflow:
    return Workflow(workflow_id=workflow_id, status=status, tasks=tasks or [])


@pytest.fixture
def queue_contents() -> QueueContents:
    return QueueContents()


@pytest.fixture
def queue_dao(queue_contents: QueueContents) -> Mock:
    """A mocked queue layer whose membership follows `queue_contents`."""
    dao = Mock(spec=QueueDAO)
    dao.contains_message.side_effect = queue_contents.contains
    dao.push.side_effect = queue_contents.push
    return dao


@pytest.fixture
def execution_dao() -> Mock:
    return Mock(spec=ExecutionDAO)


@pytest.fixture
def metrics() -> RepairMetrics:
    return RepairMetrics()


@pytest.fixture
def registry() -> SystemTaskRegistry:
    return default_registry()


@pytest.fixture
def service(
    execution_dao: Mock,
    queue_dao: Mock,
    registry: SystemTaskRegistry,
    metrics: RepairMetrics,
) -> WorkflowRepairService:
    return WorkflowRepairService(
        execution_dao=execution_dao,
        queue_dao=queue_dao,
        system_tasks=registry,
        metrics=metrics,
    )


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    """Provide a temporary state directory."""
    path = tmp_path / "repair_state"
    path.mkdir()
    return path


@pytest.fixture
def json_execution_dao(state_dir: Path) -> JsonExecutionDAO:
    return JsonExecutionDAO(state_dir / "workflows.json")


@pytest.fixture
def json_queue_dao(state_dir: Path) -> JsonQueueDAO:
    return JsonQueueDAO(state_dir / "queues.json")
