"""Keep the execution store and the queue layer in agreement.

The repair service looks at what the execution store says should be queued and
re-pushes whatever the queue layer is missing:
- a RUNNING workflow must be in the decider queue
- a SCHEDULED task must be in the queue named after its task definition,
  unless it is a synchronous system task (those run inline in the decider)

The queue layer must implement a reliable `contains_message`. Deployments whose
queue cannot answer membership should keep the service disabled via settings.
"""

from __future__ import annotations

import logging

from workflow_repair.constants import DECIDER_QUEUE, DECIDER_REPUSH_DELAY_SECONDS
from workflow_repair.dao import ExecutionDAO, QueueDAO
from workflow_repair.metrics import RepairMetrics
from workflow_repair.models import Task, TaskStatus, Workflow, WorkflowStatus
from workflow_repair.system_tasks import SystemTaskRegistry

logger = logging.getLogger(__name__)


class WorkflowRepairService:
    """Re-enqueue workflows and tasks that fell out of their queues.

    Stateless apart from its collaborators. Store and queue failures propagate
    unchanged; nothing is retried.
    """

    def __init__(
        self,
        *,
        execution_dao: ExecutionDAO,
        queue_dao: QueueDAO,
        system_tasks: SystemTaskRegistry,
        metrics: RepairMetrics,
    ) -> None:
        self._execution_dao = execution_dao
        self._queue_dao = queue_dao
        self._system_tasks = system_tasks
        self._metrics = metrics

    def verify_and_repair_workflow(self, workflow_id: str, include_tasks: bool) -> bool:
        """Verify a workflow, and optionally its tasks, against the queue layer.

        Args:
            workflow_id: Id of the workflow to verify.
            include_tasks: Also verify every task of the workflow.

        Returns:
            True if anything was re-pushed.

        Raises:
            WorkflowNotFound: If the workflow does not exist.
        """
        _require_id(workflow_id)
        workflow = self._execution_dao.get_workflow(workflow_id, include_tasks)

        repaired = self.verify_and_repair_decider_queue(workflow)
        if include_tasks:
            # Every task is probed; one repair must not hide another.
            for task in workflow.tasks:
                repaired = self.verify_and_repair_task(task) or repaired
        return repaired

    def verify_and_repair_workflow_tasks(self, workflow_id: str) -> None:
        """Verify the tasks of a workflow without looking at the decider queue."""

        _require_id(workflow_id)
        workflow = self._execution_dao.get_workflow(workflow_id, True)
        for task in workflow.tasks:
            self.verify_and_repair_task(task)

    def verify_and_repair_decider_queue(self, workflow: Workflow) -> bool:
        if workflow.status != WorkflowStatus.RUNNING:
            return False
        if self._queue_dao.contains_message(DECIDER_QUEUE, workflow.workflow_id):
            return False

        self._queue_dao.push(DECIDER_QUEUE, workflow.workflow_id, DECIDER_REPUSH_DELAY_SECONDS)
        self._metrics.record_repush(DECIDER_QUEUE)
        logger.info(
            "Re-pushed workflow to decider queue",
            extra={
                "workflow_id": workflow.workflow_id,
                "queue": DECIDER_QUEUE,
                "delay_seconds": DECIDER_REPUSH_DELAY_SECONDS,
            },
        )
        return True

    def verify_and_repair_task(self, task: Task) -> bool:
        """Check that a scheduled task is in its queue and re-push it if not."""

        if task.status != TaskStatus.SCHEDULED:
            return False
        if self._is_sync_system_task(task):
            logger.debug(
                "Skipping synchronous system task",
                extra={"task_id": task.task_id, "task_type": task.task_type},
            )
            return False
        if self._queue_dao.contains_message(task.task_def_name, task.task_id):
            return False

        self._queue_dao.push(task.task_def_name, task.task_id, task.callback_after_seconds)
        self._metrics.record_repush(task.task_def_name)
        logger.info(
            "Re-pushed task to task queue",
            extra={
                "task_id": task.task_id,
                "queue": task.task_def_name,
                "delay_seconds": task.callback_after_seconds,
            },
        )
        return True

    def _is_sync_system_task(self, task: Task) -> bool:
        # Types the registry does not know are queued like user tasks.
        if not self._system_tasks.is_system_task(task.task_type):
            return False
        return not self._system_tasks.get(task.task_type).is_async


def _require_id(workflow_id: str) -> None:
    if not workflow_id or not workflow_id.strip():
        raise ValueError("workflow_id is required")
