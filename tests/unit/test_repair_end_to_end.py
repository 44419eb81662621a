"""End-to-end repair against the JSON-file backends."""

from __future__ import annotations

from conftest import make_task, make_workflow

from workflow_repair.constants import DECIDER_QUEUE
from workflow_repair.metrics import RepairMetrics
from workflow_repair.models import TaskStatus, WorkflowStatus
from workflow_repair.service import WorkflowRepairService
from workflow_repair.stores import JsonExecutionDAO, JsonQueueDAO
from workflow_repair.system_tasks import default_registry


def _service(
    execution_dao: JsonExecutionDAO, queue_dao: JsonQueueDAO, metrics: RepairMetrics
) -> WorkflowRepairService:
    return WorkflowRepairService(
        execution_dao=execution_dao,
        queue_dao=queue_dao,
        system_tasks=default_registry(),
        metrics=metrics,
    )


def test_drifted_workflow_is_healed_and_stays_healed(
    json_execution_dao: JsonExecutionDAO, json_queue_dao: JsonQueueDAO
) -> None:
    json_execution_dao.save_workflow(
        make_workflow(
            "w1",
            tasks=[
                make_task("t1", task_type="HTTP", task_def_name="httpQ", callback_after_seconds=5),
                make_task("t2", task_type="DECISION", task_def_name="DECISION"),
                make_task("t3", task_type="HTTP_POLL", task_def_name="HTTP_POLL",
                          callback_after_seconds=10),
                make_task("t4", task_def_name="httpQ", status=TaskStatus.IN_PROGRESS),
            ],
        )
    )
    metrics = RepairMetrics()
    service = _service(json_execution_dao, json_queue_dao, metrics)

    assert service.verify_and_repair_workflow("w1", include_tasks=True) is True

    assert json_queue_dao.contains_message(DECIDER_QUEUE, "w1")
    assert json_queue_dao.contains_message("httpQ", "t1")
    assert json_queue_dao.contains_message("HTTP_POLL", "t3")
    assert not json_queue_dao.contains_message("DECISION", "t2")
    assert not json_queue_dao.contains_message("httpQ", "t4")
    assert metrics.snapshot() == {DECIDER_QUEUE: 1, "HTTP_POLL": 1, "httpQ": 1}

    assert service.verify_and_repair_workflow("w1", include_tasks=True) is False
    assert metrics.total == 3


def test_completed_workflow_is_not_resurrected(
    json_execution_dao: JsonExecutionDAO, json_queue_dao: JsonQueueDAO
) -> None:
    json_execution_dao.save_workflow(make_workflow("w3", status=WorkflowStatus.COMPLETED))
    service = _service(json_execution_dao, json_queue_dao, RepairMetrics())

    assert service.verify_and_repair_workflow("w3", include_tasks=False) is False
    assert json_queue_dao.size(DECIDER_QUEUE) == 0


def test_task_consumed_from_queue_is_repushed(
    json_execution_dao: JsonExecutionDAO, json_queue_dao: JsonQueueDAO
) -> None:
    json_execution_dao.save_workflow(
        make_workflow("w4", tasks=[make_task("t1", task_def_name="q", callback_after_seconds=4)])
    )
    json_queue_dao.push(DECIDER_QUEUE, "w4", 0)
    json_queue_dao.push("q", "t1", 4)
    service = _service(json_execution_dao, json_queue_dao, RepairMetrics())

    assert service.verify_and_repair_workflow("w4", include_tasks=True) is False

    # A worker polled the message but never moved the task to IN_PROGRESS.
    assert json_queue_dao.remove("q", "t1") is True
    service.verify_and_repair_workflow_tasks("w4")

    assert json_queue_dao.contains_message("q", "t1")
