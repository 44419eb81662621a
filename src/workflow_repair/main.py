"""CLI entrypoint for verifying and repairing a single workflow.

Each invocation handles exactly one workflow id; sweeping over many workflows
is left to whatever scheduler calls this tool.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from workflow_repair import __version__
from workflow_repair.config import RepairSettings
from workflow_repair.errors import BackendFailure, RepairDisabled, WorkflowNotFound
from workflow_repair.logging import configure_logging
from workflow_repair.metrics import RepairMetrics
from workflow_repair.service import WorkflowRepairService
from workflow_repair.stores import JsonExecutionDAO, JsonQueueDAO

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_SETTINGS = 2
EXIT_DISABLED = 3
EXIT_NOT_FOUND = 4
EXIT_BACKEND_FAILURE = 5


def _workflow_id(value: str) -> str:
    workflow_id = value.strip()
    if not workflow_id:
        raise argparse.ArgumentTypeError("workflow id must not be blank")
    return workflow_id


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-repair",
        description="Re-enqueue workflows and tasks missing from the orchestrator's queues",
    )
    parser.add_argument("--version", action="version", version=f"workflow-repair {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    verify = subparsers.add_parser(
        "verify",
        help="Verify a workflow against the decider queue (and optionally its tasks)",
    )
    verify.add_argument(
        "--workflow-id", type=_workflow_id, required=True, help="Workflow id to verify"
    )
    verify.add_argument(
        "--include-tasks",
        action="store_true",
        help="Also verify that scheduled tasks are present in their task queues",
    )

    verify_tasks = subparsers.add_parser(
        "verify-tasks",
        help="Verify only the tasks of a workflow; the decider queue is not checked",
    )
    verify_tasks.add_argument(
        "--workflow-id", type=_workflow_id, required=True, help="Workflow id to verify"
    )

    return parser


def build_service(
    settings: RepairSettings, metrics: RepairMetrics
) -> WorkflowRepairService:
    """Wire the repair service to the JSON backends under `settings.state_path`."""

    if not settings.enabled:
        raise RepairDisabled("Workflow repair is disabled (WORKFLOW_REPAIR_ENABLED=false)")

    return WorkflowRepairService(
        execution_dao=JsonExecutionDAO(settings.workflows_file),
        queue_dao=JsonQueueDAO(settings.queues_file),
        system_tasks=settings.build_registry(),
        metrics=metrics,
    )


def _print_json(payload: dict[str, object]) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = RepairSettings()
    except ValidationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return EXIT_INVALID_SETTINGS

    configure_logging(settings.log_level)

    metrics = RepairMetrics()
    try:
        service = build_service(settings, metrics)

        if args.command == "verify":
            repaired = service.verify_and_repair_workflow(
                args.workflow_id, include_tasks=args.include_tasks
            )
            _print_json(
                {
                    "workflow_id": args.workflow_id,
                    "repaired": repaired,
                    "repushes": metrics.snapshot(),
                }
            )
            return EXIT_OK

        service.verify_and_repair_workflow_tasks(args.workflow_id)
        _print_json({"workflow_id": args.workflow_id, "repushes": metrics.snapshot()})
        return EXIT_OK

    except RepairDisabled as e:
        logger.warning(str(e))
        return EXIT_DISABLED
    except WorkflowNotFound as e:
        logger.error(str(e), extra={"workflow_id": e.workflow_id})
        return EXIT_NOT_FOUND
    except BackendFailure:
        logger.exception("Repair failed", extra={"workflow_id": args.workflow_id})
        return EXIT_BACKEND_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
