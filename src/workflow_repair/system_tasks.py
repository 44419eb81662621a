"""Catalogue of system task types.

System tasks are executed by the orchestrator itself rather than by remote
workers. Synchronous ones run inline while the decider evaluates the workflow,
so they never sit in a task queue. Asynchronous ones are polled from
`TaskQueue(task_def_name)` exactly like user tasks.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SystemTask:
    name: str
    is_async: bool


SYNC_SYSTEM_TASKS: tuple[str, ...] = (
    "DECISION",
    "FORK",
    "FORK_JOIN_DYNAMIC",
    "JOIN",
    "SUB_WORKFLOW",
    "LAMBDA",
    "TERMINATE",
    "WAIT",
)

ASYNC_SYSTEM_TASKS: tuple[str, ...] = (
    "EVENT",
    "HTTP_POLL",
    "KAFKA_PUBLISH",
    "JSON_JQ_TRANSFORM",
)


class SystemTaskRegistry:
    """Lookup of system tasks by task type."""

    def __init__(self, tasks: Iterable[SystemTask] = ()) -> None:
        self._tasks: dict[str, SystemTask] = {}
        for task in tasks:
            self.register(task)

    def register(self, task: SystemTask) -> None:
        if not task.name:
            raise ValueError("System task name is required")
        self._tasks[task.name] = task

    def is_system_task(self, task_type: str) -> bool:
        return task_type in self._tasks

    def get(self, task_type: str) -> SystemTask:
        """Return the system task registered for `task_type`.

        Raises:
            KeyError: If `task_type` is not a system task.
        """
        return self._tasks[task_type]

    def names(self) -> list[str]:
        return sorted(self._tasks)


def default_registry(
    *,
    extra_sync: Iterable[str] = (),
    extra_async: Iterable[str] = (),
) -> SystemTaskRegistry:
    """Registry with the orchestrator's built-in system tasks plus any extras."""

    registry = SystemTaskRegistry()
    for name in (*SYNC_SYSTEM_TASKS, *extra_sync):
        registry.register(SystemTask(name=name, is_async=False))
    for name in (*ASYNC_SYSTEM_TASKS, *extra_async):
        registry.register(SystemTask(name=name, is_async=True))
    return registry
