"""JSON-file backed execution store and queue layer.

These are small reference backends for operators and tests. Each file is read
and rewritten whole while holding an `fcntl.flock` on a `.lock` file beside
it, so several `workflow-repair` processes can share one state directory.
Writes land in a temp file that is renamed over the original, so readers
never see a half-written file. Anything bigger belongs in a real database or
queue.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from workflow_repair.dao import ExecutionDAO, QueueDAO
from workflow_repair.errors import BackendFailure, WorkflowNotFound
from workflow_repair.models import Workflow

logger = logging.getLogger(__name__)


@contextmanager
def _locked(path: Path, *, exclusive: bool) -> Iterator[None]:
    """Hold a shared or exclusive lock on `<path>.lock` for the block."""

    lock_path = path.with_name(path.name + ".lock")
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock_fd = open(lock_path, "a")
    except OSError as e:
        raise BackendFailure(f"Failed to open lock file: {lock_path}") from e

    with lock_fd:
        fcntl.flock(lock_fd, fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
        try:
            yield
        finally:
            fcntl.flock(lock_fd, fcntl.LOCK_UN)


def _read_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise BackendFailure(f"State file is not valid JSON: {path}") from e
    except OSError as e:
        raise BackendFailure(f"Failed to read state file: {path}") from e


def _write_json(path: Path, payload: object) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise BackendFailure(f"Failed to write state file: {path}") from e


def _is_delay(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class JsonExecutionDAO(ExecutionDAO):
    """Workflows persisted as a JSON list of workflow records."""

    path: Path

    def _load_unlocked(self) -> list[Workflow]:
        if not self.path.exists():
            return []
        raw = _read_json(self.path)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise BackendFailure(f"Workflow state file must contain a JSON list: {self.path}")
        try:
            return [Workflow.model_validate(item) for item in raw]
        except ValidationError as e:
            raise BackendFailure(f"Invalid workflow record in {self.path}") from e

    def get_workflow(self, workflow_id: str, include_tasks: bool) -> Workflow:
        with _locked(self.path, exclusive=False):
            workflows = self._load_unlocked()
        for workflow in workflows:
            if workflow.workflow_id == workflow_id:
                return workflow if include_tasks else workflow.without_tasks()
        raise WorkflowNotFound(workflow_id)

    def save_workflow(self, workflow: Workflow) -> None:
        """Insert or replace a workflow record."""

        with _locked(self.path, exclusive=True):
            workflows = [
                w for w in self._load_unlocked() if w.workflow_id != workflow.workflow_id
            ]
            workflows.append(workflow)
            _write_json(
                self.path, [w.model_dump(mode="json", by_alias=True) for w in workflows]
            )


@dataclass
class JsonQueueDAO(QueueDAO):
    """Queues persisted as `{queue_name: {message_id: delay_seconds}}`.

    Pushing is idempotent by (queue, id): pushing a message that is already
    queued only updates its delay.
    """

    path: Path

    def _load_unlocked(self) -> dict[str, dict[str, int]]:
        if not self.path.exists():
            return {}
        raw = _read_json(self.path)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise BackendFailure(f"Queue state file must contain a JSON object: {self.path}")

        for name, messages in raw.items():
            if not isinstance(messages, dict):
                raise BackendFailure(f"Queue {name!r} must be a JSON object in {self.path}")
            if not all(_is_delay(v) for v in messages.values()):
                raise BackendFailure(f"Queue {name!r} has a non-integer delay in {self.path}")
        return raw

    def contains_message(self, queue_name: str, message_id: str) -> bool:
        with _locked(self.path, exclusive=False):
            return message_id in self._load_unlocked().get(queue_name, {})

    def push(self, queue_name: str, message_id: str, delay_seconds: int) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be non-negative")
        with _locked(self.path, exclusive=True):
            queues = self._load_unlocked()
            queues.setdefault(queue_name, {})[message_id] = delay_seconds
            _write_json(self.path, queues)
        logger.debug(
            "Pushed message",
            extra={"queue": queue_name, "message_id": message_id, "delay_seconds": delay_seconds},
        )

    def remove(self, queue_name: str, message_id: str) -> bool:
        """Remove a message; returns False if it was not queued."""

        with _locked(self.path, exclusive=True):
            queues = self._load_unlocked()
            messages = queues.get(queue_name, {})
            if message_id not in messages:
                return False
            del messages[message_id]
            _write_json(self.path, queues)
            return True

    def size(self, queue_name: str) -> int:
        with _locked(self.path, exclusive=False):
            return len(self._load_unlocked().get(queue_name, {}))
