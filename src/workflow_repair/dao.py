"""Abstract base classes for the stores the repair service reads and writes."""

from abc import ABC, abstractmethod

from workflow_repair.models import Workflow


class ExecutionDAO(ABC):
    """Read access to the orchestrator's execution store.

    The execution store is the source of truth for workflow and task status.
    """

    @abstractmethod
    def get_workflow(self, workflow_id: str, include_tasks: bool) -> Workflow:
        """Load a consistent snapshot of a workflow.

        Args:
            workflow_id: Id of the workflow to load.
            include_tasks: Whether the workflow's tasks should be loaded too.
                When False the returned workflow has no tasks.

        Returns:
            The stored workflow.

        Raises:
            WorkflowNotFound: If no workflow with this id exists.
            BackendFailure: If the store cannot be read.
        """
        pass


class QueueDAO(ABC):
    """Access to the queue layer holding ids awaiting dispatch.

    Implementations must answer `contains_message` reliably. A false negative
    causes a duplicate push, a false positive hides drift from the repair
    service.
    """

    @abstractmethod
    def contains_message(self, queue_name: str, message_id: str) -> bool:
        """Check whether a queue currently holds a message.

        Args:
            queue_name: Name of the queue.
            message_id: Workflow or task id.

        Returns:
            True if the message is in the queue.
        """
        pass

    @abstractmethod
    def push(self, queue_name: str, message_id: str, delay_seconds: int) -> None:
        """Enqueue a message.

        Args:
            queue_name: Name of the queue.
            message_id: Workflow or task id.
            delay_seconds: Seconds before the message becomes visible to pollers.
        """
        pass
