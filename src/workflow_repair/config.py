"""Settings for the workflow repair tool.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The decider repush delay is deliberately not configurable; it is shared with
the orchestrator's normal decider enqueue.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_repair.system_tasks import SystemTaskRegistry, default_registry


def _split_names(value: str) -> list[str]:
    parts = [p.strip() for p in value.split(",")]
    return [p for p in parts if p]


class RepairSettings(BaseSettings):
    """Settings for the repair tool.

    Environment variables:
    - LOG_LEVEL                           (optional)
    - WORKFLOW_REPAIR_ENABLED             (optional)
    - WORKFLOW_REPAIR_STATE_PATH          (optional)
    - WORKFLOW_REPAIR_SYNC_SYSTEM_TASKS   (optional, comma-separated)
    - WORKFLOW_REPAIR_ASYNC_SYSTEM_TASKS  (optional, comma-separated)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `RepairSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    enabled: bool = Field(
        default=True,
        validation_alias="WORKFLOW_REPAIR_ENABLED",
        description=(
            "Whether the repair service may run. Disable it when the queue layer cannot "
            "answer membership queries reliably."
        ),
    )

    state_path: Path = Field(
        default=Path("repair_state"),
        validation_alias="WORKFLOW_REPAIR_STATE_PATH",
        description="Directory holding the JSON execution store and queue files",
    )

    sync_system_tasks: str = Field(
        default="",
        validation_alias="WORKFLOW_REPAIR_SYNC_SYSTEM_TASKS",
        description="Extra synchronous system task types, comma-separated",
    )
    async_system_tasks: str = Field(
        default="",
        validation_alias="WORKFLOW_REPAIR_ASYNC_SYSTEM_TASKS",
        description="Extra asynchronous system task types, comma-separated",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unsupported log level: {value!r}")
        return level

    @property
    def workflows_file(self) -> Path:
        """Path of the JSON execution store."""

        return self.state_path / "workflows.json"

    @property
    def queues_file(self) -> Path:
        """Path of the JSON queue layer."""

        return self.state_path / "queues.json"

    def build_registry(self) -> SystemTaskRegistry:
        return default_registry(
            extra_sync=_split_names(self.sync_system_tasks),
            extra_async=_split_names(self.async_system_tasks),
        )
