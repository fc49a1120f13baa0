"""Task schemas and lifecycle states."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .artifact import Artifact
from .base import SchemaBase
from .message import Message


class TaskState(str, Enum):
    SUBMITTED = "submitted"
    WORKING = "working"
    INPUT_REQUIRED = "input-required"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATES = frozenset({TaskState.COMPLETED, TaskState.FAILED})


class TaskStatus(SchemaBase):
    state: TaskState
    message: Optional[Message] = None
    timestamp: Optional[str] = None


class Task(SchemaBase):
    """One durable unit of work requested by a caller.

    A Task's state is fixed at construction. Transitions are represented by
    building a new Task (see ``with_status``), never by mutating an existing
    one. ``artifacts`` is only present on completed tasks that produced
    durable output; ``metadata["error"]`` carries ``{name, message, code}``
    on failed tasks.
    """

    kind: Literal["task"] = "task"
    id: str
    context_id: str
    status: TaskStatus
    artifacts: Optional[List[Artifact]] = None
    metadata: Optional[Dict[str, Any]] = None

    @property
    def state(self) -> TaskState:
        return self.status.state

    def is_terminal(self) -> bool:
        return self.status.state in TERMINAL_STATES

    def with_status(
        self,
        state: TaskState,
        message: Optional[Message] = None,
        timestamp: Optional[str] = None,
    ) -> "Task":
        """Return a new Task representing a transition to ``state``."""
        status = TaskStatus(state=state, message=message, timestamp=timestamp)
        return self.model_copy(update={"status": status})

    def error_detail(self) -> Optional[Dict[str, Any]]:
        if not self.metadata:
            return None
        return self.metadata.get("error")


class TaskAndHistory(SchemaBase):
    """Persistence unit: a task paired with its ordered message history."""

    task: Task
    history: List[Message] = Field(default_factory=list)
