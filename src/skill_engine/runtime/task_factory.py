"""Construction helpers for Task, Message and Artifact values.

These helpers are the only sanctioned way to build terminal results: they
populate every required field, generate fresh ids and keep the context-id
format consistent across skills.
"""

from __future__ import annotations

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union
from uuid import uuid4

from skill_engine.exceptions import SkillEngineError
from skill_engine.schemas import (
    Artifact,
    ErrorDetail,
    Message,
    Part,
    Role,
    Task,
    TaskState,
    TaskStatus,
    TextPart,
)

TerminalResult = Union[Task, Message]

_SUFFIX_ALPHABET = string.ascii_letters + string.digits


def generate_id() -> str:
    return str(uuid4())


def current_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_context_id(skill_name: str, suffix: str) -> str:
    """Build ``<skill>-<suffix>-<epoch ms>-<6 random chars>``."""
    random_part = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"{skill_name}-{suffix}-{int(time.time() * 1000)}-{random_part}"


def is_terminal_result(value: Any) -> bool:
    """True when ``value`` is a Task or Message instance.

    This is a type check: a mapping that merely looks like a task
    (``{"kind": "task"}``) is not a terminal result.
    """
    return isinstance(value, (Task, Message))


def create_info_message(
    text: str,
    role: Union[Role, str] = Role.AGENT,
    context_id: Optional[str] = None,
    task_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    reference_task_ids: Optional[List[str]] = None,
) -> Message:
    return Message(
        message_id=generate_id(),
        role=Role(role),
        parts=[TextPart(text=text)],
        context_id=context_id,
        task_id=task_id,
        metadata=metadata,
        reference_task_ids=reference_task_ids,
    )


def create_artifact(
    parts: Iterable[Union[Part, Dict[str, Any]]],
    name: Optional[str] = None,
    description: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Artifact:
    return Artifact(
        artifact_id=generate_id(),
        parts=list(parts),
        name=name,
        description=description,
        metadata=metadata,
    )


def _build_task(
    skill_name: str,
    state: TaskState,
    text: str,
    context_suffix: str,
    artifacts: Optional[List[Artifact]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Task:
    task_id = generate_id()
    context_id = make_context_id(skill_name, context_suffix)
    status = TaskStatus(
        state=state,
        message=create_info_message(text, context_id=context_id, task_id=task_id),
        timestamp=current_timestamp(),
    )
    return Task(
        id=task_id,
        context_id=context_id,
        status=status,
        artifacts=artifacts or None,
        metadata=metadata,
    )


def create_success_task(
    skill_name: str,
    artifacts: Optional[Iterable[Artifact]] = None,
    message: str = "Task completed successfully",
    context_suffix: str = "success",
) -> Task:
    """Build a ``completed`` Task.

    Args:
        skill_name: Name of the skill producing the task; prefixes the context id.
        artifacts: Durable outputs. An empty or missing sequence leaves
            ``artifacts`` unset, so the serialized task carries no key at all.
        message: Agent-authored completion text.
        context_suffix: Qualifier placed after the skill name in the context id.

    Returns:
        A new completed Task with a fresh id.
    """
    return _build_task(
        skill_name,
        TaskState.COMPLETED,
        message,
        context_suffix,
        artifacts=list(artifacts) if artifacts else None,
    )


def create_error_task(
    skill_name: str,
    error: Union[BaseException, str],
    context_suffix: str = "error",
) -> Task:
    """Build a ``failed`` Task whose message is the error's message.

    ``metadata["error"]`` always holds ``{name, message}`` and, for engine
    errors, the numeric ``code`` as well.
    """
    if isinstance(error, SkillEngineError):
        detail = error.error_detail()
    elif isinstance(error, BaseException):
        detail = ErrorDetail(name=type(error).__name__, message=str(error) or type(error).__name__)
    else:
        detail = ErrorDetail(name="Error", message=str(error))
    return _build_task(
        skill_name,
        TaskState.FAILED,
        detail.message,
        context_suffix,
        metadata={"error": detail.to_dict()},
    )


def create_input_required_task(
    skill_name: str,
    text: str,
    context_suffix: str = "input-required",
    metadata: Optional[Dict[str, Any]] = None,
) -> Task:
    """Build an ``input-required`` Task asking the caller to resubmit with more detail."""
    return _build_task(skill_name, TaskState.INPUT_REQUIRED, text, context_suffix, metadata=metadata)
