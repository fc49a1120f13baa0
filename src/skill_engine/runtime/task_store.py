"""Durable storage for task and message-history pairs.

Two backends share the ``TaskStore`` contract:

- ``InMemoryTaskStore`` keeps deep copies in a dict (tests, single process).
- ``FileTaskStore`` writes ``<dir>/<id>.json`` and ``<dir>/<id>.history.json``.

Both return copies from ``load`` so callers can never reach internal state.
Concurrent calls for different task ids are safe; the store provides no
per-task locking for concurrent writes to the same id.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import uuid4

from pydantic import ValidationError

from skill_engine.exceptions import SkillEngineError
from skill_engine.schemas import Message, Task, TaskAndHistory
from skill_engine.utils.filesystem_safety import task_file_path
from skill_engine.utils.json_io import prepare_json_atomic, read_json_safe

logger = logging.getLogger(__name__)

DEFAULT_TASK_DIR = ".a2a-tasks"
TASK_SUFFIX = ".json"
HISTORY_SUFFIX = ".history.json"


class TaskStore(ABC):
    """Persistence contract for ``TaskAndHistory`` pairs keyed by task id."""

    @abstractmethod
    async def save(self, data: TaskAndHistory) -> None:
        """Store ``data``, replacing any existing entry for its task id."""

    @abstractmethod
    async def load(self, task_id: str) -> Optional[TaskAndHistory]:
        """Return the stored pair, or None when the task is unknown."""


class InMemoryTaskStore(TaskStore):
    """Dict-backed store. Values are deep-copied on the way in and out."""

    def __init__(self) -> None:
        self._entries: Dict[str, TaskAndHistory] = {}

    async def save(self, data: TaskAndHistory) -> None:
        self._entries[data.task.id] = data.model_copy(deep=True)

    async def load(self, task_id: str) -> Optional[TaskAndHistory]:
        entry = self._entries.get(task_id)
        if entry is None:
            return None
        return entry.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._entries)


class FileTaskStore(TaskStore):
    """One JSON file per task plus one per history, in ``directory``.

    Writes stage both files as temporaries first and then rename them into
    place, history before task, so a loader never sees a task without the
    history it was saved with. If the task rename fails the previous history
    is restored, leaving the earlier pair intact. File I/O runs in a worker
    thread to keep the event loop responsive.
    """

    def __init__(self, directory: Union[str, Path] = DEFAULT_TASK_DIR) -> None:
        self.directory = Path(directory)

    def _paths(self, task_id: str) -> Tuple[Path, Path]:
        return (
            task_file_path(self.directory, task_id, TASK_SUFFIX),
            task_file_path(self.directory, task_id, HISTORY_SUFFIX),
        )

    async def save(self, data: TaskAndHistory) -> None:
        task_path, history_path = self._paths(data.task.id)
        task_payload = data.task.to_dict()
        history_payload = {"messageHistory": [message.to_dict() for message in data.history]}
        try:
            await asyncio.to_thread(self._write_pair, task_path, task_payload, history_path, history_payload)
        except OSError as exc:
            raise SkillEngineError.internal_error(
                f"Failed to save task {data.task.id}: {exc}", data={"taskId": data.task.id}
            ) from exc
        logger.debug("Saved task %s to %s", data.task.id, task_path)

    @staticmethod
    def _write_pair(
        task_path: Path,
        task_payload: Dict[str, Any],
        history_path: Path,
        history_payload: Dict[str, Any],
    ) -> None:
        staged_history = prepare_json_atomic(history_path, history_payload)
        try:
            staged_task = prepare_json_atomic(task_path, task_payload)
        except BaseException:
            staged_history.unlink(missing_ok=True)
            raise

        # The previous history is kept until the task rename succeeds so a
        # failed save can put the old pair back.
        previous_history = history_path.with_name(f".{history_path.name}.{uuid4().hex}.prev")
        had_history = history_path.exists()
        history_replaced = False
        try:
            if had_history:
                shutil.copyfile(history_path, previous_history)
            os.replace(staged_history, history_path)
            history_replaced = True
            os.replace(staged_task, task_path)
        except BaseException:
            if history_replaced:
                if had_history:
                    os.replace(previous_history, history_path)
                else:
                    history_path.unlink(missing_ok=True)
            for leftover in (staged_history, staged_task, previous_history):
                leftover.unlink(missing_ok=True)
            raise
        previous_history.unlink(missing_ok=True)

    async def load(self, task_id: str) -> Optional[TaskAndHistory]:
        task_path, history_path = self._paths(task_id)
        return await asyncio.to_thread(self._read_pair, task_id, task_path, history_path)

    def _read_pair(self, task_id: str, task_path: Path, history_path: Path) -> Optional[TaskAndHistory]:
        if not task_path.exists():
            return None
        payload, error = read_json_safe(task_path)
        if error:
            if not task_path.exists():
                # Deleted between the existence check and the read.
                return None
            raise SkillEngineError.internal_error(
                f"Failed to read task {task_id}: {error}", data={"taskId": task_id}
            )
        try:
            task = Task.model_validate(payload)
        except ValidationError as exc:
            raise SkillEngineError.internal_error(
                f"Stored task {task_id} is malformed",
                data={"taskId": task_id, "errors": exc.errors(include_url=False, include_context=False, include_input=False)},
            ) from None
        if task.id != task_id:
            raise SkillEngineError.internal_error(
                f"Stored task id {task.id} does not match file for {task_id}", data={"taskId": task_id}
            )
        return TaskAndHistory(task=task, history=self._read_history(task_id, history_path))

    @staticmethod
    def _read_history(task_id: str, history_path: Path) -> List[Message]:
        if not history_path.exists():
            logger.debug("No history file for task %s; using empty history", task_id)
            return []
        payload, error = read_json_safe(history_path)
        if error:
            logger.warning("Unreadable history for task %s, using empty history: %s", task_id, error)
            return []
        if not isinstance(payload, dict) or not isinstance(payload.get("messageHistory"), list):
            logger.warning("Malformed history for task %s, using empty history", task_id)
            return []
        try:
            return [Message.model_validate(item) for item in payload["messageHistory"]]
        except ValidationError as exc:
            logger.warning("Invalid message in history for task %s, using empty history: %s", task_id, exc)
            return []
