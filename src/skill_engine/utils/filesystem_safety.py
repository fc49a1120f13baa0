"""Filesystem safety utilities for Skill Engine.

Task ids reach the filesystem as file names in the task store. These helpers
reject any id that could address a path outside the store directory before a
single filesystem call is made.

Design principles:
- Reject, never rewrite: an altered id is an error, not a silent fix
- Validate the id itself first, then confirm the resolved path stays inside the root
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Tuple

from skill_engine.exceptions import SkillEngineError


def validate_path_traversal(
    root: Path,
    target_path: str
) -> Tuple[bool, Optional[str], Optional[Path]]:
    """Validate that a target path does not escape ``root``.

    Args:
        root: Base directory.
        target_path: Target path to validate (relative to ``root``).

    Returns:
        Tuple of (is_valid, error_message, resolved_path):
        - is_valid: True if path is safe, False otherwise.
        - error_message: Human-readable error message if invalid, None if valid.
        - resolved_path: Resolved Path object if valid, None if invalid.

    Examples:
        >>> is_valid, err, path = validate_path_traversal(Path("/tasks"), "abc.json")
        >>> is_valid, err, path = validate_path_traversal(Path("/tasks"), "../../etc/passwd")
        >>> err  # Path traversal detected: ../../etc/passwd escapes /tasks
    """
    try:
        base = root.resolve()
        candidate = (base / target_path).resolve()
        # Raises ValueError if candidate is not within base
        candidate.relative_to(base)
        return True, None, candidate
    except ValueError:
        return False, f"Path traversal detected: {target_path} escapes {root}", None
    except OSError as e:
        return False, f"Invalid path: {str(e)}", None


def sanitize_task_id(task_id: str) -> str:
    """Return ``task_id`` unchanged if it is safe to use as a file name.

    Raises:
        SkillEngineError: ``InvalidParamsError`` when the id is empty, contains
            ``..``, a path separator or a NUL byte, or when its base name
            differs from the id itself.
    """
    if (
        not isinstance(task_id, str)
        or not task_id
        or ".." in task_id
        or "\x00" in task_id
        or "/" in task_id
        or "\\" in task_id
        or os.path.basename(task_id) != task_id
    ):
        raise SkillEngineError.invalid_params(f"Invalid Task ID format: {task_id}")
    return task_id


def task_file_path(root: Path, task_id: str, suffix: str) -> Path:
    """Resolve ``<root>/<task_id><suffix>`` after sanitizing the id."""
    safe_id = sanitize_task_id(task_id)
    is_valid, error, path = validate_path_traversal(root, f"{safe_id}{suffix}")
    if not is_valid or path is None:
        raise SkillEngineError.invalid_params(error or f"Invalid Task ID format: {task_id}")
    return path


__all__ = ["validate_path_traversal", "sanitize_task_id", "task_file_path"]
