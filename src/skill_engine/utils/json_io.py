"""JSON I/O utilities for Skill Engine.

Reads report failures as ``(value, error_message)`` tuples so callers can
decide whether a bad file is fatal. Writes go through a temporary file in
the destination directory followed by ``os.replace``, so a reader never
observes a half-written file.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Tuple


def read_json_safe(
    path: Path,
    default: Any = None,
    encoding: str = "utf-8"
) -> Tuple[Any, Optional[str]]:
    """Read JSON content safely, returning data and optional error message.

    Args:
        path: Path to the JSON file to read.
        default: Value returned when reading or parsing fails.
        encoding: Text encoding for file read.

    Returns:
        Tuple of (data, error_message). ``error_message`` is None on success.
    """
    try:
        payload = path.read_text(encoding=encoding)
    except FileNotFoundError:
        return default, f"JSON file not found: {path}"
    except OSError as exc:
        return default, f"Cannot read {path}: {exc}"

    try:
        return json.loads(payload), None
    except json.JSONDecodeError as exc:
        return default, f"Failed to parse JSON at {path}: {exc}"


def prepare_json_atomic(
    path: Path,
    data: Any,
    indent: int = 2,
    encoding: str = "utf-8",
) -> Path:
    """Write ``data`` to a temporary sibling of ``path`` and return the temp path.

    The caller publishes it with ``os.replace(temp, path)``. Splitting the two
    steps lets several files be staged before any of them becomes visible.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            json.dump(data, handle, indent=indent, ensure_ascii=False)
            handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
    return Path(temp_name)


def write_json_atomic(
    path: Path,
    data: Any,
    indent: int = 2,
    encoding: str = "utf-8",
) -> None:
    """Write pretty-printed JSON to ``path`` via write-temp-then-rename."""
    temp = prepare_json_atomic(path, data, indent=indent, encoding=encoding)
    try:
        os.replace(temp, path)
    except BaseException:
        temp.unlink(missing_ok=True)
        raise


__all__ = ["read_json_safe", "prepare_json_atomic", "write_json_atomic"]
