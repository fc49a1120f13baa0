"""Utility modules for Skill Engine."""

from .filesystem_safety import (
    sanitize_task_id,
    task_file_path,
    validate_path_traversal,
)

from .json_io import (
    prepare_json_atomic,
    read_json_safe,
    write_json_atomic,
)

from .logging_utils import configure_logging

__all__ = [
    # Filesystem safety utils
    "validate_path_traversal",
    "sanitize_task_id",
    "task_file_path",
    # JSON I/O utils
    "read_json_safe",
    "prepare_json_atomic",
    "write_json_atomic",
    # Logging
    "configure_logging",
]
