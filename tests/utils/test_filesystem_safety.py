"""Tests for filesystem safety utilities."""

import pytest
from pathlib import Path
import tempfile
from skill_engine.exceptions import SkillEngineError
from skill_engine.utils.filesystem_safety import (
    sanitize_task_id,
    task_file_path,
    validate_path_traversal,
)


@pytest.fixture
def temp_workspace():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def test_validate_path_traversal_safe(temp_workspace):
    is_valid, error, path = validate_path_traversal(temp_workspace, "task-1.json")

    assert is_valid is True
    assert error is None
    assert path == temp_workspace.resolve() / "task-1.json"


def test_validate_path_traversal_escape_dotdot(temp_workspace):
    """Test that dot-dot segments cannot escape the base directory."""
    is_valid, error, path = validate_path_traversal(temp_workspace, "../../etc/passwd")

    assert is_valid is False
    assert "Path traversal" in error
    assert path is None


def test_validate_path_traversal_absolute(temp_workspace):
    is_valid, error, path = validate_path_traversal(temp_workspace, "/etc/passwd")

    assert is_valid is False
    assert path is None


@pytest.mark.parametrize("task_id", ["abc", "0f8fad5b-d9cb-469f-a165-70867728950e", "task.v2"])
def test_sanitize_task_id_accepts_plain_ids(task_id):
    assert sanitize_task_id(task_id) == task_id


@pytest.mark.parametrize("task_id", ["", "..", "../x", "a/b", "a\\b", "bad\x00id", "/etc/passwd"])
def test_sanitize_task_id_rejects_unsafe_ids(task_id):
    """Test that ids with separators or leading dots are rejected."""
    with pytest.raises(SkillEngineError) as exc_info:
        sanitize_task_id(task_id)

    assert exc_info.value.name == "InvalidParamsError"
    assert exc_info.value.message.startswith("Invalid Task ID format:")


def test_task_file_path_appends_suffix(temp_workspace):
    path = task_file_path(temp_workspace, "abc", ".history.json")

    assert path.name == "abc.history.json"
    assert path.parent == temp_workspace.resolve()


def test_task_file_path_rejects_traversal(temp_workspace):
    """Test that task paths stay inside the store directory."""
    with pytest.raises(SkillEngineError):
        task_file_path(temp_workspace, "../outside", ".json")
