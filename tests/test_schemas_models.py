"""Tests for the wire schemas."""

import pytest
from pydantic import ValidationError

from skill_engine.schemas import (
    Artifact,
    CallToolResult,
    DataPart,
    EmbeddedResource,
    Message,
    Role,
    Task,
    TaskAndHistory,
    TaskState,
    TaskStatus,
    TextContent,
    TextPart,
    TransactionArtifact,
    TransactionPlan,
)


def _task(**overrides) -> Task:
    payload = {
        "id": "task-1",
        "contextId": "lending-success-1-abcdef",
        "status": {"state": "completed", "timestamp": "2025-01-01T00:00:00+00:00"},
    }
    payload.update(overrides)
    return Task.model_validate(payload)


class TestParts:
    def test_part_union_branches_on_kind(self) -> None:
        """Parts are parsed into the model selected by their kind."""
        message = Message.model_validate(
            {
                "messageId": "m1",
                "role": "agent",
                "parts": [{"kind": "text", "text": "hi"}, {"kind": "data", "data": {"a": 1}}],
            }
        )

        assert isinstance(message.parts[0], TextPart)
        assert isinstance(message.parts[1], DataPart)
        assert message.role == Role.AGENT

    def test_unknown_part_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Message.model_validate({"messageId": "m1", "role": "agent", "parts": [{"kind": "file"}]})

    def test_message_text_joins_text_parts(self) -> None:
        message = Message(message_id="m1", role=Role.USER, parts=[TextPart(text="a"), DataPart(data={}), TextPart(text="b")])

        assert message.text() == "ab"


class TestTask:
    def test_serializes_with_camel_case_keys(self) -> None:
        """Models serialize with camelCase wire keys."""
        data = _task().to_dict()

        assert data["kind"] == "task"
        assert data["contextId"] == "lending-success-1-abcdef"
        assert data["status"]["state"] == "completed"
        assert "artifacts" not in data
        assert "metadata" not in data

    def test_from_dict_round_trip(self) -> None:
        task = _task(metadata={"error": {"name": "X", "message": "y"}})

        assert Task.from_dict(task.to_dict()).to_dict() == task.to_dict()

    def test_tasks_are_frozen(self) -> None:
        """Tasks cannot be modified after creation."""
        task = _task()

        with pytest.raises(ValidationError):
            task.status = TaskStatus(state=TaskState.FAILED)

    def test_with_status_returns_new_task(self) -> None:
        """Changing the status returns a new task."""
        task = _task(status={"state": "working"})

        done = task.with_status(TaskState.COMPLETED)

        assert task.state == TaskState.WORKING
        assert done.state == TaskState.COMPLETED
        assert done.id == task.id
        assert done is not task

    def test_is_terminal(self) -> None:
        assert _task().is_terminal()
        assert not _task(status={"state": "input-required"}).is_terminal()

    def test_error_detail(self) -> None:
        detail = {"name": "TokenNotFound", "message": "nope", "code": -32602}

        assert _task(metadata={"error": detail}).error_detail() == detail
        assert _task().error_detail() is None

    def test_invalid_state_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _task(status={"state": "cancelled-ish"})

    def test_task_and_history_defaults_to_empty_history(self) -> None:
        assert TaskAndHistory(task=_task()).history == []


class TestArtifacts:
    def test_artifact_data_parts(self) -> None:
        artifact = Artifact(artifact_id="a1", parts=[DataPart(data={"x": 1}), TextPart(text="t")], name="positions")

        assert artifact.data_parts() == [{"x": 1}]
        assert artifact.to_dict()["artifactId"] == "a1"

    def test_transaction_artifact_uses_wire_keys(self) -> None:
        body = TransactionArtifact[dict](
            tx_plan=[TransactionPlan(to="0xabc", data="0x01", chain_id="42161")],
            tx_preview={"action": "borrow"},
        )

        assert body.to_dict() == {
            "txPlan": [{"to": "0xabc", "data": "0x01", "value": "0", "chainId": "42161"}],
            "txPreview": {"action": "borrow"},
        }


class TestCallToolResult:
    def test_content_union_branches_on_type(self) -> None:
        """Tool result content is parsed by its type field."""
        result = CallToolResult.model_validate(
            {
                "content": [
                    {"type": "text", "text": "hello"},
                    {"type": "resource", "resource": {"uri": "tag:x,2025-01-01:1", "mimeType": "application/json", "text": "{}"}},
                ],
                "isError": False,
            }
        )

        assert isinstance(result.content[0], TextContent)
        assert isinstance(result.content[1], EmbeddedResource)
        assert result.content[1].resource.mime_type == "application/json"

    def test_empty_envelope_is_valid(self) -> None:
        result = CallToolResult.model_validate({})

        assert result.content == []
        assert result.structured_content is None
        assert result.is_error is None
