"""Exception hierarchy for Skill Engine.

Every error raised by the core is a ``SkillEngineError`` carrying a short
machine-readable ``name``, a JSON-RPC flavoured numeric ``code`` and a
human-readable ``message``. Failed tasks embed the same triple under
``metadata["error"]`` so callers never need to parse message text.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, List, Optional

from skill_engine.schemas.errors import ErrorDetail


class ErrorCode(IntEnum):
    """Numeric error codes shared with the JSON-RPC / A2A wire protocol."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    TASK_NOT_FOUND = -32001
    TASK_NOT_CANCELABLE = -32002
    PUSH_NOTIFICATION_NOT_SUPPORTED = -32003
    UNSUPPORTED_OPERATION = -32004
    CONTENT_TYPE_NOT_SUPPORTED = -32005
    INVALID_AGENT_RESPONSE = -32006


_KNOWN_CODES = {code.value for code in ErrorCode}


class SkillEngineError(Exception):
    """Base error for all Skill Engine failures."""

    def __init__(
        self,
        name: str,
        code: int,
        message: str,
        data: Any = None,
        task_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.name = name
        self.code = int(code)
        self.message = message
        self.data = data
        self.task_id = task_id

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, code={self.code}, message={self.message!r})"

    def to_jsonrpc_error(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error

    def to_a2a_error(self) -> Dict[str, Any]:
        """Like ``to_jsonrpc_error`` but restricted to codes the A2A protocol defines."""
        error = self.to_jsonrpc_error()
        if self.code not in _KNOWN_CODES:
            error["code"] = int(ErrorCode.INTERNAL_ERROR)
        return error

    def error_detail(self) -> ErrorDetail:
        return ErrorDetail(name=self.name, message=self.message, code=int(self.code))

    def to_detail(self) -> Dict[str, Any]:
        """Structured ``{name, message, code}`` stored on failed tasks."""
        return self.error_detail().to_dict()

    @classmethod
    def wrap(cls, exc: BaseException, message: Optional[str] = None) -> "SkillEngineError":
        """Convert a native exception into an ``InternalError`` (no-op for engine errors)."""
        if isinstance(exc, SkillEngineError):
            return exc
        text = message or str(exc) or type(exc).__name__
        return SkillEngineError(
            "InternalError",
            ErrorCode.INTERNAL_ERROR,
            text,
            data={"cause": type(exc).__name__},
        )

    # ===== Factories =====

    @staticmethod
    def parse_error(message: str = "Invalid JSON payload", data: Any = None) -> "SkillEngineError":
        return SkillEngineError("JSONParseError", ErrorCode.PARSE_ERROR, message, data)

    @staticmethod
    def invalid_request(message: str = "Request payload validation error", data: Any = None) -> "SkillEngineError":
        return SkillEngineError("InvalidRequestError", ErrorCode.INVALID_REQUEST, message, data)

    @staticmethod
    def method_not_found(method: str) -> "SkillEngineError":
        return SkillEngineError("MethodNotFoundError", ErrorCode.METHOD_NOT_FOUND, f"Method not found: {method}")

    @staticmethod
    def invalid_params(message: str = "Invalid parameters", data: Any = None) -> "SkillEngineError":
        return SkillEngineError("InvalidParamsError", ErrorCode.INVALID_PARAMS, message, data)

    @staticmethod
    def internal_error(message: str = "Internal error", data: Any = None) -> "SkillEngineError":
        return SkillEngineError("InternalError", ErrorCode.INTERNAL_ERROR, message, data)

    @staticmethod
    def task_not_found(task_id: str) -> "SkillEngineError":
        return SkillEngineError(
            "TaskNotFoundError", ErrorCode.TASK_NOT_FOUND, f"Task not found: {task_id}", task_id=task_id
        )

    @staticmethod
    def task_not_cancelable(task_id: str) -> "SkillEngineError":
        return SkillEngineError(
            "TaskNotCancelableError", ErrorCode.TASK_NOT_CANCELABLE, f"Task not cancelable: {task_id}", task_id=task_id
        )

    @staticmethod
    def push_notification_not_supported() -> "SkillEngineError":
        return SkillEngineError(
            "PushNotificationNotSupportedError",
            ErrorCode.PUSH_NOTIFICATION_NOT_SUPPORTED,
            "Push Notification is not supported",
        )

    @staticmethod
    def unsupported_operation(operation: str) -> "SkillEngineError":
        return SkillEngineError(
            "UnsupportedOperationError",
            ErrorCode.UNSUPPORTED_OPERATION,
            f"This operation is not supported: {operation}",
        )

    @staticmethod
    def content_type_not_supported(message: str = "Incompatible content types") -> "SkillEngineError":
        return SkillEngineError("ContentTypeNotSupportedError", ErrorCode.CONTENT_TYPE_NOT_SUPPORTED, message)

    @staticmethod
    def invalid_agent_response(message: str = "Invalid agent response") -> "SkillEngineError":
        return SkillEngineError("InvalidAgentResponseError", ErrorCode.INVALID_AGENT_RESPONSE, message)


class UnsupportedSchemaError(SkillEngineError):
    """Raised when a skill input schema cannot be mapped to a MIME type."""

    def __init__(self, skill_name: str, schema_type: str) -> None:
        super().__init__(
            "UnsupportedSchemaError",
            ErrorCode.UNSUPPORTED_OPERATION,
            f'Skill "{skill_name}": {schema_type} not supported',
            data={"skill": skill_name, "schemaType": schema_type},
        )


class RemoteToolError(SkillEngineError):
    """A remote tool answered with ``isError: true``; the message is the remote text."""

    def __init__(self, message: str) -> None:
        super().__init__("RemoteToolError", ErrorCode.INTERNAL_ERROR, message)


class UnexpectedTextResponseError(SkillEngineError):
    """A JSON payload was expected but the remote returned plain text."""

    def __init__(self, text: str) -> None:
        preview = text if len(text) <= 200 else text[:200] + "..."
        super().__init__(
            "UnexpectedTextResponseError",
            ErrorCode.INVALID_AGENT_RESPONSE,
            f"Expected JSON content but received plain text: {preview}",
            data={"text": text},
        )


class ResponseValidationError(SkillEngineError):
    """A remote payload failed validation against the expected schema."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(
            "ResponseValidationError",
            ErrorCode.INVALID_AGENT_RESPONSE,
            message,
            data={"errors": errors or []},
        )


class ConfigLoadError(SkillEngineError):
    """Raised when runtime configuration or startup context cannot be loaded."""

    def __init__(self, message: str, data: Any = None) -> None:
        super().__init__("ConfigLoadError", ErrorCode.INVALID_REQUEST, message, data)
