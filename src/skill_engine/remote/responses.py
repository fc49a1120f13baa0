"""Parsing of remote tool responses and construction of transport envelopes.

Remote tool servers are outside our control and may answer with plain text,
an embedded JSON resource or structured content. Everything here funnels
those shapes through one validated boundary so callers either get a typed
payload or a ``SkillEngineError`` describing exactly what went wrong.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Annotated, Any, NoReturn, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from skill_engine.exceptions import (
    RemoteToolError,
    ResponseValidationError,
    UnexpectedTextResponseError,
)
from skill_engine.runtime.task_factory import TerminalResult, generate_id
from skill_engine.schemas import (
    CallToolResult,
    EmbeddedResource,
    Message,
    ResourceContents,
    Task,
    TextContent,
)

T = TypeVar("T")

JSON_MIME_TYPE = "application/json"

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")

_TerminalShape = Annotated[Union[Task, Message], Field(discriminator="kind")]


def _coerce_result(raw: Any) -> CallToolResult:
    if isinstance(raw, CallToolResult):
        return raw
    if isinstance(raw, BaseModel):
        # Results from other MCP client libraries arrive as their own models.
        raw = raw.model_dump(by_alias=True)
    try:
        return CallToolResult.model_validate(raw)
    except ValidationError as exc:
        raise ResponseValidationError(
            "Remote response does not match the tool result envelope",
            exc.errors(include_url=False, include_context=False, include_input=False),
        ) from None


def _first_text(result: CallToolResult) -> Optional[str]:
    for item in result.content:
        if isinstance(item, TextContent):
            return item.text
    return None


def _first_payload_text(result: CallToolResult) -> Optional[str]:
    for item in result.content:
        if isinstance(item, TextContent):
            return item.text
        if isinstance(item, EmbeddedResource) and item.resource.text is not None:
            return item.resource.text
    return None


def _raise_remote_error(result: CallToolResult) -> NoReturn:
    text = _first_text(result)
    if text is None:
        raise RemoteToolError("Remote tool returned an error without content")
    raise RemoteToolError(text)


def _validate(payload: Any, schema: Any) -> Any:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as exc:
        schema_name = getattr(schema, "__name__", repr(schema))
        raise ResponseValidationError(
            f"Remote payload failed validation against {schema_name}",
            exc.errors(include_url=False, include_context=False, include_input=False),
        ) from None


def parse_mcp_tool_response_payload(raw: Any, schema: Type[T]) -> T:
    """Validate a remote tool response and return its payload typed as ``schema``.

    Args:
        raw: The raw response (a ``CallToolResult`` or its dict form).
        schema: Any type pydantic can validate against: a model class,
            ``Dict[str, Any]``, a ``TypedDict`` and so on.

    Returns:
        The validated payload.

    Raises:
        ResponseValidationError: The envelope or payload does not validate.
        RemoteToolError: The response has ``isError`` set; the error message
            is exactly the remote's first text item.
        UnexpectedTextResponseError: The response carries plain text where
            JSON was expected.
    """
    result = _coerce_result(raw)
    if result.is_error:
        _raise_remote_error(result)

    if result.structured_content is not None:
        return _validate(result.structured_content, schema)

    text = _first_payload_text(result)
    if text is None:
        raise ResponseValidationError("Remote tool response has no content to parse")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        raise UnexpectedTextResponseError(text) from None
    return _validate(payload, schema)


def parse_mcp_tool_response_text(raw: Any) -> str:
    """Return the first text item of a remote response, raising on error responses."""
    result = _coerce_result(raw)
    if result.is_error:
        _raise_remote_error(result)
    text = _first_text(result)
    if text is None:
        raise ResponseValidationError("Remote tool response has no text content")
    return text


def parse_a2a_response(raw: Any) -> TerminalResult:
    """Recover the Task or Message wrapped by ``create_mcp_a2a_response``."""
    result = _coerce_result(raw)
    if result.is_error:
        _raise_remote_error(result)
    for item in result.content:
        if isinstance(item, EmbeddedResource) and item.resource.text is not None:
            if item.resource.mime_type not in (None, JSON_MIME_TYPE):
                continue
            try:
                payload = json.loads(item.resource.text)
            except json.JSONDecodeError:
                raise UnexpectedTextResponseError(item.resource.text) from None
            return _validate(payload, _TerminalShape)
    raise ResponseValidationError("Response does not contain an embedded task or message")


def to_tag_uri_authority(agent_id: str) -> str:
    """Derive a tag-URI authority: lowercase, non-alphanumeric runs become one hyphen.

    >>> to_tag_uri_authority("My Agent!! 2.0")
    'my-agent-2-0'
    """
    return _NON_ALNUM_RUN.sub("-", agent_id.lower()).strip("-")


def create_mcp_a2a_response(result: TerminalResult, agent_id: str) -> CallToolResult:
    """Wrap a Task or Message as an embedded JSON resource for the transport."""
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    uri = f"tag:{to_tag_uri_authority(agent_id)},{date}:{generate_id()}"
    return CallToolResult(
        content=[
            EmbeddedResource(
                resource=ResourceContents(
                    uri=uri,
                    mime_type=JSON_MIME_TYPE,
                    text=json.dumps(result.to_dict()),
                )
            )
        ]
    )


def create_mcp_error_response(message: str, error_name: Optional[str] = None) -> CallToolResult:
    text = f"[{error_name}]: {message}" if error_name else message
    return CallToolResult(is_error=True, content=[TextContent(text=text)])


def create_mcp_text_response(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(text=text)])
