"""Wire shapes of a remote tool call result (the MCP ``CallToolResult``)."""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import Field

from .base import SchemaBase


class TextContent(SchemaBase):
    type: Literal["text"] = "text"
    text: str


class ResourceContents(SchemaBase):
    uri: str
    mime_type: Optional[str] = None
    text: Optional[str] = None


class EmbeddedResource(SchemaBase):
    type: Literal["resource"] = "resource"
    resource: ResourceContents


ContentItem = Annotated[Union[TextContent, EmbeddedResource], Field(discriminator="type")]


class CallToolResult(SchemaBase):
    """Envelope returned by a remote tool: content items plus optional structured payload."""

    content: List[ContentItem] = Field(default_factory=list)
    structured_content: Optional[Any] = None
    is_error: Optional[bool] = None
