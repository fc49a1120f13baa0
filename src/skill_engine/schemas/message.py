"""Message and content part schemas."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .base import SchemaBase


class Role(str, Enum):
    AGENT = "agent"
    USER = "user"


class TextPart(SchemaBase):
    kind: Literal["text"] = "text"
    text: str
    metadata: Optional[Dict[str, Any]] = None


class DataPart(SchemaBase):
    kind: Literal["data"] = "data"
    data: Dict[str, Any]
    metadata: Optional[Dict[str, Any]] = None


# Consumers branch on ``kind``; validation picks the variant from it directly.
Part = Annotated[Union[TextPart, DataPart], Field(discriminator="kind")]


class Message(SchemaBase):
    """A conversational turn that is not a task.

    Used for clarification requests and plain informational replies. A
    Message is a terminal alternative to a Task, never a Task subtype.
    """

    kind: Literal["message"] = "message"
    message_id: str
    role: Role
    parts: List[Part]
    context_id: Optional[str] = None
    task_id: Optional[str] = None
    reference_task_ids: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None

    def text(self) -> str:
        """Concatenate the text parts of this message."""
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))
