"""Schema exports."""

from .agent_card import AgentCard, AgentSkill
from .artifact import Artifact
from .base import SchemaBase
from .errors import ErrorDetail
from .message import DataPart, Message, Part, Role, TextPart
from .remote import CallToolResult, ContentItem, EmbeddedResource, ResourceContents, TextContent
from .task import TERMINAL_STATES, Task, TaskAndHistory, TaskState, TaskStatus
from .transaction import TransactionArtifact, TransactionPlan, TransactionPlanResponse

__all__ = [
    "SchemaBase",
    "Role",
    "TextPart",
    "DataPart",
    "Part",
    "Message",
    "Artifact",
    "TaskState",
    "TERMINAL_STATES",
    "TaskStatus",
    "Task",
    "TaskAndHistory",
    "ErrorDetail",
    "TextContent",
    "ResourceContents",
    "EmbeddedResource",
    "ContentItem",
    "CallToolResult",
    "AgentSkill",
    "AgentCard",
    "TransactionPlan",
    "TransactionPlanResponse",
    "TransactionArtifact",
]
