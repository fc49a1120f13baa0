"""Remote tool call contracts and response parsing."""

from .client import RemoteClient, RemoteConnector, call_remote_tool
from .responses import (
    create_mcp_a2a_response,
    create_mcp_error_response,
    create_mcp_text_response,
    parse_a2a_response,
    parse_mcp_tool_response_payload,
    parse_mcp_tool_response_text,
    to_tag_uri_authority,
)

__all__ = [
    "RemoteClient",
    "RemoteConnector",
    "call_remote_tool",
    "parse_mcp_tool_response_payload",
    "parse_mcp_tool_response_text",
    "parse_a2a_response",
    "to_tag_uri_authority",
    "create_mcp_a2a_response",
    "create_mcp_error_response",
    "create_mcp_text_response",
]
