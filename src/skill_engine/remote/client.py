"""Remote tool client contracts.

The core never implements a transport. It consumes anything that can call a
named remote tool with arguments and hand back a raw ``CallToolResult``-shaped
response. Transport failures (connection refused, timeouts) are raised by the
client and propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol

if TYPE_CHECKING:
    from skill_engine.runtime.skill import RemoteServerConfig

logger = logging.getLogger(__name__)


class RemoteClient(Protocol):
    """Connected handle to one remote tool server."""

    async def call_tool(
        self,
        name: str,
        arguments: Dict[str, Any],
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        ...


class RemoteConnector(Protocol):
    """Opens remote clients for the servers a skill declares."""

    async def connect(self, server: "RemoteServerConfig", client_name: str) -> RemoteClient:
        ...


async def call_remote_tool(
    client: RemoteClient,
    name: str,
    arguments: Dict[str, Any],
    timeout: Optional[float] = None,
) -> Any:
    """Invoke ``name`` on ``client`` passing the per-call timeout through."""
    logger.debug("Calling remote tool %s (timeout=%s)", name, timeout)
    return await client.call_tool(name, dict(arguments), timeout=timeout)


async def close_client(client: Any) -> None:
    """Close a client if it exposes ``close``; sync or async."""
    close = getattr(client, "close", None)
    if close is None:
        return
    result = close()
    if hasattr(result, "__await__"):
        await result
