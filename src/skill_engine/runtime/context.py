"""Per-invocation context passed explicitly to every hook and tool.

An ``AgentContext`` is built once per incoming request and discarded when
the invocation completes. It bundles the tool's validated arguments, the
enclosing skill's validated input, the shared ``custom`` state loaded at
agent startup, and the remote clients the skill may call. Nothing here is
global: deep call chains receive the context as an argument.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from skill_engine.exceptions import ConfigLoadError, SkillEngineError
from skill_engine.remote.client import RemoteClient, call_remote_tool

CustomT = TypeVar("CustomT")
SkillInputT = TypeVar("SkillInputT")


@dataclass(frozen=True)
class AgentContext(Generic[CustomT, SkillInputT]):
    """Context threaded through a single skill invocation.

    ``custom`` is shared across concurrent invocations; hooks read it but
    never replace or mutate it. ``cancel_event`` is an optional signal an
    embedding transport may set when the caller goes away; the core does
    not act on it.
    """

    custom: CustomT
    skill_input: SkillInputT
    args: Dict[str, Any] = field(default_factory=dict)
    remote_clients: Mapping[str, RemoteClient] = field(default_factory=dict)
    call_timeout: Optional[float] = None
    skill_name: str = "skill"
    cancel_event: Optional[asyncio.Event] = None

    def with_args(self, args: Mapping[str, Any]) -> "AgentContext[CustomT, SkillInputT]":
        return replace(self, args=dict(args))

    def remote_client(self, name: str) -> RemoteClient:
        client = self.remote_clients.get(name)
        if client is None:
            raise SkillEngineError.internal_error(
                f"No remote client named '{name}' is available to skill {self.skill_name}"
            )
        return client

    async def call_remote_tool(self, server: str, tool_name: str, arguments: Mapping[str, Any]) -> Any:
        """Call ``tool_name`` on the ``server`` client with this context's timeout."""
        return await call_remote_tool(self.remote_client(server), tool_name, dict(arguments), timeout=self.call_timeout)

    def skill_input_value(self, key: str, default: Any = None) -> Any:
        source = self.skill_input
        if isinstance(source, Mapping):
            return source.get(key, default)
        return getattr(source, key, default)

    def custom_value(self, key: str, default: Any = None) -> Any:
        source = self.custom
        if isinstance(source, Mapping):
            return source.get(key, default)
        return getattr(source, key, default)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


def validate_custom_context(custom: Any, schema: Any = None) -> Any:
    """Check the shared custom context once, at startup.

    Args:
        custom: Value produced by the agent's context provider.
        schema: Optional pydantic model class or plain type the value must
            satisfy. Mappings are validated into the model.

    Returns:
        The validated custom context.

    Raises:
        ConfigLoadError: The value does not satisfy ``schema``.
    """
    if schema is None:
        return custom
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        if isinstance(custom, schema):
            return custom
        try:
            return schema.model_validate(custom)
        except ValidationError as exc:
            raise ConfigLoadError(
                f"Custom context failed validation against {schema.__name__}",
                data={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
            ) from None
    if isinstance(schema, type) and not isinstance(custom, schema):
        raise ConfigLoadError(
            f"Custom context must be {schema.__name__}, got {type(custom).__name__}"
        )
    return custom
