"""Tool definitions and the invocation boundary that executes them."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from skill_engine.exceptions import SkillEngineError
from skill_engine.runtime.context import AgentContext
from skill_engine.runtime.task_factory import TerminalResult, create_error_task, is_terminal_result

logger = logging.getLogger(__name__)

ToolExecute = Callable[[Dict[str, Any], AgentContext], Any]


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def summarize_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(item) for item in error.get("loc", ())) or "input"
        parts.append(f"{location}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


@dataclass(frozen=True)
class ToolDefinition:
    """The unit of executable capability inside a skill.

    ``parameters`` is a pydantic model class describing the arguments.
    ``execute`` receives the validated arguments as a plain dict together with
    the invocation context and returns a Task, a Message, or a raw
    intermediate result that an after-hook turns into one.
    """

    name: str
    description: str
    parameters: Type[BaseModel]
    execute: ToolExecute

    def parse_args(self, raw: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Validate raw arguments, returning a new dict keyed by field name."""
        return self.parameters.model_validate(dict(raw or {})).model_dump()

    def parameters_schema(self) -> Dict[str, Any]:
        return self.parameters.model_json_schema(by_alias=True)


@dataclass(frozen=True)
class BoundTool:
    """A tool bound to an invocation context, as handed to an orchestrator."""

    name: str
    description: str
    parameters_schema: Dict[str, Any]
    invoke: Callable[[Dict[str, Any]], Awaitable[TerminalResult]]


class ToolRuntime:
    """Execute tools so that every call terminates in a Task or Message.

    Validation failures, engine errors and unexpected exceptions raised by a
    tool are all converted to failed tasks here. Unexpected exceptions are
    logged with their traceback; callers only see the failed task.
    """

    def __init__(self, tools: Iterable[ToolDefinition], skill_name: str) -> None:
        self.tools: Dict[str, ToolDefinition] = {tool.name: tool for tool in tools}
        self.skill_name = skill_name

    async def invoke(
        self,
        tool_name: str,
        raw_args: Optional[Mapping[str, Any]],
        context: AgentContext,
    ) -> TerminalResult:
        tool = self.tools.get(tool_name)
        if tool is None:
            return create_error_task(self.skill_name, SkillEngineError.method_not_found(tool_name))

        try:
            args = tool.parse_args(raw_args)
        except ValidationError as exc:
            return create_error_task(
                self.skill_name,
                SkillEngineError.invalid_params(
                    f"Invalid arguments for tool {tool_name}: {summarize_validation_error(exc)}"
                ),
            )

        try:
            result = await maybe_await(tool.execute(args, context.with_args(args)))
        except SkillEngineError as exc:
            logger.warning("Tool %s in skill %s failed: %s", tool_name, self.skill_name, exc)
            return create_error_task(self.skill_name, exc)
        except Exception as exc:
            logger.exception("Unexpected error in tool %s of skill %s", tool_name, self.skill_name)
            return create_error_task(
                self.skill_name,
                SkillEngineError.internal_error(f"Tool {tool_name} failed: {exc}"),
            )

        if not is_terminal_result(result):
            return create_error_task(
                self.skill_name,
                SkillEngineError.invalid_agent_response(
                    f"Tool {tool_name} returned {type(result).__name__} instead of a Task or Message"
                ),
            )
        return result

    def bind(self, context: AgentContext) -> List[BoundTool]:
        """Bind every tool to ``context`` so an orchestrator can call them by name."""
        bound = []
        for tool in self.tools.values():

            async def invoke(raw_args: Dict[str, Any], _name: str = tool.name) -> TerminalResult:
                return await self.invoke(_name, raw_args, context)

            bound.append(
                BoundTool(
                    name=tool.name,
                    description=tool.description,
                    parameters_schema=tool.parameters_schema(),
                    invoke=invoke,
                )
            )
        return bound
