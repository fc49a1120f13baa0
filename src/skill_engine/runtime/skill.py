"""Skill definitions and their validation."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple, get_origin, is_typeddict

from pydantic import BaseModel, TypeAdapter, ValidationError

from skill_engine.exceptions import ErrorCode, SkillEngineError, UnsupportedSchemaError
from skill_engine.runtime.context import AgentContext
from skill_engine.runtime.task_factory import TerminalResult
from skill_engine.runtime.tool_runtime import ToolDefinition, summarize_validation_error

SkillHandler = Callable[[Any, AgentContext], Awaitable[TerminalResult]]

TEXT_MIME_TYPE = "text/plain"
JSON_MIME_TYPE = "application/json"


@dataclass(frozen=True)
class RemoteServerConfig:
    """A remote tool server a skill needs a client for."""

    name: str
    command: str = ""
    args: Tuple[str, ...] = ()
    env: Dict[str, str] = field(default_factory=dict)
    url: Optional[str] = None


@dataclass(frozen=True)
class SkillDefinition:
    """A named, externally invocable capability.

    A skill bundles its tools and input schema. When ``handler`` is set it is
    called directly with the validated input and context; otherwise the
    agent's orchestrator picks tools to satisfy the request.
    """

    id: str
    name: str
    description: str
    tags: Tuple[str, ...]
    examples: Tuple[str, ...]
    input_schema: Any
    tools: Tuple[ToolDefinition, ...]
    handler: Optional[SkillHandler] = None
    remote_servers: Tuple[RemoteServerConfig, ...] = ()

    @property
    def input_mime_type(self) -> str:
        return get_input_mime_type(self.input_schema, self.name)

    def validate_input(self, raw: Any) -> Any:
        """Validate a caller's arguments against the skill input schema.

        Raises:
            SkillEngineError: ``InputValidationError`` with a readable summary.
        """
        try:
            return TypeAdapter(self.input_schema).validate_python(raw)
        except ValidationError as exc:
            raise SkillEngineError(
                "InputValidationError",
                ErrorCode.INVALID_PARAMS,
                f"Invalid arguments for skill {self.name}: {summarize_validation_error(exc)}",
            ) from None


def get_input_mime_type(schema: Any, skill_name: str = "unknown") -> str:
    """Map a skill input schema to the MIME type advertised on the agent card.

    ``str`` maps to ``text/plain``. Pydantic models, ``TypedDict`` classes and
    list/dict types map to ``application/json``. Anything else (booleans,
    numbers, enums, literals) raises ``UnsupportedSchemaError``.
    """
    if schema is str:
        return TEXT_MIME_TYPE
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return JSON_MIME_TYPE
    if is_typeddict(schema):
        return JSON_MIME_TYPE
    if schema in (list, dict) or get_origin(schema) in (list, dict):
        return JSON_MIME_TYPE
    type_name = getattr(schema, "__name__", None) or repr(schema)
    raise UnsupportedSchemaError(skill_name, type_name)


def define_skill(
    *,
    id: str,
    name: str,
    description: str,
    tags: Sequence[str],
    examples: Sequence[str],
    input_schema: Any,
    tools: Sequence[ToolDefinition],
    handler: Optional[SkillHandler] = None,
    remote_servers: Sequence[RemoteServerConfig] = (),
) -> SkillDefinition:
    """Validate and build a ``SkillDefinition``.

    Raises:
        SkillEngineError: ``InvalidRequestError`` when the id is blank, or no
            tags, examples or tools are given, or tool names repeat.
        UnsupportedSchemaError: The input schema has no MIME mapping.
    """
    if not id or not id.strip():
        raise SkillEngineError.invalid_request(f'Skill "{name}" must have a non-empty id')
    if not tags:
        raise SkillEngineError.invalid_request(f'Skill "{name}" must have at least one tag')
    if not examples:
        raise SkillEngineError.invalid_request(f'Skill "{name}" must have at least one example')
    if not tools:
        raise SkillEngineError.invalid_request(f'Skill "{name}" must have at least one tool')

    tool_names = [tool.name for tool in tools]
    duplicates = sorted({tool_name for tool_name in tool_names if tool_names.count(tool_name) > 1})
    if duplicates:
        raise SkillEngineError.invalid_request(
            f'Skill "{name}" declares duplicate tools: {", ".join(duplicates)}'
        )

    get_input_mime_type(input_schema, name)

    return SkillDefinition(
        id=id,
        name=name,
        description=description,
        tags=tuple(tags),
        examples=tuple(examples),
        input_schema=input_schema,
        tools=tuple(tools),
        handler=handler,
        remote_servers=tuple(remote_servers),
    )


def format_tool_description_with_tags_and_examples(
    description: str,
    tags: Sequence[str],
    examples: Sequence[str],
) -> str:
    """Append escaped ``<tags>`` and ``<examples>`` blocks to a description."""
    tags_xml = "<tags>" + "".join(f"<tag>{html.escape(tag)}</tag>" for tag in tags) + "</tags>"
    examples_xml = (
        "<examples>" + "".join(f"<example>{html.escape(example)}</example>" for example in examples) + "</examples>"
    )
    return f"{description}\n\n{tags_xml}\n{examples_xml}"


def generate_system_prompt_for_skill(skill: SkillDefinition, base_prompt: Optional[str] = None) -> str:
    example_prompts = "\n".join(
        f"<example{index}>\nUser: {example}\nExpected behavior: {skill.description}\n</example{index}>"
        for index, example in enumerate(skill.examples, start=1)
    )
    prompt = (
        f'You are fulfilling the "{skill.name}" skill.\n\n'
        f"Skill Description: {skill.description}\n"
        f"Tags: {', '.join(skill.tags)}\n\n"
        "Your task is to use the available tools to accomplish what the user is asking for "
        "within the context of this skill.\n\n"
        f"Examples of requests for this skill:\n{example_prompts}\n\n"
        f"{base_prompt or ''}"
    )
    return prompt.strip()
