"""Agent: owns skills, shared context and the skill invocation boundary.

``Agent.invoke_skill`` always returns a Task or Message for a known skill
with valid input: handler failures, orchestrator failures and persistence
failures become failed tasks. ``Agent.call_skill`` is the transport-facing
wrapper that turns the result, or a rejected request, into a remote tool
result envelope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from skill_engine.config_loader import RuntimeConfig, build_task_store
from skill_engine.exceptions import ErrorCode, SkillEngineError
from skill_engine.remote.client import RemoteClient, RemoteConnector, close_client
from skill_engine.remote.responses import create_mcp_a2a_response, create_mcp_error_response
from skill_engine.runtime.context import AgentContext, validate_custom_context
from skill_engine.runtime.orchestrator import ToolOrchestrator
from skill_engine.runtime.skill import SkillDefinition, generate_system_prompt_for_skill
from skill_engine.runtime.task_factory import (
    TerminalResult,
    create_error_task,
    create_info_message,
    generate_id,
    is_terminal_result,
    make_context_id,
)
from skill_engine.runtime.task_store import TaskStore
from skill_engine.runtime.tool_runtime import ToolRuntime, maybe_await
from skill_engine.schemas import (
    AgentCard,
    AgentSkill,
    CallToolResult,
    DataPart,
    Message,
    Role,
    Task,
    TaskAndHistory,
    TextPart,
)

logger = logging.getLogger(__name__)

ContextProvider = Callable[[Mapping[str, RemoteClient]], Any]

DEFAULT_OUTPUT_MODES = ["application/json"]


@dataclass(frozen=True)
class AgentConfig:
    name: str
    version: str
    description: str
    skills: Sequence[SkillDefinition]
    url: Optional[str] = None
    capabilities: Dict[str, bool] = field(
        default_factory=lambda: {"streaming": False, "pushNotifications": False, "stateTransitionHistory": True}
    )


class Agent:
    """A set of skills served under one agent card."""

    def __init__(
        self,
        config: AgentConfig,
        card: AgentCard,
        task_store: Optional[TaskStore],
        orchestrator: Optional[ToolOrchestrator],
        base_system_prompt: Optional[str],
        runtime_config: RuntimeConfig,
    ) -> None:
        self.config = config
        self.card = card
        self.task_store = task_store
        self.orchestrator = orchestrator
        self.base_system_prompt = base_system_prompt
        self.runtime_config = runtime_config
        self.skills: Dict[str, SkillDefinition] = {skill.id: skill for skill in config.skills}
        self.custom: Any = None
        self._remote_clients: Dict[str, RemoteClient] = {}
        self._started = False

    @classmethod
    def create(
        cls,
        config: AgentConfig,
        *,
        task_store: Optional[TaskStore] = None,
        orchestrator: Optional[ToolOrchestrator] = None,
        base_system_prompt: Optional[str] = None,
        runtime_config: Optional[RuntimeConfig] = None,
    ) -> "Agent":
        """Validate ``config`` and build the agent and its card.

        Raises:
            SkillEngineError: ``AgentConfigMissingSkillsError`` when no skills
                are defined, ``InvalidRequestError`` on duplicate skill ids.
        """
        if not config.skills:
            raise SkillEngineError(
                "AgentConfigMissingSkillsError",
                ErrorCode.INVALID_REQUEST,
                "Agent creation requires at least one skill to be defined in 'config.skills'.",
            )
        seen = set()
        for skill in config.skills:
            if skill.id in seen:
                raise SkillEngineError.invalid_request(f"Duplicate skill id: {skill.id}")
            seen.add(skill.id)

        runtime_config = runtime_config or RuntimeConfig()
        if task_store is None:
            task_store = build_task_store(runtime_config)
        return cls(
            config,
            _build_card(config),
            task_store,
            orchestrator,
            base_system_prompt,
            runtime_config,
        )

    @property
    def started(self) -> bool:
        return self._started

    async def start(
        self,
        context_provider: Optional[ContextProvider] = None,
        connector: Optional[RemoteConnector] = None,
        custom_schema: Any = None,
    ) -> None:
        """Connect remote servers and load the shared custom context once.

        One client is opened per distinct server name across all skills. The
        context provider receives the connected clients and may be sync or
        async. Connection or provider failures close any opened clients and
        propagate as ``InternalError``; a custom context that fails
        ``custom_schema`` raises ``ConfigLoadError``.
        """
        if self._started:
            raise SkillEngineError.invalid_request(f"Agent {self.card.name} is already started")

        try:
            await self._connect_remote_servers(connector)
            custom = None
            if context_provider is not None:
                custom = await maybe_await(context_provider(MappingProxyType(self._remote_clients)))
            self.custom = validate_custom_context(custom, custom_schema)
        except BaseException:
            await self._close_clients()
            raise
        self._started = True
        logger.info("Agent %s started with %d skill(s)", self.card.name, len(self.skills))

    async def _connect_remote_servers(self, connector: Optional[RemoteConnector]) -> None:
        for skill in self.skills.values():
            for server in skill.remote_servers:
                if server.name in self._remote_clients:
                    continue
                if connector is None:
                    raise SkillEngineError.internal_error(
                        f"Skill {skill.id} needs remote server {server.name} but no connector was given"
                    )
                client_name = f"{self.card.name}-{server.name}"
                try:
                    self._remote_clients[server.name] = await connector.connect(server, client_name)
                except SkillEngineError:
                    raise
                except Exception as exc:
                    raise SkillEngineError.internal_error(
                        f"Failed to connect remote server {server.name}: {exc}"
                    ) from exc
                logger.info("Connected remote server %s for skill %s", server.name, skill.id)

    async def stop(self) -> None:
        await self._close_clients()
        self.custom = None
        self._started = False

    async def _close_clients(self) -> None:
        clients, self._remote_clients = self._remote_clients, {}
        for name, client in clients.items():
            try:
                await close_client(client)
            except Exception:
                logger.exception("Failed to close remote client %s", name)

    def build_context(self, skill: SkillDefinition, skill_input: Any) -> AgentContext:
        clients = {
            server.name: self._remote_clients[server.name]
            for server in skill.remote_servers
            if server.name in self._remote_clients
        }
        return AgentContext(
            custom=self.custom,
            skill_input=skill_input,
            remote_clients=MappingProxyType(clients),
            call_timeout=self.runtime_config.call_timeout,
            skill_name=skill.name,
        )

    async def invoke_skill(self, skill_id: str, arguments: Any) -> TerminalResult:
        """Run a skill and return its terminal Task or Message.

        Raises:
            SkillEngineError: ``MethodNotFoundError`` for an unknown skill,
                ``InputValidationError`` for arguments the schema rejects.
        """
        skill = self.skills.get(skill_id)
        if skill is None:
            raise SkillEngineError.method_not_found(skill_id)
        skill_input = skill.validate_input(arguments)
        context = self.build_context(skill, skill_input)
        logger.info("Invoking skill %s", skill.id)

        try:
            if skill.handler is not None:
                result = await maybe_await(skill.handler(skill_input, context))
            else:
                result = await self._run_orchestration(skill, skill_input, context)
        except SkillEngineError as exc:
            logger.warning("Skill %s failed: %s", skill.id, exc)
            result = create_error_task(skill.name, exc)
        except Exception as exc:
            logger.exception("Unhandled error in skill %s", skill.id)
            result = create_error_task(
                skill.name,
                SkillEngineError(
                    "UnhandledSkillError",
                    ErrorCode.INTERNAL_ERROR,
                    f"Error processing skill {skill.name} (ID: {skill.id}): {exc}",
                ),
            )

        if not is_terminal_result(result):
            result = create_error_task(
                skill.name,
                SkillEngineError.invalid_agent_response(
                    f"Skill {skill.id} returned {type(result).__name__} instead of a Task or Message"
                ),
            )

        if isinstance(result, Task):
            result = await self._persist(skill, skill_input, result)
        return result

    async def _run_orchestration(self, skill: SkillDefinition, skill_input: Any, context: AgentContext) -> Any:
        if self.orchestrator is None:
            raise SkillEngineError.internal_error(f"No language model configured for skill {skill.name}")
        tools = ToolRuntime(skill.tools, skill.name).bind(context)
        prompt = generate_system_prompt_for_skill(skill, self.base_system_prompt)
        outcome = await maybe_await(self.orchestrator.run(prompt, skill_input, tools))
        if isinstance(outcome, str):
            return create_info_message(outcome, context_id=make_context_id(skill.id, "llm-response"))
        return outcome

    async def _persist(self, skill: SkillDefinition, skill_input: Any, task: Task) -> TerminalResult:
        if self.task_store is None:
            return task
        history: List[Message] = [_request_message(skill_input, task)]
        if task.status.message is not None:
            history.append(task.status.message)
        try:
            await self.task_store.save(TaskAndHistory(task=task, history=history))
        except Exception as exc:
            logger.exception("Failed to persist task %s for skill %s", task.id, skill.id)
            return create_error_task(skill.name, SkillEngineError.wrap(exc, f"Failed to persist task {task.id}: {exc}"))
        return task

    async def get_task(self, task_id: str) -> TaskAndHistory:
        """Load a persisted task.

        Raises:
            SkillEngineError: ``TaskNotFoundError`` when nothing is stored for ``task_id``.
        """
        stored = await self.task_store.load(task_id) if self.task_store is not None else None
        if stored is None:
            raise SkillEngineError.task_not_found(task_id)
        return stored

    async def call_skill(self, skill_id: str, arguments: Any) -> CallToolResult:
        """Transport-facing tool handler: never raises, always returns an envelope."""
        try:
            result = await self.invoke_skill(skill_id, arguments)
        except SkillEngineError as exc:
            return create_mcp_error_response(exc.message, exc.name)
        except Exception as exc:
            logger.exception("Unhandled error calling skill %s", skill_id)
            return create_mcp_error_response(
                f"Error processing skill {skill_id}: {exc}", "UnhandledSkillError"
            )
        return create_mcp_a2a_response(result, self.card.name)


def _request_message(skill_input: Any, task: Task) -> Message:
    if isinstance(skill_input, str):
        part: Any = TextPart(text=skill_input)
    elif isinstance(skill_input, BaseModel):
        part = DataPart(data=skill_input.model_dump(mode="json"))
    elif isinstance(skill_input, Mapping):
        part = DataPart(data=dict(skill_input))
    else:
        part = DataPart(data={"input": skill_input})
    return Message(
        message_id=generate_id(),
        role=Role.USER,
        parts=[part],
        context_id=task.context_id,
        task_id=task.id,
    )


def _build_card(config: AgentConfig) -> AgentCard:
    skills = [
        AgentSkill(
            id=skill.id,
            name=skill.name,
            description=skill.description,
            tags=list(skill.tags),
            examples=list(skill.examples),
            input_modes=[skill.input_mime_type],
            output_modes=list(DEFAULT_OUTPUT_MODES),
        )
        for skill in config.skills
    ]
    input_modes = sorted({mode for skill in skills for mode in skill.input_modes})
    return AgentCard(
        name=config.name,
        version=config.version,
        description=config.description,
        url=config.url,
        skills=skills,
        capabilities=dict(config.capabilities),
        default_input_modes=input_modes,
        default_output_modes=list(DEFAULT_OUTPUT_MODES),
    )
