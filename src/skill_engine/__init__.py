"""Skill Engine package root.

The public API covers agents and skills, the tool/hook composition layer,
task construction helpers, remote response parsing and the task stores.
Schema types are re-exported from ``skill_engine.schemas``.
"""

__version__ = "0.0.1"

from skill_engine.config_loader import RuntimeConfig, build_task_store, load_runtime_config  # noqa: F401
from skill_engine.exceptions import (  # noqa: F401
    ConfigLoadError,
    ErrorCode,
    RemoteToolError,
    ResponseValidationError,
    SkillEngineError,
    UnexpectedTextResponseError,
    UnsupportedSchemaError,
)
from skill_engine.remote import *  # noqa: F401,F403
from skill_engine.remote import __all__ as REMOTE_EXPORTS
from skill_engine.runtime.agent import Agent, AgentConfig  # noqa: F401
from skill_engine.runtime.context import AgentContext, validate_custom_context  # noqa: F401
from skill_engine.runtime.hooks import (  # noqa: F401
    Continue,
    Halt,
    as_outcome,
    compose_after_hooks,
    compose_before_hooks,
    with_hooks,
)
from skill_engine.runtime.orchestrator import MockOrchestrator, ToolOrchestrator  # noqa: F401
from skill_engine.runtime.skill import (  # noqa: F401
    RemoteServerConfig,
    SkillDefinition,
    define_skill,
    format_tool_description_with_tags_and_examples,
    get_input_mime_type,
)
from skill_engine.runtime.task_factory import (  # noqa: F401
    create_artifact,
    create_error_task,
    create_info_message,
    create_input_required_task,
    create_success_task,
    is_terminal_result,
)
from skill_engine.runtime.task_slots import TaskSlotRegistry  # noqa: F401
from skill_engine.runtime.task_store import FileTaskStore, InMemoryTaskStore, TaskStore  # noqa: F401
from skill_engine.runtime.tool_runtime import ToolDefinition, ToolRuntime  # noqa: F401
from skill_engine.schemas import *  # noqa: F401,F403
from skill_engine.schemas import __all__ as SCHEMA_EXPORTS

__all__ = [
    "__version__",
    "RuntimeConfig",
    "load_runtime_config",
    "build_task_store",
    "ErrorCode",
    "SkillEngineError",
    "UnsupportedSchemaError",
    "RemoteToolError",
    "UnexpectedTextResponseError",
    "ResponseValidationError",
    "ConfigLoadError",
    "Agent",
    "AgentConfig",
    "AgentContext",
    "validate_custom_context",
    "Continue",
    "Halt",
    "as_outcome",
    "with_hooks",
    "compose_before_hooks",
    "compose_after_hooks",
    "ToolOrchestrator",
    "MockOrchestrator",
    "RemoteServerConfig",
    "SkillDefinition",
    "define_skill",
    "get_input_mime_type",
    "format_tool_description_with_tags_and_examples",
    "create_success_task",
    "create_error_task",
    "create_input_required_task",
    "create_info_message",
    "create_artifact",
    "is_terminal_result",
    "TaskSlotRegistry",
    "TaskStore",
    "InMemoryTaskStore",
    "FileTaskStore",
    "ToolDefinition",
    "ToolRuntime",
] + REMOTE_EXPORTS + SCHEMA_EXPORTS
