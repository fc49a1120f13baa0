"""Orchestrator abstraction for skills without a manual handler.

The orchestrator (typically a language model with tool calling) is a black
box: it receives the skill's system prompt, the validated skill input and
the bound tools, and returns a Task, a Message, or a plain text answer.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from skill_engine.runtime.tool_runtime import BoundTool

logger = logging.getLogger(__name__)


class ToolOrchestrator(Protocol):
    """Protocol for interchangeable tool-selection backends."""

    async def run(self, system_prompt: str, skill_input: Any, tools: Sequence[BoundTool]) -> Any:
        ...


class MockOrchestrator:
    """Scripted orchestrator for tests and offline runs.

    Calls each ``(tool_name, args)`` step in order and returns the last tool
    result, or ``response`` when no steps are scripted. ``args`` may be a
    callable receiving the skill input.
    """

    def __init__(self, steps: Optional[List[tuple]] = None, response: Any = None) -> None:
        self.steps = list(steps or [])
        self.response = response
        self.calls: List[Dict[str, Any]] = []

    async def run(self, system_prompt: str, skill_input: Any, tools: Sequence[BoundTool]) -> Any:
        self.calls.append({"system_prompt": system_prompt, "skill_input": skill_input, "tools": [t.name for t in tools]})
        by_name = {tool.name: tool for tool in tools}
        result: Any = self.response
        for tool_name, args in self.steps:
            tool = by_name.get(tool_name)
            if tool is None:
                raise LookupError(f"Scripted tool {tool_name} is not bound")
            call_args = args(skill_input) if callable(args) else args
            logger.debug("Mock orchestrator calling %s", tool_name)
            result = await tool.invoke(dict(call_args))
        return result
