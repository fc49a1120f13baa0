"""Before/after hook composition for tools.

A before-hook either lets the invocation continue with (possibly new)
arguments or halts it with a terminal Task/Message. The two outcomes are
explicit types, ``Continue`` and ``Halt``; hooks may also return a bare
Task/Message (treated as ``Halt``) or a mapping of arguments (treated as
``Continue``). Whether a value halts the chain is decided by its type, so
an argument dict containing ``"kind": "task"`` still continues.

Hooks may be plain functions or coroutines. They never mutate the
arguments they receive; each hook gets its own copy.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional, Union

from skill_engine.runtime.context import AgentContext
from skill_engine.runtime.task_factory import TerminalResult, is_terminal_result
from skill_engine.runtime.tool_runtime import ToolDefinition, maybe_await


@dataclass(frozen=True)
class Continue:
    args: Dict[str, Any]


@dataclass(frozen=True)
class Halt:
    result: TerminalResult


HookOutcome = Union[Continue, Halt]
BeforeHook = Callable[[Dict[str, Any], AgentContext], Any]
AfterHook = Callable[[Any, AgentContext], Any]


def as_outcome(value: Any) -> HookOutcome:
    """Normalise a before-hook return value into ``Continue`` or ``Halt``.

    Raises:
        TypeError: The hook returned something that is neither an outcome,
            a terminal result, nor an argument mapping.
    """
    if isinstance(value, (Continue, Halt)):
        return value
    if is_terminal_result(value):
        return Halt(value)
    if isinstance(value, Mapping):
        return Continue(dict(value))
    raise TypeError(f"Before hook returned unsupported value of type {type(value).__name__}")


def with_hooks(
    tool: ToolDefinition,
    before: Optional[BeforeHook] = None,
    after: Optional[AfterHook] = None,
) -> ToolDefinition:
    """Wrap ``tool`` with an optional before-hook and after-hook.

    The returned tool keeps the name, description and parameter schema of
    ``tool``. Its execute runs ``before`` first and returns a halting result
    unchanged without calling the base tool. Otherwise the base tool runs
    with the processed arguments, and ``after`` (if given) receives the base
    result together with a context whose ``args`` are the processed
    arguments.
    """

    async def execute(args: Dict[str, Any], context: AgentContext) -> Any:
        current = dict(args)
        if before is not None:
            outcome = as_outcome(await maybe_await(before(dict(current), context.with_args(current))))
            if isinstance(outcome, Halt):
                return outcome.result
            current = outcome.args
        hooked_context = context.with_args(current)
        result = await maybe_await(tool.execute(dict(current), hooked_context))
        if after is not None:
            return await maybe_await(after(result, hooked_context))
        return result

    return replace(tool, execute=execute)


def compose_before_hooks(*hooks: BeforeHook) -> BeforeHook:
    """Run ``hooks`` in order, threading arguments; the first ``Halt`` wins."""

    async def composed(args: Dict[str, Any], context: AgentContext) -> HookOutcome:
        current = dict(args)
        for hook in hooks:
            outcome = as_outcome(await maybe_await(hook(dict(current), context.with_args(current))))
            if isinstance(outcome, Halt):
                return outcome
            current = outcome.args
        return Continue(current)

    return composed


def compose_after_hooks(*hooks: AfterHook) -> AfterHook:
    """Run ``hooks`` in order, each transforming the previous hook's result."""

    async def composed(result: Any, context: AgentContext) -> Any:
        current = result
        for hook in hooks:
            current = await maybe_await(hook(current, context))
        return current

    return composed
