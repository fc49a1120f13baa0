"""Tests for hook composition and short-circuit semantics."""

from typing import Any, Dict, List
from unittest.mock import AsyncMock

import pytest
from pydantic import BaseModel

from skill_engine.runtime.hooks import (
    Continue,
    Halt,
    as_outcome,
    compose_after_hooks,
    compose_before_hooks,
    with_hooks,
)
from skill_engine.runtime.task_factory import create_error_task, create_info_message, create_success_task
from skill_engine.runtime.tool_runtime import ToolDefinition
from skill_engine.schemas import Message, Task, TaskState


class EchoArgs(BaseModel):
    value: str = ""


# ===== Test Fixtures =====


@pytest.fixture
def base_execute() -> AsyncMock:
    async def _execute(args: Dict[str, Any], context) -> Task:
        return create_success_task("echo", message=f"ran with {sorted(args)}")

    return AsyncMock(side_effect=_execute)


@pytest.fixture
def tool(base_execute) -> ToolDefinition:
    return ToolDefinition(name="echo", description="Echo tool", parameters=EchoArgs, execute=base_execute)


def _augmenting(key: str, seen: List[Dict[str, Any]]):
    async def hook(args: Dict[str, Any], context) -> Dict[str, Any]:
        seen.append(dict(args))
        return {**args, key: True}

    return hook


# ===== as_outcome =====


class TestAsOutcome:
    def test_passes_explicit_outcomes_through(self) -> None:
        cont = Continue({"a": 1})
        halt = Halt(create_info_message("x"))

        assert as_outcome(cont) is cont
        assert as_outcome(halt) is halt

    def test_task_and_message_halt(self) -> None:
        task = create_success_task("x")
        message = create_info_message("x")

        assert as_outcome(task) == Halt(task)
        assert as_outcome(message) == Halt(message)

    def test_mapping_continues_with_a_copy(self) -> None:
        """Returned mappings continue with a copy of the arguments."""
        args = {"a": 1}

        outcome = as_outcome(args)

        assert outcome == Continue({"a": 1})
        assert outcome.args is not args

    def test_task_shaped_dict_continues(self) -> None:
        """A dict that only looks like a task is still treated as arguments."""
        outcome = as_outcome({"kind": "task", "id": "not-really"})

        assert isinstance(outcome, Continue)
        assert outcome.args["kind"] == "task"

    def test_rejects_other_values(self) -> None:
        with pytest.raises(TypeError):
            as_outcome(42)


# ===== compose_before_hooks =====


class TestComposeBeforeHooks:
    @pytest.mark.asyncio
    async def test_threads_arguments_in_order(self, make_context) -> None:
        seen: List[Dict[str, Any]] = []
        composed = compose_before_hooks(_augmenting("first", seen), _augmenting("second", seen), _augmenting("third", seen))

        outcome = await composed({"value": "x"}, make_context())

        assert outcome == Continue({"value": "x", "first": True, "second": True, "third": True})
        assert seen[0] == {"value": "x"}
        assert seen[1] == {"value": "x", "first": True}
        assert seen[2] == {"value": "x", "first": True, "second": True}

    @pytest.mark.asyncio
    async def test_first_terminal_result_short_circuits(self, make_context) -> None:
        """The first hook that returns a task stops the chain."""
        failed = create_error_task("x", ValueError("stop here"))
        first = AsyncMock(side_effect=lambda args, ctx: {**args, "first": True})
        stopper = AsyncMock(return_value=failed)
        later = AsyncMock(side_effect=lambda args, ctx: args)
        last = AsyncMock(side_effect=lambda args, ctx: args)

        outcome = await compose_before_hooks(first, stopper, later, last)({}, make_context())

        assert outcome == Halt(failed)
        first.assert_awaited_once()
        stopper.assert_awaited_once()
        later.assert_not_called()
        last.assert_not_called()

    @pytest.mark.asyncio
    async def test_accepts_sync_hooks_and_explicit_outcomes(self, make_context) -> None:
        def sync_hook(args, context):
            return Continue({**args, "sync": True})

        outcome = await compose_before_hooks(sync_hook)({}, make_context())

        assert outcome == Continue({"sync": True})

    @pytest.mark.asyncio
    async def test_hooks_do_not_mutate_caller_args(self, make_context) -> None:
        """Hooks never modify the caller's argument dict."""
        def mutating(args, context):
            args["mutated"] = True
            return args

        original = {"value": "x"}
        outcome = await compose_before_hooks(mutating)(original, make_context())

        assert original == {"value": "x"}
        assert outcome.args == {"value": "x", "mutated": True}

    @pytest.mark.asyncio
    async def test_hook_context_sees_current_args(self, make_context) -> None:
        captured = {}

        def first(args, context):
            return {**args, "token": "USDC"}

        def second(args, context):
            captured.update(context.args)
            return args

        await compose_before_hooks(first, second)({}, make_context())

        assert captured == {"token": "USDC"}

    @pytest.mark.asyncio
    async def test_empty_composition_continues_unchanged(self, make_context) -> None:
        assert await compose_before_hooks()({"a": 1}, make_context()) == Continue({"a": 1})


# ===== with_hooks =====


class TestWithHooks:
    def test_preserves_tool_identity(self, tool) -> None:
        wrapped = with_hooks(tool, before=lambda args, ctx: args)

        assert wrapped.name == tool.name
        assert wrapped.description == tool.description
        assert wrapped.parameters is tool.parameters
        assert wrapped.execute is not tool.execute

    @pytest.mark.asyncio
    async def test_short_circuit_skips_base_tool(self, tool, base_execute, make_context) -> None:
        """A terminal before-hook result skips the wrapped tool."""
        failed = create_error_task("echo", ValueError("no"))
        wrapped = with_hooks(tool, before=lambda args, ctx: failed)

        result = await wrapped.execute({"value": "x"}, make_context())

        assert result is failed
        base_execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_message_short_circuit_skips_after_hook(self, tool, base_execute, make_context) -> None:
        clarification = create_info_message("Which chain?")
        after = AsyncMock()

        result = await with_hooks(tool, before=lambda args, ctx: clarification, after=after).execute({}, make_context())

        assert result is clarification
        after.assert_not_called()
        base_execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_base_receives_processed_args(self, tool, base_execute, make_context) -> None:
        wrapped = with_hooks(tool, before=lambda args, ctx: {**args, "extra": True})

        await wrapped.execute({"value": "x"}, make_context())

        called_args, called_context = base_execute.await_args.args
        assert called_args == {"value": "x", "extra": True}
        assert called_context.args == {"value": "x", "extra": True}

    @pytest.mark.asyncio
    async def test_composed_chain_reaches_base_with_cumulative_args(self, tool, base_execute, make_context) -> None:
        """Each hook sees the arguments produced by the previous one."""
        seen: List[Dict[str, Any]] = []
        before = compose_before_hooks(_augmenting("a", seen), _augmenting("b", seen))

        await with_hooks(tool, before=before).execute({"value": "x"}, make_context())

        assert base_execute.await_args.args[0] == {"value": "x", "a": True, "b": True}

    @pytest.mark.asyncio
    async def test_after_hook_transforms_result(self, make_context) -> None:
        raw_tool = ToolDefinition(
            name="raw",
            description="Returns raw data",
            parameters=EchoArgs,
            execute=lambda args, ctx: {"raw": args["value"]},
        )
        captured = {}

        def after(result, context):
            captured["args"] = context.args
            return create_success_task("raw", message=f"parsed {result['raw']}")

        wrapped = with_hooks(raw_tool, before=lambda args, ctx: {**args, "seen": True}, after=after)
        result = await wrapped.execute({"value": "v"}, make_context())

        assert isinstance(result, Task)
        assert result.status.message.text() == "parsed v"
        assert captured["args"] == {"value": "v", "seen": True}

    @pytest.mark.asyncio
    async def test_without_hooks_returns_base_result(self, tool, base_execute, make_context) -> None:
        result = await with_hooks(tool).execute({"value": "x"}, make_context())

        assert result.status.state == TaskState.COMPLETED
        base_execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_task_shaped_args_do_not_short_circuit(self, tool, base_execute, make_context) -> None:
        """Arguments with a task kind key do not end the chain."""
        wrapped = with_hooks(tool, before=lambda args, ctx: {**args, "kind": "task"})

        await wrapped.execute({"value": "x"}, make_context())

        base_execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_hook_exceptions_propagate(self, tool, make_context) -> None:
        """Exceptions raised by hooks reach the caller unchanged."""
        def broken(args, context):
            raise KeyError("missing context field")

        with pytest.raises(KeyError):
            await with_hooks(tool, before=broken).execute({}, make_context())


# ===== compose_after_hooks =====


@pytest.mark.asyncio
async def test_compose_after_hooks_runs_in_order(make_context) -> None:
    """After-hooks run in declaration order."""
    composed = compose_after_hooks(lambda r, c: r + ["a"], lambda r, c: r + ["b"])

    assert await composed([], make_context()) == ["a", "b"]


@pytest.mark.asyncio
async def test_compose_after_hooks_mixes_sync_and_async(make_context) -> None:
    async def to_message(result, context) -> Message:
        return create_info_message(" ".join(result))

    composed = compose_after_hooks(lambda r, c: r + ["done"], to_message)

    message = await composed(["all"], make_context())
    assert message.text() == "all done"
