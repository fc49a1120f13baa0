"""After-hooks that turn remote transaction-plan responses into tasks."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type

from skill_engine.exceptions import SkillEngineError
from skill_engine.remote.responses import parse_mcp_tool_response_payload
from skill_engine.runtime.context import AgentContext
from skill_engine.runtime.hooks import AfterHook
from skill_engine.runtime.task_factory import (
    TerminalResult,
    create_artifact,
    create_error_task,
    create_success_task,
    is_terminal_result,
)
from skill_engine.schemas import DataPart, TransactionArtifact, TransactionPlanResponse
from skill_engine.tools.token_hooks import TokenInfo

logger = logging.getLogger(__name__)

TRANSACTION_PLAN_ARTIFACT = "transaction-plan"


def _preview(action: str, args: Dict[str, Any], payload: TransactionPlanResponse) -> Dict[str, Any]:
    token = args.get("resolved_token")
    chain_id: Optional[str] = token.chain_id if isinstance(token, TokenInfo) else payload.transactions[0].chain_id
    preview: Dict[str, Any] = {
        "tokenName": str(args.get("token_name") or "").upper(),
        "amount": args.get("amount"),
        "action": action,
        "chainId": chain_id,
    }
    extra = payload.model_dump(mode="json", by_alias=True, exclude={"transactions"}, exclude_none=True)
    preview.update(extra)
    return preview


def transaction_plan_parser(
    action: str,
    schema: Type[TransactionPlanResponse] = TransactionPlanResponse,
) -> AfterHook:
    """Build an after-hook that parses a transaction plan for ``action``.

    The hook passes Tasks and Messages from the base tool through untouched.
    A raw remote response becomes a completed task with a
    ``transaction-plan`` artifact, or a failed task naming ``action`` when
    the response is an error, is malformed, or holds no transactions.
    """

    async def parse(result: Any, context: AgentContext) -> TerminalResult:
        if is_terminal_result(result):
            return result
        try:
            payload = parse_mcp_tool_response_payload(result, schema)
            if not payload.transactions:
                raise SkillEngineError.invalid_agent_response("No transactions were returned")
        except SkillEngineError as exc:
            logger.warning("Transaction plan for %s rejected: %s", action, exc)
            return create_error_task(
                context.skill_name,
                SkillEngineError(exc.name, exc.code, f"Failed to process the transaction plan for {action}: {exc.message}"),
            )

        body = TransactionArtifact[Dict[str, Any]](
            tx_plan=payload.transactions,
            tx_preview=_preview(action, context.args, payload),
        )
        artifact = create_artifact(
            [DataPart(data=body.to_dict())],
            name=TRANSACTION_PLAN_ARTIFACT,
            description=f"Transaction plan to {action}",
        )
        return create_success_task(
            context.skill_name,
            [artifact],
            f"{action.capitalize()} transaction plan created successfully. Ready to sign.",
            context_suffix=action.lower(),
        )

    return parse
