"""Wallet and balance checks run before transaction-building tools.

The on-chain balance is read through a ``BalanceReader`` held in the shared
custom context under ``balance_reader``. A single reader (and whatever
connection pool it owns) serves every invocation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Protocol

from skill_engine.exceptions import ErrorCode, SkillEngineError
from skill_engine.runtime.context import AgentContext
from skill_engine.runtime.hooks import Continue, Halt, HookOutcome
from skill_engine.runtime.task_factory import create_error_task, create_info_message
from skill_engine.tools.token_hooks import TokenInfo
from skill_engine.tools.units import format_units, parse_units

logger = logging.getLogger(__name__)

WALLET_ADDRESS_PROMPT = (
    "I need your wallet address to prepare this transaction. "
    "Please provide it and submit the request again."
)


class BalanceReader(Protocol):
    async def get_balance(self, token: TokenInfo, owner: str) -> int:
        """Return the balance of ``owner`` in base units."""
        ...


async def require_wallet_address_hook(args: Dict[str, Any], context: AgentContext) -> HookOutcome:
    """Copy the acting wallet address into ``args["wallet_address"]``.

    The address comes from the tool arguments or the skill input. When
    neither has one, the chain halts with a clarification message.
    """
    address = args.get("wallet_address") or context.skill_input_value("wallet_address")
    if not address:
        return Halt(create_info_message(WALLET_ADDRESS_PROMPT, metadata={"inputRequired": True}))
    return Continue({**args, "wallet_address": address})


def _failed(context: AgentContext, name: str, message: str) -> Halt:
    return Halt(create_error_task(context.skill_name, SkillEngineError(name, ErrorCode.INVALID_PARAMS, message)))


async def balance_check_hook(args: Dict[str, Any], context: AgentContext) -> HookOutcome:
    """Halt with a failed task unless the wallet holds at least ``args["amount"]``.

    Requires ``resolved_token`` from ``token_resolution_hook`` and a wallet
    address (see ``require_wallet_address_hook``).
    """
    token = args.get("resolved_token")
    if not isinstance(token, TokenInfo):
        raise SkillEngineError.internal_error("balance_check_hook requires a resolved token; run token resolution first")

    owner = args.get("wallet_address") or context.skill_input_value("wallet_address")
    if not owner:
        return _failed(context, "WalletAddressMissing", "A wallet address is required to check your balance.")

    reader = context.custom_value("balance_reader")
    if reader is None:
        raise SkillEngineError.internal_error("No balance_reader is configured in the agent context")

    amount = args.get("amount")
    try:
        required = parse_units(amount, token.decimals)
    except ValueError:
        return _failed(context, "InvalidAmount", f"Invalid amount format for balance check: {amount}")

    try:
        balance = await reader.get_balance(token, owner)
    except Exception as exc:
        logger.warning("Balance read failed for %s on chain %s: %s", token.symbol, token.chain_id, exc)
        return Halt(
            create_error_task(
                context.skill_name,
                SkillEngineError(
                    "BalanceCheckError",
                    ErrorCode.INTERNAL_ERROR,
                    f"Could not verify your {token.symbol} balance due to a network error: {exc}",
                ),
            )
        )

    if balance < required:
        return _failed(
            context,
            "InsufficientBalance",
            f"Insufficient {token.symbol} balance. You need {amount} but only have "
            f"{format_units(balance, token.decimals)}.",
        )
    return Continue(args)
