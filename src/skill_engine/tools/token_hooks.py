"""Token name resolution against the agent's token map.

The token map lives in the shared custom context under ``token_map``: a
mapping from upper-case symbol to the list of chains the token exists on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from skill_engine.exceptions import ErrorCode, SkillEngineError
from skill_engine.runtime.context import AgentContext
from skill_engine.runtime.hooks import Continue, Halt, HookOutcome
from skill_engine.runtime.task_factory import create_error_task, create_input_required_task

TokenMap = Mapping[str, Sequence["TokenInfo"]]


@dataclass(frozen=True)
class TokenInfo:
    symbol: str
    chain_id: str
    address: str
    decimals: int


@dataclass(frozen=True)
class TokenFound:
    token: TokenInfo


@dataclass(frozen=True)
class TokenNotFound:
    name: str


@dataclass(frozen=True)
class TokenAmbiguous:
    name: str
    options: Tuple[TokenInfo, ...]


TokenLookup = Union[TokenFound, TokenNotFound, TokenAmbiguous]


def find_token_info(token_map: TokenMap, name: str, chain_id: Optional[str] = None) -> TokenLookup:
    """Look a token up by symbol (case-insensitive), optionally narrowed to a chain."""
    options = tuple(token_map.get(name.upper(), ()))
    if chain_id is not None:
        options = tuple(option for option in options if str(option.chain_id) == str(chain_id))
    if not options:
        return TokenNotFound(name)
    if len(options) == 1:
        return TokenFound(options[0])
    return TokenAmbiguous(name, options)


def _token_map(context: AgentContext) -> TokenMap:
    token_map = context.custom_value("token_map")
    if token_map is None:
        raise SkillEngineError.internal_error("No token_map is configured in the agent context")
    return token_map


async def token_resolution_hook(args: Dict[str, Any], context: AgentContext) -> HookOutcome:
    """Resolve ``args["token_name"]`` into ``args["resolved_token"]``.

    Unknown tokens halt with a failed task; a token on several chains halts
    with an input-required task listing the chains. ``args["chain_id"]``,
    when present, narrows the lookup.
    """
    token_name = str(args.get("token_name") or "").strip()
    if not token_name:
        return Halt(
            create_error_task(
                context.skill_name,
                SkillEngineError.invalid_params("A token name is required."),
            )
        )

    lookup = find_token_info(_token_map(context), token_name, args.get("chain_id"))
    if isinstance(lookup, TokenNotFound):
        return Halt(
            create_error_task(
                context.skill_name,
                SkillEngineError("TokenNotFound", ErrorCode.INVALID_PARAMS, f"Token '{token_name}' not supported."),
            )
        )
    if isinstance(lookup, TokenAmbiguous):
        chains = "\n".join(f"- {token_name} on chain {option.chain_id}" for option in lookup.options)
        return Halt(
            create_input_required_task(
                context.skill_name,
                f"Which {token_name} do you want to use? Please specify the chain:\n{chains}",
            )
        )
    return Continue({**args, "resolved_token": lookup.token})
