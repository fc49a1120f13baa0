"""Reusable hooks for tools that build on-chain transactions."""

from .balance_hooks import BalanceReader, balance_check_hook, require_wallet_address_hook
from .token_hooks import (
    TokenAmbiguous,
    TokenFound,
    TokenInfo,
    TokenNotFound,
    find_token_info,
    token_resolution_hook,
)
from .transaction_hooks import TRANSACTION_PLAN_ARTIFACT, transaction_plan_parser
from .units import format_units, parse_units

__all__ = [
    "TokenInfo",
    "TokenFound",
    "TokenNotFound",
    "TokenAmbiguous",
    "find_token_info",
    "token_resolution_hook",
    "BalanceReader",
    "require_wallet_address_hook",
    "balance_check_hook",
    "TRANSACTION_PLAN_ARTIFACT",
    "transaction_plan_parser",
    "parse_units",
    "format_units",
]
