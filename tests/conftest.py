"""Shared fixtures."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from skill_engine.runtime.context import AgentContext
from tests.helpers.lending import USDC_ARBITRUM, WETH_ARBITRUM


@pytest.fixture
def token_map() -> Dict[str, Any]:
    return {"USDC": [USDC_ARBITRUM], "WETH": [WETH_ARBITRUM]}


@pytest.fixture
def make_context():
    """Build an AgentContext with sensible defaults."""

    def _make(custom: Any = None, skill_input: Any = None, **kwargs: Any) -> AgentContext:
        return AgentContext(
            custom=custom if custom is not None else {},
            skill_input=skill_input if skill_input is not None else {},
            **kwargs,
        )

    return _make
