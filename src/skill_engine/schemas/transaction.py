"""Transaction plan artifacts produced by on-chain tools."""

from __future__ import annotations

from typing import Generic, List, TypeVar

from pydantic import Field

from .base import SchemaBase

PreviewT = TypeVar("PreviewT")


class TransactionPlan(SchemaBase):
    """A single unsigned transaction the user is asked to sign."""

    to: str
    data: str
    value: str = "0"
    chain_id: str


class TransactionPlanResponse(SchemaBase):
    """Payload returned by remote tools that build transactions."""

    transactions: List[TransactionPlan] = Field(default_factory=list)


class TransactionArtifact(SchemaBase, Generic[PreviewT]):
    """Body of a ``transaction-plan`` artifact: the plan plus a preview for display."""

    tx_plan: List[TransactionPlan]
    tx_preview: PreviewT
