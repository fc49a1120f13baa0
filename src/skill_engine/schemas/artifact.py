"""Artifact schema: named bundles of structured output attached to tasks."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import SchemaBase
from .message import DataPart, Part


class Artifact(SchemaBase):
    artifact_id: str
    parts: List[Part]
    name: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def data_parts(self) -> List[Dict[str, Any]]:
        return [part.data for part in self.parts if isinstance(part, DataPart)]
