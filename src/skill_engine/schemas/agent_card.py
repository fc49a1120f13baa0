"""Agent card: the public description of an agent and its skills."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from .base import SchemaBase


class AgentSkill(SchemaBase):
    id: str
    name: str
    description: str
    tags: List[str]
    examples: List[str] = Field(default_factory=list)
    input_modes: List[str] = Field(default_factory=list)
    output_modes: List[str] = Field(default_factory=list)


class AgentCard(SchemaBase):
    name: str
    version: str
    description: str
    skills: List[AgentSkill]
    url: Optional[str] = None
    capabilities: Dict[str, bool] = Field(default_factory=dict)
    default_input_modes: List[str] = Field(default_factory=list)
    default_output_modes: List[str] = Field(default_factory=list)

    def skill(self, skill_id: str) -> Optional[AgentSkill]:
        for entry in self.skills:
            if entry.id == skill_id:
                return entry
        return None
