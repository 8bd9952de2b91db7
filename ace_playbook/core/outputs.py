"""Output types produced by the three roles."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .delta import DeltaBatch


class GeneratorOutput(BaseModel):
    """Output from the Generator role containing reasoning and answer."""

    reasoning: str = Field(default="", description="Step-by-step reasoning process")
    final_answer: str = Field(default="", description="The final answer to the question")
    bullet_ids: List[str] = Field(
        default_factory=list, description="IDs of bullets the model says it used"
    )
    raw: Dict[str, Any] = Field(
        default_factory=dict, description="Raw LLM response data"
    )


class BulletTag(BaseModel):
    """Classification tag for a bullet (helpful/harmful/neutral)."""

    id: str = Field(..., description="The bullet ID being tagged")
    tag: str = Field(
        ..., description="Classification: 'helpful', 'harmful', or 'neutral'"
    )


class ReflectorOutput(BaseModel):
    """Output from the Reflector role containing analysis and bullet tags."""

    reasoning: str = Field(default="", description="Overall reasoning about the outcome")
    error_identification: str = Field(
        default="", description="Description of what went wrong (if applicable)"
    )
    root_cause_analysis: str = Field(
        default="", description="Analysis of why errors occurred"
    )
    correct_approach: str = Field(
        default="", description="What the correct approach should be"
    )
    key_insight: str = Field(
        default="", description="The main lesson learned from this iteration"
    )
    bullet_tags: List[BulletTag] = Field(
        default_factory=list, description="Classifications of bullet effectiveness"
    )
    raw: Dict[str, Any] = Field(
        default_factory=dict, description="Raw LLM response data"
    )
    degraded: bool = Field(
        default=False,
        exclude=True,
        description="No refinement round produced tags or a key insight",
    )

    @property
    def is_actionable(self) -> bool:
        return bool(self.bullet_tags) or bool(self.key_insight)


class CuratorOutput(BaseModel):
    """Output from the Curator role containing the playbook delta."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    delta: DeltaBatch = Field(..., description="Batch of operations to apply")
    raw: Dict[str, Any] = Field(
        default_factory=dict, description="Raw LLM response data"
    )
