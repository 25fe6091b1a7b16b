"""
Review status models.

ReviewStatusEntry is the lightweight, agent-facing projection of a feature's
progress kept in .ptsd/review-status.yaml. It is separate from FeatureState:
its stage only ever advances (auto-track), while FeatureState.stage can be
forced down by the regression detector.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ptsd.core.errors import UserInputError
from ptsd.core.stages import Stage


class ReviewVerdict(str, Enum):
    """Outcome of the latest review of a feature."""

    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"


class ReviewStatusEntry(BaseModel):
    """Agent-facing review status of one feature."""

    stage: Stage = Field(default=Stage.PRD, description="Furthest stage reached")
    tests_written: bool = Field(default=False, description="Whether tests exist")
    verdict: ReviewVerdict = Field(default=ReviewVerdict.PENDING)
    issue_count: int = Field(default=0, ge=0)
    issues: list[str] = Field(default_factory=list)

    @field_validator("stage", mode="before")
    @classmethod
    def parse_stage(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return Stage.parse(v)
            except UserInputError as e:
                raise ValueError(e.message) from None
        return v


class ReviewStatusFile(BaseModel):
    """Root document of .ptsd/review-status.yaml."""

    features: dict[str, ReviewStatusEntry] = Field(default_factory=dict)
