"""
Feature registry data models.

The registry (.ptsd/features.yaml) is the authoritative list of features
a project tracks through the pipeline.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FeatureStatus(str, Enum):
    """Lifecycle status of a feature in the registry."""

    PLANNED = "planned"
    ACTIVE = "active"
    IN_PROGRESS = "in-progress"
    DEFERRED = "deferred"
    IMPLEMENTED = "implemented"

    @property
    def is_tracked(self) -> bool:
        """Whether pipeline checks apply (everything but planned/deferred)."""
        return self not in (FeatureStatus.PLANNED, FeatureStatus.DEFERRED)


class Feature(BaseModel):
    """A registered feature."""

    id: str = Field(..., min_length=1, description="Unique feature identifier")
    title: str = Field(default="", description="Human-readable title")
    status: FeatureStatus = Field(default=FeatureStatus.PLANNED)

    @property
    def is_tracked(self) -> bool:
        return self.status.is_tracked


class FeatureDetail(BaseModel):
    """Per-feature summary assembled from the registry and on-disk artifacts."""

    id: str
    title: str = ""
    status: FeatureStatus
    prd_anchor_line: int | None = Field(
        default=None, description="1-based line of the feature's PRD anchor"
    )
    seed_present: bool = False
    scenario_count: int = 0
    test_count: int = 0


class FeaturesFile(BaseModel):
    """Root document of .ptsd/features.yaml."""

    features: list[Feature] = Field(default_factory=list)
