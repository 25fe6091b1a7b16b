"""
Feature state data models.

FeatureState is the authoritative per-feature pipeline record persisted in
.ptsd/state.yaml: the feature's stage, the fingerprint last observed for each
artifact kind, review scores per stage, and test mappings.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ptsd.core.errors import UserInputError
from ptsd.core.stages import ArtifactKind, Stage


class ScoreEntry(BaseModel):
    """A review score recorded for one stage."""

    value: int = Field(..., ge=0, le=10, description="Review score 0-10")
    recorded_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the score was recorded",
    )


def _parse_stage(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return Stage.parse(value)
        except UserInputError as e:
            raise ValueError(e.message) from None
    return value


class FeatureState(BaseModel):
    """Pipeline record of one feature."""

    stage: Stage | None = Field(default=None, description="Current pipeline stage")
    fingerprints: dict[ArtifactKind, str] = Field(
        default_factory=dict,
        description="Content hash last observed per artifact kind",
    )
    scores: dict[Stage, ScoreEntry] = Field(
        default_factory=dict,
        description="Latest review score per stage",
    )
    test_mappings: list[str] = Field(
        default_factory=list,
        description="Ordered '<bdd file>::<test file>' mappings",
    )

    @field_validator("stage", mode="before")
    @classmethod
    def parse_stage(cls, v: Any) -> Any:
        """Accept legacy stage spellings ('test', 'implemented')."""
        if v in (None, ""):
            return None
        return _parse_stage(v)

    @field_validator("scores", mode="before")
    @classmethod
    def parse_score_keys(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {_parse_stage(k): entry for k, entry in v.items()}
        return v

    def test_files(self) -> list[str]:
        """Test file paths named by the test mappings, in mapping order."""
        files: list[str] = []
        for mapping in self.test_mappings:
            test_file = mapping.split("::", 1)[-1]
            if test_file and test_file not in files:
                files.append(test_file)
        return files


class StateFile(BaseModel):
    """Root document of .ptsd/state.yaml."""

    features: dict[str, FeatureState] = Field(default_factory=dict)

    def feature(self, feature_id: str) -> FeatureState:
        """Get a feature's state, creating an empty record if absent."""
        if feature_id not in self.features:
            self.features[feature_id] = FeatureState()
        return self.features[feature_id]


class Severity(str, Enum):
    """Severity of a regression finding."""

    ERROR = "error"
    WARN = "warn"


class RegressionWarning(BaseModel):
    """An earlier-stage artifact changed after the feature moved past it."""

    feature: str
    artifact_path: str
    artifact_kind: ArtifactKind
    severity: Severity
    category: str = "regression"
    message: str
