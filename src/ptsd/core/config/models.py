"""
Configuration data models for ptsd.

These models define the structure of .ptsd/ptsd.yaml and
~/.config/ptsd/config.yaml files, with validation and type safety via Pydantic.
"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_FORBIDDEN_PATTERNS = [
    "vi.mock",
    "jest.mock",
    "unittest.mock",
    "gomock",
    "testify/mock",
    "mock.Mock",
]


class ProjectConfig(BaseModel):
    """Project identity."""

    name: str = Field(default="", description="Human-readable project name")


class ReviewConfig(BaseModel):
    """
    Review gate configuration.

    Controls the score a stage review must reach before the feature may
    advance, and whether a failing review queues a remediation task.
    """

    min_score: int = Field(
        default=7,
        ge=0,
        le=10,
        description="Minimum review score (0-10) for a stage to pass its gate",
    )
    auto_redo: bool = Field(
        default=False,
        description="Queue a 'redo <stage> for <feature>' task when a review fails",
    )


class ValidationConfig(BaseModel):
    """
    Pipeline validation configuration.

    Patterns listed here are forbidden in test files; tests must exercise
    real collaborators instead of test doubles.
    """

    forbidden_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FORBIDDEN_PATTERNS),
        description="Substrings that may not appear in any test file",
    )


class PtsdConfig(BaseModel):
    """
    Complete ptsd configuration.

    Example:
        >>> config = PtsdConfig()
        >>> config.review.min_score
        7
        >>> config.review.auto_redo
        False
    """

    model_config = ConfigDict(extra="ignore")

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
