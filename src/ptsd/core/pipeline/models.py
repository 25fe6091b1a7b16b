"""
Pipeline report models.
"""

from enum import Enum

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """One problem found by a validation pass."""

    feature: str = Field(default="", description="Feature the issue belongs to, if any")
    category: str = Field(..., description="pipeline, review, regression or mock")
    message: str
    fatal: bool = Field(default=True, description="Whether the issue fails validation")

    def __str__(self) -> str:
        if self.feature:
            return f"{self.feature}: {self.message}"
        return self.message


class ValidationReport(BaseModel):
    """All issues found by one validation pass, in check order."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.fatal]

    @property
    def notices(self) -> list[ValidationIssue]:
        return [i for i in self.issues if not i.fatal]

    @property
    def passed(self) -> bool:
        return not self.errors


class ContextLineType(str, Enum):
    """Kinds of context lines, in display priority."""

    NEXT = "next"
    BLOCKED = "blocked"
    DONE = "done"
    TASK = "task"


class ContextLine(BaseModel):
    """One recommendation for an agent or human."""

    type: ContextLineType
    feature: str
    stage: str = ""
    action: str = ""
    reason: str = ""
    task_id: str = ""
    task_status: str = ""
    title: str = ""

    def render(self) -> str:
        """Single-line text form (used by ``ptsd context --agent``)."""
        if self.type is ContextLineType.NEXT:
            return f"next: {self.feature} stage={self.stage} action={self.action}"
        if self.type is ContextLineType.BLOCKED:
            return f"blocked: {self.feature} reason={self.reason}"
        if self.type is ContextLineType.DONE:
            return f"done: {self.feature}"
        return f"task: {self.task_id} [{self.task_status}] {self.feature} {self.title}"


class CoverageStatus(str, Enum):
    """How well a feature's scenarios are covered by mapped tests."""

    COVERED = "covered"
    PARTIAL = "partial"
    NO_TESTS = "no-tests"


class CoverageEntry(BaseModel):
    """Scenario coverage of one scenario file."""

    feature: str
    bdd_file: str = Field(..., description="Project-relative scenario file")
    scenarios: int = Field(default=0, ge=0)
    tests: int = Field(default=0, ge=0, description="Test mappings recorded for the feature")
    status: CoverageStatus = CoverageStatus.NO_TESTS
