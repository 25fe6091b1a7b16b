"""
Write authorization.

Before a file is written, check that the artifacts it depends on already
exist for the feature it belongs to:

- a scenario file needs the feature's seed
- a seed needs the feature's PRD anchor
- a test file needs the feature's scenario file
- an implementation file needs the feature's tests

Management files are always writable; review-status.yaml is never
writable directly. Paths that match no feature are allowed.
"""

import logging

from pydantic import BaseModel, Field

from ptsd.core.artifacts import ArtifactInspector
from ptsd.core.gate.classify import PathKind, classify_path
from ptsd.core.project import Project

logger = logging.getLogger(__name__)


class GateCheckResult(BaseModel):
    """Outcome of one write authorization query."""

    allowed: bool
    reason: str = Field(default="", description="Actionable reason when denied")
    feature: str = Field(default="", description="Feature the path belongs to")


def _deny(reason: str, feature: str) -> GateCheckResult:
    logger.info("Gate denied write for %s: %s", feature or "-", reason)
    return GateCheckResult(allowed=False, reason=reason, feature=feature)


def check(project: Project, path: str) -> GateCheckResult:
    """
    Decide whether ``path`` may be written.

    Args:
        project: Project the path belongs to
        path: Absolute or project-relative path about to be written

    Returns:
        GateCheckResult (denials carry a reason and the inferred feature)

    Raises:
        StoreIOError: If a state file is present but unreadable

    Example:
        >>> result = check(project, ".ptsd/bdd/auth.feature")
        >>> result.allowed, result.feature
        (False, 'auth')
    """
    inspector = ArtifactInspector(project)
    target = classify_path(inspector, path)
    feature_id = target.feature

    if target.kind is PathKind.PROTECTED:
        return _deny("direct edits to review-status.yaml are blocked - use ptsd review", "")

    if target.kind is PathKind.BDD:
        if not inspector.has_seed(feature_id):
            return _deny(
                f"no seed for {feature_id} - run: ptsd seed init {feature_id}", feature_id
            )

    elif target.kind is PathKind.SEED:
        if not inspector.has_prd_anchor(feature_id):
            return _deny(f"no PRD anchor for {feature_id}", feature_id)

    elif target.kind is PathKind.TEST and feature_id:
        if not inspector.has_bdd(feature_id):
            return _deny(
                f"no BDD scenarios for {feature_id} - run: ptsd bdd add {feature_id}",
                feature_id,
            )

    elif target.kind is PathKind.IMPL and feature_id:
        fs = project.state.load().features.get(feature_id)
        if not inspector.has_tests(feature_id, fs):
            return _deny(f"no tests for {feature_id}", feature_id)

    return GateCheckResult(allowed=True, feature=feature_id)
