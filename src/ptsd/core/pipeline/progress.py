"""
Feature progress operations.

Baseline capture, gated stage advancement, lifecycle status changes and
per-feature summaries.
"""

import logging

from ptsd.core.artifacts import ArtifactInspector
from ptsd.core.errors import PipelineError
from ptsd.core.project import Project
from ptsd.core.registry.anchors import find_anchor_line
from ptsd.core.registry.models import Feature, FeatureDetail, FeatureStatus
from ptsd.core.review.gate import ReviewGate
from ptsd.core.stages import FINGERPRINTED_KINDS, Stage
from ptsd.core.state.models import FeatureState, Severity
from ptsd.core.state.regression import RegressionDetector

logger = logging.getLogger(__name__)


def _refresh_fingerprints(inspector: ArtifactInspector, feature_id: str, fs: FeatureState) -> int:
    count = 0
    for kind in FINGERPRINTED_KINDS:
        digest = inspector.fingerprint(kind, feature_id, fs)
        if digest is not None:
            fs.fingerprints[kind] = digest
            count += 1
    return count


def sync_state(project: Project) -> int:
    """
    Record the current fingerprint of every present artifact of every
    registered feature as the new baseline.

    Stages, scores and test mappings are left untouched.

    Returns:
        Number of features synced

    Raises:
        StoreIOError: If state cannot be read or written
    """
    features = project.registry.load()
    inspector = ArtifactInspector(project, [f.id for f in features])

    with project.state.transaction() as state:
        for feature in features:
            fs = state.feature(feature.id)
            recorded = _refresh_fingerprints(inspector, feature.id, fs)
            logger.debug("Synced %s: %d fingerprint(s)", feature.id, recorded)

    logger.info("Synced state for %d feature(s)", len(features))
    return len(features)


def advance_stage(project: Project, feature_id: str) -> Stage:
    """
    Move a feature to its next stage.

    A regression pass runs first; a requirements change found by it
    downgrades the feature and refuses the move. A feature without a
    recorded stage enters the pipeline at prd. Any other move requires a
    passing review of the current stage. The new position's fingerprints
    become the baseline.

    Returns:
        The feature's new stage

    Raises:
        EntityNotFoundError: If the feature isn't registered
        PipelineError: If the requirements changed since the last pass,
            the current stage's review gate fails, or the feature is
            already at impl
    """
    project.registry.require(feature_id)
    gate = ReviewGate(project)
    config = project.config()

    for warning in RegressionDetector(project).detect_and_reconcile():
        if warning.feature != feature_id:
            continue
        if warning.severity is Severity.ERROR:
            raise PipelineError(f"{feature_id}: {warning.message}, re-review before advancing")
        logger.warning("Feature %s: %s", feature_id, warning.message)

    current = project.state.load().feature(feature_id).stage
    if current is None:
        target = Stage.PRD
    else:
        target = current.next()
        if target is None:
            raise PipelineError(f"{feature_id} is already at the final stage")
        if not gate.check_gate(feature_id, current):
            raise PipelineError(
                f"review gate not passed for {feature_id} at {current.value} stage "
                f"(min score {config.review.min_score})"
            )

    inspector = ArtifactInspector(project)
    with project.state.transaction() as state:
        fs = state.feature(feature_id)
        fs.stage = target
        _refresh_fingerprints(inspector, feature_id, fs)

    logger.info(
        "Advanced %s: %s -> %s", feature_id, current.value if current else "-", target.value
    )
    return target


def update_feature_status(project: Project, feature_id: str, status: FeatureStatus) -> Feature:
    """
    Change a feature's lifecycle status.

    Marking a feature implemented requires it to be at the impl stage
    with a passing impl review.

    Raises:
        EntityNotFoundError: If the feature isn't registered
        PipelineError: If the feature is not ready to be implemented
    """
    project.registry.require(feature_id)

    if status is FeatureStatus.IMPLEMENTED:
        fs = project.state.load().features.get(feature_id)
        if fs is None or fs.stage is not Stage.IMPL:
            raise PipelineError(f"{feature_id} has not reached the impl stage")
        if not ReviewGate(project).check_gate(feature_id, Stage.IMPL):
            raise PipelineError(f"impl review not passed for {feature_id}")

    return project.registry.set_status(feature_id, status)


def show_feature(project: Project, feature_id: str) -> FeatureDetail:
    """
    Summarize a feature from the registry and its on-disk artifacts.

    Raises:
        EntityNotFoundError: If the feature isn't registered
    """
    feature = project.registry.require(feature_id)
    inspector = ArtifactInspector(project)
    fs = project.state.load().features.get(feature_id)

    return FeatureDetail(
        id=feature.id,
        title=feature.title,
        status=feature.status,
        prd_anchor_line=find_anchor_line(project.layout.prd_path, feature_id),
        seed_present=inspector.has_seed(feature_id),
        scenario_count=inspector.scenario_count(feature_id),
        test_count=len(inspector.test_files(feature_id, fs)),
    )
