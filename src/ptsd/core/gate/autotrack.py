"""
Auto-tracking of written artifacts.

After a file is written, advance the owning feature's review-status
stage to the stage that file represents. The stage only moves forward:
a later write to an earlier-stage file never undoes recorded progress.
"""

import logging

from pydantic import BaseModel

from ptsd.core.artifacts import ArtifactInspector
from ptsd.core.gate.classify import PathKind, classify_path
from ptsd.core.project import Project
from ptsd.core.review.models import ReviewStatusEntry
from ptsd.core.stages import Stage

logger = logging.getLogger(__name__)


class TrackResult(BaseModel):
    """Outcome of tracking one written path."""

    feature: str
    stage: Stage
    tests_written: bool
    updated: bool
    previous: Stage


def track(project: Project, path: str) -> TrackResult | None:
    """
    Record the progress implied by a written file.

    Args:
        project: Project the path belongs to
        path: Absolute or project-relative path that was written

    Returns:
        TrackResult, or None if the path is not a recognized artifact

    Raises:
        StoreIOError: If review status cannot be read or written
    """
    inspector = ArtifactInspector(project)
    target = classify_path(inspector, path)
    new_stage = target.kind.stage
    if new_stage is None or not target.feature:
        return None

    feature_id = target.feature
    entries = project.review_status.load()
    entry = entries.get(feature_id) or ReviewStatusEntry()
    previous = entry.stage
    updated = False

    if target.kind is PathKind.TEST and not entry.tests_written:
        entry.tests_written = True
        updated = True

    if new_stage > entry.stage:
        entry.stage = new_stage
        updated = True

    if updated:
        entries[feature_id] = entry
        project.review_status.save(entries)
        logger.info(
            "Tracked %s: %s %s -> %s", target.rel, feature_id, previous.value, entry.stage.value
        )

    return TrackResult(
        feature=feature_id,
        stage=entry.stage,
        tests_written=entry.tests_written,
        updated=updated,
        previous=previous,
    )
