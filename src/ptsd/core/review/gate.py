"""
Review gate.

Records numeric review scores per stage and decides whether a stage has
been passed. A score passes when it is at least ``review.min_score``.
With ``review.auto_redo`` enabled, a failing score queues an urgent
remediation task in the task list.
"""

import logging
from dataclasses import dataclass

from ptsd.core.errors import UserInputError
from ptsd.core.project import Project
from ptsd.core.review.models import ReviewStatusEntry, ReviewVerdict
from ptsd.core.stages import Stage
from ptsd.core.state.models import ScoreEntry
from ptsd.core.tasks.models import Task

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 10


@dataclass
class ReviewOutcome:
    """Result of recording one review."""

    feature: str
    stage: Stage
    score: int
    min_score: int
    redo_task: Task | None = None

    @property
    def passed(self) -> bool:
        return self.score >= self.min_score


class ReviewGate:
    """
    Score-based stage gate.

    Example:
        >>> gate = ReviewGate(project)
        >>> outcome = gate.record_review("auth", "bdd", 8)
        >>> gate.check_gate("auth", "bdd")
        True
    """

    def __init__(self, project: Project) -> None:
        self.project = project

    def record_review(self, feature_id: str, stage: str | Stage, score: int) -> ReviewOutcome:
        """
        Record a review score for a feature's stage.

        Args:
            feature_id: Feature that was reviewed
            stage: Reviewed stage name
            score: Review score, 0-10

        Returns:
            ReviewOutcome, including the redo task if one was queued

        Raises:
            UserInputError: If the score is out of range or the stage unknown
            ConfigError: If configuration cannot be loaded
            StoreIOError: If state cannot be read or written
        """
        if not MIN_SCORE <= score <= MAX_SCORE:
            raise UserInputError(f"score must be {MIN_SCORE}-{MAX_SCORE}, got {score}")
        parsed = Stage.parse(stage)
        if not feature_id:
            raise UserInputError("feature id required")

        config = self.project.config()
        min_score = config.review.min_score

        with self.project.state.transaction() as state:
            state.feature(feature_id).scores[parsed] = ScoreEntry(value=score)

        self._update_review_status(feature_id, parsed, score, min_score)

        outcome = ReviewOutcome(feature_id, parsed, score, min_score)
        logger.info(
            "Recorded review %s/%s: %d (min %d)", feature_id, parsed.value, score, min_score
        )

        if config.review.auto_redo and not outcome.passed:
            outcome.redo_task = self.project.tasks.append_redo(feature_id, parsed)

        return outcome

    def _update_review_status(
        self, feature_id: str, stage: Stage, score: int, min_score: int
    ) -> None:
        entries = self.project.review_status.load()
        entry = entries.get(feature_id)
        if entry is None:
            entry = ReviewStatusEntry(stage=stage)

        if score >= min_score:
            entry.verdict = ReviewVerdict.PASSED
            entry.issues = []
        else:
            entry.verdict = ReviewVerdict.FAILED
            entry.issues = [f"score {score} below min {min_score} at {stage.value} stage"]
        entry.issue_count = len(entry.issues)

        entries[feature_id] = entry
        self.project.review_status.save(entries)

    def check_gate(self, feature_id: str, stage: str | Stage) -> bool:
        """
        Check whether a feature's stage has a passing review score.

        An unknown feature or a stage without a recorded score fails the
        gate without raising.

        Raises:
            UserInputError: If the stage name is unknown
            ConfigError: If configuration cannot be loaded
            StoreIOError: If state cannot be read
        """
        parsed = Stage.parse(stage)
        min_score = self.project.config().review.min_score

        fs = self.project.state.load().features.get(feature_id)
        if fs is None:
            return False
        entry = fs.scores.get(parsed)
        if entry is None:
            return False
        return entry.value >= min_score
