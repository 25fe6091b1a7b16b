"""
Context builder.

Produces the agent-facing "what now?" view: one line per tracked feature
(next action, blocked with a reason, or done) followed by one line per
open task.
"""

import logging

from ptsd.core.artifacts import ArtifactInspector
from ptsd.core.pipeline.models import ContextLine, ContextLineType
from ptsd.core.project import Project
from ptsd.core.review.models import ReviewVerdict
from ptsd.core.stages import Stage

logger = logging.getLogger(__name__)

# Next action per stage; impl is handled by the review verdict
STAGE_ACTIONS: dict[Stage, str] = {
    Stage.PRD: "write-seed",
    Stage.SEED: "write-bdd",
    Stage.BDD: "write-tests",
    Stage.TESTS: "write-impl",
}
REVIEW_IMPL_ACTION = "review-impl"


class ContextBuilder:
    """
    Builds context lines for a project.

    Example:
        >>> for line in ContextBuilder(project).build():
        ...     print(line.render())
        next: auth stage=bdd action=write-tests
        blocked: billing reason=review failed at seed stage
        task: T-3 [TODO] billing redo seed for billing
    """

    def __init__(self, project: Project) -> None:
        self.project = project

    def build(self) -> list[ContextLine]:
        """
        Build feature lines then task lines.

        Raises:
            StoreIOError: If a state file is present but corrupt
        """
        features = self.project.registry.load()
        entries = self.project.review_status.load()
        state = self.project.state.load()
        inspector = ArtifactInspector(self.project, [f.id for f in features])

        lines: list[ContextLine] = []
        for feature in features:
            if not feature.is_tracked:
                continue

            fs = state.features.get(feature.id)
            entry = entries.get(feature.id)
            if entry is not None:
                stage, verdict = entry.stage, entry.verdict
            elif fs is not None and fs.stage is not None:
                stage, verdict = fs.stage, ReviewVerdict.PENDING
            else:
                stage, verdict = inspector.derive_stage(feature.id, fs), ReviewVerdict.PENDING

            lines.append(self._feature_line(feature.id, stage, verdict, inspector))

        for task in self.project.tasks.load():
            if not task.status.is_pending:
                continue
            lines.append(
                ContextLine(
                    type=ContextLineType.TASK,
                    feature=task.feature,
                    task_id=task.id,
                    task_status=task.status.value,
                    title=task.title,
                )
            )

        logger.debug("Built %d context line(s)", len(lines))
        return lines

    @staticmethod
    def _feature_line(
        feature_id: str,
        stage: Stage,
        verdict: ReviewVerdict,
        inspector: ArtifactInspector,
    ) -> ContextLine:
        if verdict is ReviewVerdict.FAILED:
            return ContextLine(
                type=ContextLineType.BLOCKED,
                feature=feature_id,
                stage=stage.value,
                reason=f"review failed at {stage.value} stage",
            )

        reason = missing_prerequisite(inspector, feature_id, stage)
        if reason:
            return ContextLine(
                type=ContextLineType.BLOCKED,
                feature=feature_id,
                stage=stage.value,
                reason=reason,
            )

        if stage is Stage.IMPL:
            if verdict is ReviewVerdict.PASSED:
                return ContextLine(type=ContextLineType.DONE, feature=feature_id, stage=stage.value)
            return ContextLine(
                type=ContextLineType.NEXT,
                feature=feature_id,
                stage=stage.value,
                action=REVIEW_IMPL_ACTION,
            )

        return ContextLine(
            type=ContextLineType.NEXT,
            feature=feature_id,
            stage=stage.value,
            action=STAGE_ACTIONS[stage],
        )


def missing_prerequisite(inspector: ArtifactInspector, feature_id: str, stage: Stage) -> str:
    """Reason a feature cannot work at ``stage``, or "" if nothing is missing."""
    if stage is Stage.BDD and not inspector.has_seed(feature_id):
        return "missing seed"
    if stage is Stage.TESTS and not inspector.has_bdd(feature_id):
        return "missing bdd"
    return ""


def build_context(project: Project) -> list[ContextLine]:
    """Build the context lines for ``project``."""
    return ContextBuilder(project).build()
