"""
Pipeline validation.

Runs every consistency check over the project and collects all problems
in a single report. No check stops the others. The regression pass runs
first so the stage checks see any downgrade it makes; issues are
reported in this order:

1. PRD anchors: tracked features without an anchor (fatal) and anchors
   naming no registered feature (notice)
2. Artifact prerequisites: a scenario file without a seed, and, once the
   feature is past the bdd stage, a scenario file without tests
3. Review gate for the feature's recorded stage
4. Regression pass (fingerprints are reconciled as a side effect)
5. Forbidden test-double patterns in test files
"""

import logging

from ptsd.core.artifacts import ArtifactInspector
from ptsd.core.errors import StoreIOError
from ptsd.core.pipeline.models import ValidationIssue, ValidationReport
from ptsd.core.project import Project
from ptsd.core.registry.anchors import check_anchors
from ptsd.core.registry.models import Feature
from ptsd.core.review.gate import ReviewGate
from ptsd.core.stages import Stage
from ptsd.core.state.models import StateFile
from ptsd.core.state.regression import RegressionDetector

logger = logging.getLogger(__name__)


class PipelineValidator:
    """
    Aggregates all pipeline checks into one report.

    Example:
        >>> report = PipelineValidator(project).validate()
        >>> report.passed
        False
        >>> [str(i) for i in report.errors]
        ['billing: has no prd anchor', 'auth: has bdd but no seed']
    """

    def __init__(self, project: Project) -> None:
        self.project = project

    def validate(self) -> ValidationReport:
        """
        Run every check and return all issues found.

        Raises:
            ConfigError: If configuration cannot be loaded
            StoreIOError: If a state file is present but corrupt
        """
        config = self.project.config()
        features = self.project.registry.load()
        tracked = [f for f in features if f.is_tracked]
        inspector = ArtifactInspector(self.project, [f.id for f in features])

        # Stage checks read state after regression downgrades
        regressions = self._check_regressions()
        state = self.project.state.load()

        report = ValidationReport()
        report.issues.extend(self._check_anchors(features, tracked))
        report.issues.extend(self._check_artifacts(tracked, inspector, state))
        report.issues.extend(self._check_review_gates(tracked, state))
        report.issues.extend(regressions)
        report.issues.extend(
            self._scan_forbidden_patterns(inspector, config.validation.forbidden_patterns)
        )

        logger.info(
            "Validation finished: %d error(s), %d notice(s)",
            len(report.errors),
            len(report.notices),
        )
        return report

    def _check_anchors(
        self, features: list[Feature], tracked: list[Feature]
    ) -> list[ValidationIssue]:
        report = check_anchors(self.project.layout.prd_path, [f.id for f in tracked])
        issues = [
            ValidationIssue(feature=fid, category="pipeline", message="has no prd anchor")
            for fid in report.missing
        ]
        # Anchors of untracked (planned/deferred) features are not orphans
        known = {f.id for f in features}
        issues.extend(
            ValidationIssue(
                feature=anchor,
                category="pipeline",
                message="prd anchor has no registered feature",
                fatal=False,
            )
            for anchor in report.orphaned
            if anchor not in known
        )
        return issues

    @staticmethod
    def _check_artifacts(
        tracked: list[Feature],
        inspector: ArtifactInspector,
        state: StateFile,
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for feature in tracked:
            if not inspector.has_bdd(feature.id):
                continue
            if not inspector.has_seed(feature.id):
                issues.append(
                    ValidationIssue(
                        feature=feature.id, category="pipeline", message="has bdd but no seed"
                    )
                )
            fs = state.features.get(feature.id)
            if fs is None or fs.stage is None or fs.stage <= Stage.BDD:
                continue
            if not inspector.has_tests(feature.id, fs):
                issues.append(
                    ValidationIssue(
                        feature=feature.id, category="pipeline", message="has bdd but no tests"
                    )
                )
        return issues

    def _check_review_gates(
        self, tracked: list[Feature], state: StateFile
    ) -> list[ValidationIssue]:
        gate = ReviewGate(self.project)
        issues: list[ValidationIssue] = []
        for feature in tracked:
            fs = state.features.get(feature.id)
            if fs is None or fs.stage is None:
                continue
            if not gate.check_gate(feature.id, fs.stage):
                issues.append(
                    ValidationIssue(
                        feature=feature.id,
                        category="review",
                        message=f"review gate not passed at {fs.stage.value} stage",
                    )
                )
        return issues

    def _check_regressions(self) -> list[ValidationIssue]:
        return [
            ValidationIssue(feature=w.feature, category=w.category, message=w.message)
            for w in RegressionDetector(self.project).detect_and_reconcile()
        ]

    def _scan_forbidden_patterns(
        self, inspector: ArtifactInspector, patterns: list[str]
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if not patterns:
            return issues
        for rel in inspector.all_test_files():
            path = self.project.root / rel
            try:
                content = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                raise StoreIOError(f"failed to read {path}: {e}") from e
            if any(pattern in content for pattern in patterns):
                issues.append(
                    ValidationIssue(
                        feature=inspector.infer_feature(rel),
                        category="mock",
                        message=f"mock detected in {rel}",
                    )
                )
        return issues


def validate(project: Project) -> ValidationReport:
    """Validate ``project`` and return the full report."""
    return PipelineValidator(project).validate()
