"""
Regression detection.

Compares the stored fingerprint of every artifact against its current
content. An artifact that changed after the feature progressed past its
stage is a regression:

- prd changed: error, the feature's stage is forced back to prd
- test changed at impl: warning, tests should be re-run
- seed or bdd changed: warning, downstream artifacts may be stale

Changes to artifacts at or above the current stage are expected evolution
and only refresh the stored fingerprint. Every pass persists the
fingerprints it observed, so a second pass without edits is silent.
"""

import logging

from ptsd.core.artifacts import ArtifactInspector
from ptsd.core.project import Project
from ptsd.core.stages import FINGERPRINTED_KINDS, ArtifactKind, Stage
from ptsd.core.state.models import FeatureState, RegressionWarning, Severity

logger = logging.getLogger(__name__)


class RegressionDetector:
    """
    Detects and reconciles out-of-order artifact edits.

    Example:
        >>> detector = RegressionDetector(project)
        >>> for w in detector.detect_and_reconcile():
        ...     print(w.severity.value, w.message)
        error prd changed at stage tests, stage downgraded
    """

    def __init__(self, project: Project) -> None:
        self.project = project

    def detect_and_reconcile(self) -> list[RegressionWarning]:
        """
        Run one regression pass over every feature with a recorded stage.

        Returns:
            Warnings in feature order, then pipeline order per feature

        Raises:
            StoreIOError: If state cannot be read or written
        """
        state = self.project.state.load()
        inspector = ArtifactInspector(self.project)
        warnings: list[RegressionWarning] = []
        changed = False

        for feature_id in sorted(state.features):
            fs = state.features[feature_id]
            if fs.stage is None:
                continue
            found, dirty = self._check_feature(feature_id, fs, inspector)
            warnings.extend(found)
            changed = changed or dirty

        if changed:
            self.project.state.save(state)
        return warnings

    def _check_feature(
        self,
        feature_id: str,
        fs: FeatureState,
        inspector: ArtifactInspector,
    ) -> tuple[list[RegressionWarning], bool]:
        assert fs.stage is not None
        current = fs.stage
        warnings: list[RegressionWarning] = []
        dirty = False

        for kind in FINGERPRINTED_KINDS:
            new_hash = inspector.fingerprint(kind, feature_id, fs)
            if new_hash is None:
                continue

            old_hash = fs.fingerprints.get(kind)
            if old_hash == new_hash:
                continue

            fs.fingerprints[kind] = new_hash
            dirty = True

            # No baseline yet, or expected evolution at/after the current stage
            if old_hash is None or kind.stage >= current:
                continue

            warning = self._classify(feature_id, kind, current, inspector, fs)
            warnings.append(warning)

            if kind is ArtifactKind.PRD:
                logger.warning(
                    "Feature %s: prd changed at stage %s, downgrading to prd",
                    feature_id,
                    current.value,
                )
                fs.stage = Stage.PRD
                current = Stage.PRD
            else:
                logger.info("Feature %s: %s", feature_id, warning.message)

        return warnings, dirty

    @staticmethod
    def _classify(
        feature_id: str,
        kind: ArtifactKind,
        current: Stage,
        inspector: ArtifactInspector,
        fs: FeatureState,
    ) -> RegressionWarning:
        if kind is ArtifactKind.PRD:
            severity = Severity.ERROR
            message = f"{kind.value} changed at stage {current.value}, stage downgraded"
        elif kind is ArtifactKind.TEST and current is Stage.IMPL:
            severity = Severity.WARN
            message = f"test changed at stage {current.value}, re-run tests"
        else:
            severity = Severity.WARN
            message = f"{kind.value} changed at stage {current.value}, downstream may be stale"

        return RegressionWarning(
            feature=feature_id,
            artifact_path=inspector.artifact_path(kind, feature_id, fs),
            artifact_kind=kind,
            severity=severity,
            message=message,
        )


def detect_regressions(project: Project) -> list[RegressionWarning]:
    """Run a regression pass for ``project``."""
    return RegressionDetector(project).detect_and_reconcile()
