"""
Path classification for write authorization and auto-tracking.

Maps a project path to the artifact kind it represents and the feature
it belongs to.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

from ptsd.core.artifacts import ArtifactInspector
from ptsd.core.layout import PTSD_DIR, is_impl_file, is_test_file
from ptsd.core.stages import Stage
from ptsd.core.state.models import StateFile

# Files that may always be written
MANAGEMENT_FILES = frozenset(
    {
        ".ptsd/docs/PRD.md",
        ".ptsd/tasks.yaml",
        ".ptsd/state.yaml",
        ".ptsd/features.yaml",
        ".ptsd/ptsd.yaml",
        ".ptsd/issues.yaml",
        "CLAUDE.md",
        ".claude/settings.json",
    }
)
MANAGEMENT_PREFIXES = (".ptsd/skills/", ".claude/hooks/")

# Files only ptsd itself may write
PROTECTED_FILES = frozenset({".ptsd/review-status.yaml"})

BDD_PREFIX = f"{PTSD_DIR}/bdd/"
SEEDS_PREFIX = f"{PTSD_DIR}/seeds/"


class PathKind(str, Enum):
    """What a written path represents."""

    MANAGEMENT = "management"
    PROTECTED = "protected"
    SEED = "seed"
    BDD = "bdd"
    TEST = "test"
    IMPL = "impl"
    UNCLASSIFIED = "unclassified"

    @property
    def stage(self) -> Stage | None:
        """Pipeline stage a write of this kind reaches, if any."""
        return {
            PathKind.SEED: Stage.SEED,
            PathKind.BDD: Stage.BDD,
            PathKind.TEST: Stage.TESTS,
            PathKind.IMPL: Stage.IMPL,
        }.get(self)


@dataclass
class PathClass:
    """Classification of one path."""

    rel: str
    kind: PathKind
    feature: str = ""


def _feature_from_mappings(state: StateFile, rel: str) -> str:
    for feature_id in sorted(state.features):
        if any(rel in mapping for mapping in state.features[feature_id].test_mappings):
            return feature_id
    return ""


def classify_path(inspector: ArtifactInspector, path: str) -> PathClass:
    """
    Classify a path relative to the inspector's project.

    Test and implementation files are attributed to a feature by name
    (exact, then longest contained id); a test file whose name matches no
    feature falls back to the state's test mappings.

    Example:
        >>> classify_path(inspector, ".ptsd/bdd/auth.feature")
        PathClass(rel='.ptsd/bdd/auth.feature', kind=<PathKind.BDD: 'bdd'>, feature='auth')
    """
    rel = inspector.layout.relative(path)

    if rel in MANAGEMENT_FILES or rel.startswith(MANAGEMENT_PREFIXES):
        return PathClass(rel, PathKind.MANAGEMENT)

    if rel in PROTECTED_FILES:
        return PathClass(rel, PathKind.PROTECTED)

    if rel.startswith(BDD_PREFIX) and rel.endswith(".feature"):
        feature_id = PurePosixPath(rel).name[: -len(".feature")]
        return PathClass(rel, PathKind.BDD, feature_id)

    if rel.startswith(SEEDS_PREFIX):
        parts = rel.split("/")
        if len(parts) >= 4 and parts[2]:
            return PathClass(rel, PathKind.SEED, parts[2])
        return PathClass(rel, PathKind.UNCLASSIFIED)

    if rel.startswith(f"{PTSD_DIR}/"):
        return PathClass(rel, PathKind.UNCLASSIFIED)

    if is_test_file(rel):
        feature_id = inspector.infer_feature(rel)
        if not feature_id:
            feature_id = _feature_from_mappings(inspector.project.state.load(), rel)
        return PathClass(rel, PathKind.TEST, feature_id)

    if is_impl_file(rel):
        return PathClass(rel, PathKind.IMPL, inspector.infer_feature(rel))

    return PathClass(rel, PathKind.UNCLASSIFIED)
