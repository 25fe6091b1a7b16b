"""
On-disk artifact inspection.

ArtifactInspector answers questions about the files that define each
stage of a feature: whether they exist, which test files belong to the
feature, and the content fingerprint of each artifact kind.

An inspector memoizes the feature id list and the project's test file
scan for its own lifetime. Create one per operation.
"""

import hashlib
import logging
from pathlib import Path

from ptsd.core.errors import PipelineError, StoreIOError
from ptsd.core.layout import is_impl_file, is_test_file, strip_test_naming
from ptsd.core.project import Project
from ptsd.core.registry.anchors import extract_section, find_anchor_line
from ptsd.core.registry.matching import match_feature_id
from ptsd.core.review.models import ReviewStatusEntry
from ptsd.core.stages import ArtifactKind, Stage
from ptsd.core.state.models import FeatureState

logger = logging.getLogger(__name__)

SCENARIO_KEYWORDS = ("Scenario:", "Scenario Outline:")
FEATURE_TAG_PREFIX = "@feature:"


def _sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _read_bytes(path: Path) -> bytes | None:
    if not path.is_file():
        return None
    try:
        return path.read_bytes()
    except OSError as e:
        raise StoreIOError(f"failed to read {path}: {e}") from e


def read_feature_tag(path: Path) -> str:
    """
    Return the feature id named by the first ``@feature:<id>`` tag in a
    scenario file, or "" if there is none.
    """
    data = _read_bytes(path)
    if data is None:
        return ""
    for line in data.decode("utf-8", errors="replace").splitlines():
        for token in line.split():
            if token.startswith(FEATURE_TAG_PREFIX):
                return token[len(FEATURE_TAG_PREFIX) :]
    return ""


def count_scenarios(path: Path) -> int:
    """Number of scenarios and scenario outlines in a scenario file (0 if absent)."""
    data = _read_bytes(path)
    if data is None:
        return 0
    return sum(
        1
        for line in data.decode("utf-8", errors="replace").splitlines()
        if line.strip().startswith(SCENARIO_KEYWORDS)
    )


class ArtifactInspector:
    """
    Read-only view of a project's stage artifacts.

    Example:
        >>> inspector = ArtifactInspector(project)
        >>> inspector.exists(ArtifactKind.SEED, "auth")
        True
        >>> inspector.test_files("auth")
        ['internal/core/auth_test.go']
    """

    def __init__(self, project: Project, feature_ids: list[str] | None = None) -> None:
        self.project = project
        self.layout = project.layout
        self._feature_ids = feature_ids
        self._all_test_files: list[str] | None = None

    @property
    def feature_ids(self) -> list[str]:
        if self._feature_ids is None:
            self._feature_ids = self.project.registry.ids()
        return self._feature_ids

    def all_test_files(self) -> list[str]:
        """Every test file in the project (relative, sorted)."""
        if self._all_test_files is None:
            self._all_test_files = list(self.layout.iter_test_files())
        return self._all_test_files

    def infer_feature(self, rel: str) -> str:
        """
        Infer the feature a source or test file belongs to from its name.

        Test naming conventions are stripped first; the remaining stem is
        matched exactly, then by longest contained feature id.
        """
        if is_test_file(rel):
            name = strip_test_naming(rel)
        else:
            name = Path(rel).stem
        return match_feature_id(name, self.feature_ids)

    def scanned_test_files(self, feature_id: str) -> list[str]:
        """Test files whose names infer to ``feature_id``."""
        return [rel for rel in self.all_test_files() if self.infer_feature(rel) == feature_id]

    def test_files(self, feature_id: str, fs: FeatureState | None = None) -> list[str]:
        """
        Resolve a feature's test files.

        Mapped test files that exist on disk win; otherwise falls back to
        a structural scan of the project.
        """
        if fs is not None:
            mapped = [rel for rel in fs.test_files() if (self.layout.root / rel).is_file()]
            if mapped:
                return sorted(mapped)
        return self.scanned_test_files(feature_id)

    def has_tests(
        self,
        feature_id: str,
        fs: FeatureState | None = None,
        entry: ReviewStatusEntry | None = None,
    ) -> bool:
        """Whether tests are resolvable for a feature by any means."""
        if fs is not None and fs.test_mappings:
            return True
        if entry is not None and entry.tests_written:
            return True
        return bool(self.scanned_test_files(feature_id))

    def has_prd_anchor(self, feature_id: str) -> bool:
        return find_anchor_line(self.layout.prd_path, feature_id) is not None

    def has_seed(self, feature_id: str) -> bool:
        return self.layout.seed_path(feature_id).is_file()

    def has_bdd(self, feature_id: str) -> bool:
        return self.layout.bdd_path(feature_id).is_file()

    def impl_files(self, feature_id: str) -> list[str]:
        return sorted(
            rel
            for rel in self.layout.iter_files()
            if is_impl_file(rel)
            and not is_test_file(rel)
            and self.infer_feature(rel) == feature_id
        )

    def exists(
        self, kind: ArtifactKind, feature_id: str, fs: FeatureState | None = None
    ) -> bool:
        """Whether the artifact of ``kind`` exists for a feature."""
        if kind is ArtifactKind.PRD:
            return self.has_prd_anchor(feature_id)
        if kind is ArtifactKind.SEED:
            return self.has_seed(feature_id)
        if kind is ArtifactKind.BDD:
            return self.has_bdd(feature_id)
        if kind is ArtifactKind.TEST:
            return bool(self.test_files(feature_id, fs))
        return bool(self.impl_files(feature_id))

    def artifact_path(
        self, kind: ArtifactKind, feature_id: str, fs: FeatureState | None = None
    ) -> str:
        """Project-relative path(s) of an artifact, for reporting."""
        if kind is ArtifactKind.PRD:
            return self.layout.relative(self.layout.prd_path)
        if kind is ArtifactKind.SEED:
            return self.layout.relative(self.layout.seed_path(feature_id))
        if kind is ArtifactKind.BDD:
            return self.layout.relative(self.layout.bdd_path(feature_id))
        if kind is ArtifactKind.TEST:
            return ", ".join(self.test_files(feature_id, fs))
        return ", ".join(self.impl_files(feature_id))

    def fingerprint(
        self,
        kind: ArtifactKind,
        feature_id: str,
        fs: FeatureState | None = None,
    ) -> str | None:
        """
        Compute the content fingerprint of an artifact.

        Args:
            kind: Artifact kind (implementation files are not fingerprinted)
            feature_id: Feature the artifact belongs to
            fs: Feature state, used to resolve mapped test files

        Returns:
            Hex SHA-256 digest, or None if the artifact is absent

        Raises:
            StoreIOError: If a present artifact cannot be read
        """
        if kind is ArtifactKind.PRD:
            try:
                section = extract_section(self.layout.prd_path, feature_id)
            except PipelineError:
                return None
            return _sha256(section.content.encode("utf-8"))

        if kind is ArtifactKind.SEED:
            data = _read_bytes(self.layout.seed_path(feature_id))
            return _sha256(data) if data is not None else None

        if kind is ArtifactKind.BDD:
            data = _read_bytes(self.layout.bdd_path(feature_id))
            return _sha256(data) if data is not None else None

        if kind is ArtifactKind.TEST:
            files = self.test_files(feature_id, fs)
            if not files:
                return None
            digest = hashlib.sha256()
            for rel in sorted(files):
                data = _read_bytes(self.layout.root / rel)
                if data is None:
                    continue
                digest.update(rel.encode("utf-8"))
                digest.update(b"\0")
                digest.update(data)
                digest.update(b"\0")
            return digest.hexdigest()

        return None

    def derive_stage(self, feature_id: str, fs: FeatureState | None = None) -> Stage:
        """Structural stage: the furthest stage whose artifact exists on disk."""
        for kind in (ArtifactKind.TEST, ArtifactKind.BDD, ArtifactKind.SEED):
            if self.exists(kind, feature_id, fs):
                return kind.stage
        return Stage.PRD

    def scenario_count(self, feature_id: str) -> int:
        return count_scenarios(self.layout.bdd_path(feature_id))
