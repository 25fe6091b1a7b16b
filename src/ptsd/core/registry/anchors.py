"""
PRD anchor handling.

Each feature's requirements live in .ptsd/docs/PRD.md below an anchor line:

    <!-- feature:auth -->

The anchor is the requirements-stage artifact for that feature.
"""

from dataclasses import dataclass, field
from pathlib import Path

from ptsd.core.errors import PipelineError, StoreIOError
from ptsd.core.layout import PRD_ANCHOR_PREFIX, PRD_ANCHOR_SUFFIX


@dataclass
class AnchorReport:
    """Result of comparing PRD anchors with registered feature ids."""

    missing: list[str] = field(default_factory=list)
    orphaned: list[str] = field(default_factory=list)


@dataclass
class PrdSection:
    """Requirements text that belongs to one feature."""

    feature_id: str
    start_line: int
    end_line: int
    content: str


def _read_prd_lines(prd_path: Path) -> list[str]:
    if not prd_path.exists():
        return []
    try:
        return prd_path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise StoreIOError(f"failed to read {prd_path}: {e}") from e


def _anchor_id(line: str) -> str | None:
    stripped = line.strip()
    if stripped.startswith(PRD_ANCHOR_PREFIX) and stripped.endswith(PRD_ANCHOR_SUFFIX):
        return stripped[len(PRD_ANCHOR_PREFIX) : -len(PRD_ANCHOR_SUFFIX)].strip()
    return None


def extract_anchors(prd_path: Path) -> list[str]:
    """
    List feature ids anchored in the PRD, in document order.

    A missing PRD has no anchors.
    """
    anchors: list[str] = []
    for line in _read_prd_lines(prd_path):
        anchor = _anchor_id(line)
        if anchor:
            anchors.append(anchor)
    return anchors


def find_anchor_line(prd_path: Path, feature_id: str) -> int | None:
    """Return the 1-based line number of a feature's anchor, if present."""
    for lineno, line in enumerate(_read_prd_lines(prd_path), start=1):
        if _anchor_id(line) == feature_id:
            return lineno
    return None


def check_anchors(prd_path: Path, feature_ids: list[str]) -> AnchorReport:
    """
    Compare PRD anchors against feature ids.

    Args:
        prd_path: Path to PRD.md
        feature_ids: Ids that are expected to have an anchor

    Returns:
        AnchorReport with ids lacking an anchor and anchors naming no feature
    """
    anchors = extract_anchors(prd_path)
    anchor_set = set(anchors)
    feature_set = set(feature_ids)

    return AnchorReport(
        missing=[f for f in feature_ids if f not in anchor_set],
        orphaned=[a for a in anchors if a not in feature_set],
    )


def extract_section(prd_path: Path, feature_id: str) -> PrdSection:
    """
    Extract the PRD text between a feature's anchor and the next anchor.

    Raises:
        PipelineError: If the feature has no anchor
    """
    lines = _read_prd_lines(prd_path)
    start: int | None = None

    for idx, line in enumerate(lines):
        if start is None:
            if _anchor_id(line) == feature_id:
                start = idx
            continue
        if PRD_ANCHOR_PREFIX in line:
            return PrdSection(
                feature_id=feature_id,
                start_line=start + 1,
                end_line=idx,
                content="\n".join(lines[start + 1 : idx]),
            )

    if start is None:
        raise PipelineError(f"anchor not found for {feature_id}")

    return PrdSection(
        feature_id=feature_id,
        start_line=start + 1,
        end_line=len(lines),
        content="\n".join(lines[start + 1 :]),
    )
