"""
Artifact scaffolding: seed manifests, scenario skeletons and test mappings.
"""

import logging
from pathlib import Path

from ptsd.core.artifacts import read_feature_tag
from ptsd.core.errors import EntityNotFoundError, PipelineError, StoreIOError
from ptsd.core.project import Project
from ptsd.utils.yamlfile import write_yaml

logger = logging.getLogger(__name__)


def _write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise StoreIOError(f"failed to write {path}: {e}") from e


def init_seed(project: Project, feature_id: str) -> Path:
    """
    Create an empty seed manifest for a registered feature.

    Raises:
        EntityNotFoundError: If the feature isn't registered
    """
    project.registry.require(feature_id)
    path = project.layout.seed_path(feature_id)
    write_yaml(path, {"feature": feature_id, "files": []})
    logger.info("Initialized seed for %s", feature_id)
    return path


def add_bdd(project: Project, feature_id: str) -> Path:
    """
    Create a tagged scenario file skeleton.

    Raises:
        PipelineError: If the feature has no seed
    """
    if not project.layout.seed_path(feature_id).is_file():
        raise PipelineError(f"{feature_id} has no seed")

    path = project.layout.bdd_path(feature_id)
    _write_text(path, f"@feature:{feature_id}\nFeature: {feature_id}\n")
    logger.info("Added scenarios for %s", feature_id)
    return path


def map_test(project: Project, bdd_file: str, test_file: str) -> str:
    """
    Map a scenario file to a test file.

    The feature is read from the scenario file's ``@feature:`` tag; the
    mapping ``"<bdd_file>::<test_file>"`` is appended to that feature's
    test mappings unless already present.

    Returns:
        Feature id the mapping was recorded for

    Raises:
        EntityNotFoundError: If the scenario file or its tag is missing
    """
    bdd_rel = project.layout.relative(bdd_file)
    test_rel = project.layout.relative(test_file)
    bdd_path = project.root / bdd_rel
    if not bdd_path.is_file():
        raise EntityNotFoundError(f"scenario file {bdd_rel} not found")

    feature_id = read_feature_tag(bdd_path)
    if not feature_id:
        raise EntityNotFoundError(f"no @feature tag in {bdd_rel}")

    mapping = f"{bdd_rel}::{test_rel}"
    with project.state.transaction() as state:
        mappings = state.feature(feature_id).test_mappings
        if mapping not in mappings:
            mappings.append(mapping)
            logger.info("Mapped %s to %s", bdd_rel, test_rel)

    return feature_id
