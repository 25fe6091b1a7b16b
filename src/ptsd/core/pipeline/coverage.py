"""
Scenario test coverage.

Compares the number of scenarios in each tagged scenario file against
the number of test mappings recorded for its feature.
"""

import logging

from ptsd.core.artifacts import count_scenarios, read_feature_tag
from ptsd.core.pipeline.models import CoverageEntry, CoverageStatus
from ptsd.core.project import Project

logger = logging.getLogger(__name__)


def coverage_status(scenarios: int, tests: int) -> CoverageStatus:
    if tests == 0:
        return CoverageStatus.NO_TESTS
    if tests >= scenarios:
        return CoverageStatus.COVERED
    return CoverageStatus.PARTIAL


def check_coverage(project: Project) -> list[CoverageEntry]:
    """
    Report scenario coverage for every tagged scenario file.

    Files without an ``@feature:`` tag are skipped. A feature with no
    recorded state counts as having no tests.

    Returns:
        One entry per scenario file, sorted by file name

    Raises:
        StoreIOError: If a scenario file or the state file cannot be read
    """
    state = project.state.load()
    entries: list[CoverageEntry] = []

    for path in sorted(project.layout.bdd_dir.glob("*.feature")):
        feature_id = read_feature_tag(path)
        if not feature_id:
            logger.debug("Skipping untagged scenario file %s", path.name)
            continue

        fs = state.features.get(feature_id)
        scenarios = count_scenarios(path)
        tests = len(fs.test_mappings) if fs is not None else 0
        entries.append(
            CoverageEntry(
                feature=feature_id,
                bdd_file=project.layout.relative(path),
                scenarios=scenarios,
                tests=tests,
                status=coverage_status(scenarios, tests),
            )
        )

    logger.debug("Checked coverage of %d scenario file(s)", len(entries))
    return entries
