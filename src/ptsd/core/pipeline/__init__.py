"""
Pipeline-level operations: validation, context, progress, coverage and
scaffolding.
"""

from ptsd.core.pipeline.context import ContextBuilder, build_context
from ptsd.core.pipeline.coverage import check_coverage
from ptsd.core.pipeline.models import (
    ContextLine,
    ContextLineType,
    CoverageEntry,
    CoverageStatus,
    ValidationIssue,
    ValidationReport,
)
from ptsd.core.pipeline.progress import (
    advance_stage,
    show_feature,
    sync_state,
    update_feature_status,
)
from ptsd.core.pipeline.scaffold import add_bdd, init_seed, map_test
from ptsd.core.pipeline.validator import PipelineValidator, validate

__all__ = [
    # Models
    "ContextLine",
    "ContextLineType",
    "CoverageEntry",
    "CoverageStatus",
    "ValidationIssue",
    "ValidationReport",
    # Validation and context
    "ContextBuilder",
    "PipelineValidator",
    "build_context",
    "validate",
    # Coverage
    "check_coverage",
    # Progress
    "advance_stage",
    "show_feature",
    "sync_state",
    "update_feature_status",
    # Scaffolding
    "add_bdd",
    "init_seed",
    "map_test",
]
