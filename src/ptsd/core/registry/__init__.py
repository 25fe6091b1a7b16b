"""
Feature registry: the list of features and their PRD anchors.
"""

from ptsd.core.registry.anchors import (
    AnchorReport,
    PrdSection,
    check_anchors,
    extract_anchors,
    extract_section,
    find_anchor_line,
)
from ptsd.core.registry.models import Feature, FeatureDetail, FeaturesFile, FeatureStatus
from ptsd.core.registry.store import FeatureRegistry

__all__ = [
    # Models
    "Feature",
    "FeatureDetail",
    "FeatureStatus",
    "FeaturesFile",
    # Store
    "FeatureRegistry",
    # Anchors
    "AnchorReport",
    "PrdSection",
    "check_anchors",
    "extract_anchors",
    "extract_section",
    "find_anchor_line",
]
