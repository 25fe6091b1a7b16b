"""
Feature state: persisted stage, fingerprints, scores and test mappings,
plus the regression detector that reconciles fingerprints with disk.
"""

from ptsd.core.state.models import (
    FeatureState,
    RegressionWarning,
    ScoreEntry,
    Severity,
    StateFile,
)
from ptsd.core.state.store import StateStore

__all__ = [
    "FeatureState",
    "RegressionWarning",
    "ScoreEntry",
    "Severity",
    "StateFile",
    "StateStore",
]
