"""
Write authorization and auto-tracking for artifact paths.
"""

from ptsd.core.gate.autotrack import TrackResult, track
from ptsd.core.gate.classify import PathClass, PathKind, classify_path
from ptsd.core.gate.gatecheck import GateCheckResult, check

__all__ = [
    "GateCheckResult",
    "PathClass",
    "PathKind",
    "TrackResult",
    "check",
    "classify_path",
    "track",
]
