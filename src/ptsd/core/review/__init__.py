"""
Review scores, verdicts and the stage gate.

ReviewGate is imported from ptsd.core.review.gate.
"""

from ptsd.core.review.models import ReviewStatusEntry, ReviewStatusFile, ReviewVerdict
from ptsd.core.review.status_store import ReviewStatusStore

__all__ = [
    "ReviewStatusEntry",
    "ReviewStatusFile",
    "ReviewStatusStore",
    "ReviewVerdict",
]
