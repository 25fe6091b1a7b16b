"""
ptsd - Pipeline state tracking for requirements-driven development

Enforces the Requirements -> Seed -> Scenarios -> Tests -> Implementation
pipeline for every feature of a project, with file-backed state under .ptsd/.
"""

__version__ = "0.4.0"

# Re-export core models for convenience
from ptsd.core.config.models import PtsdConfig
from ptsd.core.stages import ArtifactKind, Stage

__all__ = ["ArtifactKind", "PtsdConfig", "Stage", "__version__"]
