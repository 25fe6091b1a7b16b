"""
Configuration models and loading.

This module provides Pydantic models for ptsd configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .loader import (
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import (
    ProjectConfig,
    PtsdConfig,
    ReviewConfig,
    ValidationConfig,
)

__all__ = [
    # Models
    "ProjectConfig",
    "PtsdConfig",
    "ReviewConfig",
    "ValidationConfig",
    # Loader functions
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
]
