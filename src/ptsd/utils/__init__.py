"""
Utility modules for ptsd.
"""

from ptsd.utils.project import find_project_root, get_project_root
from ptsd.utils.yamlfile import read_yaml, write_yaml

__all__ = [
    "find_project_root",
    "get_project_root",
    "read_yaml",
    "write_yaml",
]
