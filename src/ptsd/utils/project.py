"""
Project root discovery utilities for ptsd.

This module provides functions for discovering project boundaries
by searching for marker directories like .ptsd/ or .git/.
"""

from pathlib import Path

# Markers that indicate a project root, in order of priority
PROJECT_ROOT_MARKERS = [
    ".ptsd",  # ptsd pipeline state
    ".git",  # Git repository
]


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Find the project root directory by searching upward for marker files.

    Each directory from the start upward is checked for every marker in
    priority order, so the nearest directory holding any marker wins.

    Args:
        start: Directory to start searching from. Defaults to current working directory.

    Returns:
        Path to the project root directory, or None if not found.

    Example:
        >>> find_project_root()  # From /project/src/module/
        PosixPath('/project')
    """
    if start is None:
        start = Path.cwd()

    # Ensure we have an absolute path
    start = start.resolve()

    for current in [start, *start.parents]:
        for marker in PROJECT_ROOT_MARKERS:
            if (current / marker).exists():
                return current

    return None


def get_project_root(start: Path | None = None) -> Path:
    """
    Get the project root directory, raising an error if not found.

    Args:
        start: Directory to start searching from. Defaults to current working directory.

    Returns:
        Path to the project root directory.

    Raises:
        FileNotFoundError: If no project root can be found.
    """
    root = find_project_root(start)
    if root is None:
        start_dir = start.resolve() if start else Path.cwd()
        raise FileNotFoundError(
            f"Could not find project root from {start_dir}. "
            f"Expected one of: {', '.join(PROJECT_ROOT_MARKERS)}"
        )
    return root
