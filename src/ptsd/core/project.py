"""
Project handle.

Bundles the stores of one ptsd project so components receive a single
object instead of reaching for module-level state. Nothing is cached:
every store re-reads its file on each call.
"""

from pathlib import Path

from ptsd.core.config import PtsdConfig, load_config
from ptsd.core.layout import ProjectLayout
from ptsd.core.registry.store import FeatureRegistry
from ptsd.core.review.status_store import ReviewStatusStore
from ptsd.core.state.store import StateStore
from ptsd.core.tasks.store import TaskStore
from ptsd.utils.project import get_project_root


class Project:
    """
    Stores and layout of a ptsd project rooted at ``root``.

    Example:
        >>> project = Project(Path("/work/app"))
        >>> project.registry.ids()
        ['auth', 'billing']
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.layout = ProjectLayout(self.root)
        self.registry = FeatureRegistry(self.layout.features_path)
        self.state = StateStore(self.layout.state_path)
        self.review_status = ReviewStatusStore(self.layout.review_status_path)
        self.tasks = TaskStore(self.layout.tasks_path, self.registry)

    @classmethod
    def discover(cls, start: Path | None = None) -> "Project":
        """Open the project containing ``start`` (default: cwd)."""
        return cls(get_project_root(start))

    def config(self) -> PtsdConfig:
        """Load the current configuration (re-read on every call)."""
        return load_config(self.root)

    def __repr__(self) -> str:
        return f"Project({str(self.root)!r})"
