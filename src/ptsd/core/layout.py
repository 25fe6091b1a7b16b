"""
On-disk layout of a ptsd project.

All pipeline state lives under <project>/.ptsd/. ProjectLayout knows where
every state file and every per-feature artifact lives, and which project
files are test or implementation files.
"""

import os
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

PTSD_DIR = ".ptsd"

# Test file naming conventions (suffix match on the file name)
TEST_FILE_SUFFIXES = ("_test.go", ".test.ts", ".test.js", "_test.py")
PYTHON_TEST_PREFIX = "test_"

IMPL_EXTENSIONS = frozenset({".go", ".ts", ".js", ".py", ".rs", ".java", ".c", ".cpp"})

# Directories never scanned for test or implementation files
SKIP_DIRS = frozenset(
    {PTSD_DIR, ".git", ".claude", "node_modules", "__pycache__", ".venv", "venv"}
)

PRD_ANCHOR_PREFIX = "<!-- feature:"
PRD_ANCHOR_SUFFIX = " -->"


def is_test_file(rel: str) -> bool:
    """Check whether a path names a test file by convention."""
    name = PurePosixPath(rel).name
    if name.endswith(TEST_FILE_SUFFIXES):
        return True
    return name.startswith(PYTHON_TEST_PREFIX) and name.endswith(".py")


def strip_test_naming(rel: str) -> str:
    """
    Strip test naming conventions from a file name.

    Example:
        >>> strip_test_naming("internal/core/auth_test.go")
        'auth'
        >>> strip_test_naming("tests/test_billing.py")
        'billing'
    """
    name = PurePosixPath(rel).name
    for suffix in TEST_FILE_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    if name.startswith(PYTHON_TEST_PREFIX) and name.endswith(".py"):
        return name[len(PYTHON_TEST_PREFIX) : -len(".py")]
    return PurePosixPath(name).stem


def is_impl_file(rel: str) -> bool:
    """Check whether a path is an implementation source file."""
    parts = PurePosixPath(rel).parts
    if parts and parts[0] in (PTSD_DIR, ".claude", ".git"):
        return False
    return PurePosixPath(rel).suffix in IMPL_EXTENSIONS


class ProjectLayout:
    """
    Paths of state files and artifacts for one project.

    Example:
        >>> layout = ProjectLayout(Path("/work/app"))
        >>> layout.bdd_path("auth")
        PosixPath('/work/app/.ptsd/bdd/auth.feature')
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.ptsd_dir = self.root / PTSD_DIR

    @property
    def config_path(self) -> Path:
        return self.ptsd_dir / "ptsd.yaml"

    @property
    def features_path(self) -> Path:
        return self.ptsd_dir / "features.yaml"

    @property
    def state_path(self) -> Path:
        return self.ptsd_dir / "state.yaml"

    @property
    def review_status_path(self) -> Path:
        return self.ptsd_dir / "review-status.yaml"

    @property
    def tasks_path(self) -> Path:
        return self.ptsd_dir / "tasks.yaml"

    @property
    def prd_path(self) -> Path:
        return self.ptsd_dir / "docs" / "PRD.md"

    @property
    def seeds_dir(self) -> Path:
        return self.ptsd_dir / "seeds"

    @property
    def bdd_dir(self) -> Path:
        return self.ptsd_dir / "bdd"

    def seed_path(self, feature_id: str) -> Path:
        return self.seeds_dir / feature_id / "seed.yaml"

    def bdd_path(self, feature_id: str) -> Path:
        return self.bdd_dir / f"{feature_id}.feature"

    def relative(self, path: str | Path) -> str:
        """
        Normalize a path to a POSIX path relative to the project root.

        Absolute paths outside the project are returned unchanged.
        """
        p = Path(path)
        if p.is_absolute():
            try:
                p = p.relative_to(self.root)
            except ValueError:
                try:
                    p = p.resolve().relative_to(self.root.resolve())
                except ValueError:
                    return p.as_posix()
        return p.as_posix()

    def iter_test_files(self) -> Iterator[str]:
        """Yield every test file in the project, relative and sorted."""
        yield from sorted(rel for rel in self.iter_files() if is_test_file(rel))

    def iter_files(self) -> Iterator[str]:
        """Yield every project file outside skipped directories (relative)."""
        for dirpath, dirnames, filenames in os.walk(self.root):
            # Pruned in place; os.walk honours the mutation
            dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]
            for filename in filenames:
                yield (Path(dirpath) / filename).relative_to(self.root).as_posix()
