"""
Pytest configuration and shared fixtures.

Provides a temporary ptsd project, a builder for pipeline artifacts, and
environment isolation so tests never read the real user configuration.
"""

import os
from pathlib import Path

import pytest
import yaml

from ptsd.core.project import Project
from ptsd.core.registry.models import FeatureStatus
from ptsd.core.state.models import ScoreEntry

# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """
    Provide a clean environment without PTSD_* env vars.

    Points XDG_CONFIG_HOME at an empty temp directory so no user config
    is loaded.
    """
    for key in list(os.environ.keys()):
        if key.startswith("PTSD_"):
            monkeypatch.delenv(key, raising=False)

    config_home = tmp_path / "xdg-config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))

    return monkeypatch


@pytest.fixture
def user_config_dir(tmp_path):
    """Provide the temporary XDG_CONFIG_HOME/ptsd directory."""
    config_dir = tmp_path / "xdg-config" / "ptsd"
    config_dir.mkdir(parents=True)
    return config_dir


# ==============================================================================
# Project Fixtures
# ==============================================================================


@pytest.fixture
def project_dir(tmp_path):
    """
    Provide a temporary project directory.

    Creates:
    - .ptsd/
    - .git/ directory
    """
    project = tmp_path / "project"
    (project / ".ptsd").mkdir(parents=True)
    (project / ".git").mkdir()
    return project


@pytest.fixture
def project(project_dir):
    """Provide a Project rooted at project_dir."""
    return Project(project_dir)


class PipelineBuilder:
    """Writes pipeline artifacts into a project directory."""

    def __init__(self, project: Project) -> None:
        self.project = project
        self.root = project.root

    def feature(
        self, feature_id: str, status: FeatureStatus = FeatureStatus.ACTIVE, title: str = ""
    ) -> "PipelineBuilder":
        self.project.registry.add(feature_id, title or feature_id.title())
        if status is not FeatureStatus.PLANNED:
            self.project.registry.set_status(feature_id, status)
        return self

    def prd(self, sections: dict[str, str]) -> "PipelineBuilder":
        """Write PRD.md with one anchored section per feature."""
        lines = ["# Product Requirements", ""]
        for feature_id, body in sections.items():
            lines += [f"<!-- feature:{feature_id} -->", f"## {feature_id}", body, ""]
        self.write(".ptsd/docs/PRD.md", "\n".join(lines))
        return self

    def seed(self, feature_id: str, content: str | None = None) -> "PipelineBuilder":
        self.write(
            f".ptsd/seeds/{feature_id}/seed.yaml",
            content if content is not None else f"feature: {feature_id}\nfiles: []\n",
        )
        return self

    def bdd(self, feature_id: str, scenarios: int = 1) -> "PipelineBuilder":
        lines = [f"@feature:{feature_id}", f"Feature: {feature_id}", ""]
        for n in range(1, scenarios + 1):
            lines += [f"  Scenario: case {n}", "    Given a user", "    Then it works", ""]
        self.write(f".ptsd/bdd/{feature_id}.feature", "\n".join(lines))
        return self

    def config(self, **review) -> "PipelineBuilder":
        self.write(".ptsd/ptsd.yaml", yaml.safe_dump({"review": review}))
        return self

    def write(self, rel: str, content: str) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path


@pytest.fixture
def builder(project):
    """Provide a PipelineBuilder for the temporary project."""
    return PipelineBuilder(project)


@pytest.fixture
def in_project(project_dir, monkeypatch):
    """Run the test with the project as working directory."""
    monkeypatch.chdir(project_dir)
    return project_dir


@pytest.fixture
def gate_scores(project):
    """Record passing review scores for the given stages of a feature."""

    def record(feature_id, *stages, score=10):
        with project.state.transaction() as state:
            fs = state.feature(feature_id)
            for stage in stages:
                fs.scores[stage] = ScoreEntry(value=score)

    return record
