"""
Tests for the ptsd command line.

Commands run against a temporary project used as working directory.
"""

import json

import pytest
from typer.testing import CliRunner

from ptsd import __version__
from ptsd.cli import app
from ptsd.cli.errors import ExitCode
from ptsd.core.stages import Stage
from ptsd.core.state.regression import detect_regressions

runner = CliRunner()


def invoke(*args):
    return runner.invoke(app, list(args))


# ==============================================================================
# Hook commands
# ==============================================================================


class TestGateCheckCommand:
    """Test ptsd gate-check."""

    def test_denied_write_exits_2(self, builder, in_project):
        builder.feature("auth")
        result = invoke("gate-check", "--file", ".ptsd/bdd/auth.feature")
        assert result.exit_code == ExitCode.USER_ERROR
        assert "no seed for auth" in result.output

    def test_allowed_write(self, in_project):
        result = invoke("--agent", "gate-check", "--file", ".ptsd/docs/PRD.md")
        assert result.exit_code == 0
        assert result.output.strip() == "ok"

    def test_absolute_path(self, builder, in_project):
        builder.feature("auth").seed("auth")
        result = invoke("gate-check", "--file", str(in_project / ".ptsd/bdd/auth.feature"))
        assert result.exit_code == 0
        assert "Gate check passed" in result.output

    def test_review_status_blocked(self, in_project):
        result = invoke("gate-check", "--file", ".ptsd/review-status.yaml")
        assert result.exit_code == ExitCode.USER_ERROR
        assert "use ptsd review" in result.output


class TestAutoTrackCommand:
    """Test ptsd auto-track."""

    def test_tracks_then_no_op(self, builder, in_project):
        builder.feature("auth")

        first = invoke("--agent", "auto-track", "--file", "internal/auth_test.go")
        second = invoke("--agent", "auto-track", "--file", "internal/auth_test.go")

        assert first.exit_code == 0
        assert first.output.strip() == "tracked: auth stage=tests tests=written"
        assert second.output.strip() == "ok no-op"

    def test_human_output(self, builder, in_project):
        builder.feature("auth")
        result = invoke("auto-track", "--file", ".ptsd/bdd/auth.feature")
        assert "Updated auth stage=bdd tests=absent" in result.output

    def test_unrecognized_file(self, in_project):
        result = invoke("--agent", "auto-track", "--file", "README.md")
        assert result.exit_code == 0
        assert result.output.strip() == "ok no-op"


# ==============================================================================
# Pipeline commands
# ==============================================================================


class TestValidateCommand:
    """Test ptsd validate."""

    def test_passing_project(self, builder, in_project):
        builder.feature("auth").prd({"auth": "Users log in."})
        result = invoke("validate")
        assert result.exit_code == 0
        assert "Validation passed" in result.output

    def test_failing_project_exits_1(self, builder, in_project):
        builder.feature("auth").bdd("auth")
        result = invoke("--agent", "validate")
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "err:pipeline auth: has no prd anchor" in result.output
        assert "err:pipeline auth: has bdd but no seed" in result.output

    def test_json_output(self, builder, in_project):
        builder.feature("auth")
        result = invoke("validate", "--json")
        data = json.loads(result.output)
        assert data["issues"][0]["message"] == "has no prd anchor"

    def test_config_error_exits_3(self, builder, in_project):
        builder.write(".ptsd/ptsd.yaml", "review: [oops\n")
        result = invoke("--agent", "validate")
        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "err:config" in result.output


class TestContextCommand:
    """Test ptsd context."""

    def test_agent_lines(self, builder, project, in_project):
        builder.feature("auth").seed("auth")
        project.tasks.add("auth", "tighten seed")

        result = invoke("--agent", "context")

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "next: auth stage=seed action=write-bdd",
            "task: T-1 [TODO] auth tighten seed",
        ]

    def test_human_output(self, builder, in_project):
        builder.feature("auth")
        result = invoke("context")
        assert "next: auth stage=prd action=write-seed" in result.output


class TestStatusCommand:
    """Test ptsd status."""

    def test_reports_regressions(self, builder, project, in_project):
        builder.feature("auth").prd({"auth": "Users log in."}).seed("auth").bdd("auth")
        with project.state.transaction() as state:
            state.feature("auth").stage = Stage.BDD
        detect_regressions(project)
        builder.prd({"auth": "Users log in with SSO."})

        result = invoke("--agent", "status")

        assert result.exit_code == 0
        assert "err:pipeline regression auth: prd changed at stage bdd" in result.output
        assert "auth status=active stage=prd review=pending" in result.output

    def test_corrupt_state_exits_4(self, builder, in_project):
        builder.write(".ptsd/state.yaml", "features: [broken\n")
        result = invoke("--agent", "status")
        assert result.exit_code == ExitCode.IO_ERROR
        assert "err:io" in result.output


class TestReviewCommands:
    """Test ptsd review record/gate."""

    def test_record_and_gate(self, in_project):
        recorded = invoke("--agent", "review", "record", "auth", "bdd", "8")
        assert recorded.exit_code == 0
        assert recorded.output.strip() == "ok auth bdd score=8 passed"

        gate = invoke("--agent", "review", "gate", "auth", "bdd")
        assert gate.exit_code == 0
        assert gate.output.strip() == "pass"

    def test_failing_gate_exits_1(self, in_project):
        invoke("review", "record", "auth", "bdd", "3")
        result = invoke("--agent", "review", "gate", "auth", "bdd")
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert result.output.strip() == "fail"

    def test_invalid_score_exits_2(self, in_project):
        result = invoke("--agent", "review", "record", "auth", "bdd", "11")
        assert result.exit_code == ExitCode.USER_ERROR
        assert "err:user score must be 0-10, got 11" in result.output

    def test_redo_task_is_reported(self, builder, in_project):
        builder.config(min_score=7, auto_redo=True)
        result = invoke("--agent", "review", "record", "auth", "prd", "2")
        assert result.output.strip() == "ok auth prd score=2 failed task=T-1"


class TestStateCommands:
    """Test ptsd state sync/advance."""

    def test_sync(self, builder, in_project):
        builder.feature("auth").feature("billing")
        result = invoke("--agent", "state", "sync")
        assert result.output.strip() == "ok synced=2"

    def test_advance_is_gated(self, builder, in_project):
        builder.feature("auth")
        assert invoke("--agent", "state", "advance", "auth").output.strip() == (
            "ok auth stage=prd"
        )

        blocked = invoke("--agent", "state", "advance", "auth")
        assert blocked.exit_code == ExitCode.GENERAL_ERROR
        assert "err:pipeline review gate not passed" in blocked.output

        invoke("review", "record", "auth", "prd", "9")
        assert invoke("--agent", "state", "advance", "auth").output.strip() == (
            "ok auth stage=seed"
        )


# ==============================================================================
# Features and tasks
# ==============================================================================


class TestFeatureCommands:
    """Test ptsd feature ..."""

    def test_add_and_list(self, in_project):
        assert invoke("feature", "add", "auth", "User authentication").exit_code == 0

        result = invoke("feature", "list", "--json")

        assert json.loads(result.output) == [
            {"id": "auth", "title": "User authentication", "status": "planned"}
        ]

    def test_duplicate_exits_1(self, in_project):
        invoke("feature", "add", "auth")
        result = invoke("--agent", "feature", "add", "auth")
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "err:validation feature auth already exists" in result.output

    def test_invalid_status_option(self, in_project):
        result = invoke("feature", "list", "--status", "shipped")
        assert result.exit_code == ExitCode.USER_ERROR
        assert "Invalid option: shipped" in result.output

    def test_show(self, builder, in_project):
        builder.feature("auth").prd({"auth": "Users log in."}).seed("auth").bdd("auth", 2)
        result = invoke("--agent", "feature", "show", "auth")
        assert result.output.strip() == (
            "auth status=active prd=line 3 seed=yes scenarios=2 tests=0"
        )

    def test_status_and_remove(self, builder, project, in_project):
        builder.feature("auth")
        assert invoke("feature", "status", "auth", "deferred").exit_code == 0
        assert project.registry.require("auth").status.value == "deferred"

        assert invoke("feature", "remove", "auth").exit_code == 0
        assert project.registry.ids() == []

    def test_implemented_requires_review(self, builder, in_project):
        builder.feature("auth")
        result = invoke("--agent", "feature", "status", "auth", "implemented")
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "has not reached the impl stage" in result.output


class TestTaskCommands:
    """Test ptsd task ..."""

    def test_add_list_update_next(self, builder, in_project):
        builder.feature("auth")
        assert invoke("--agent", "task", "add", "write scenarios", "-f", "auth").output.strip() == (
            "ok T-1"
        )
        invoke("task", "add", "fix lockout", "--feature", "auth", "--priority", "a")

        listed = invoke("--agent", "task", "list", "--feature", "auth")
        assert listed.output.splitlines() == [
            "T-1 [TODO] B auth write scenarios",
            "T-2 [TODO] A auth fix lockout",
        ]

        invoke("task", "update", "T-2", "--status", "done")
        nxt = invoke("--agent", "task", "next")
        assert nxt.output.splitlines() == ["T-1 [TODO] B auth write scenarios"]

    def test_unknown_feature(self, in_project):
        result = invoke("--agent", "task", "add", "orphan", "--feature", "ghost")
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "err:validation feature ghost not found" in result.output

    def test_invalid_priority(self, builder, in_project):
        builder.feature("auth")
        result = invoke("task", "add", "x", "--feature", "auth", "--priority", "Z")
        assert result.exit_code == ExitCode.USER_ERROR


# ==============================================================================
# Scaffolding and misc
# ==============================================================================


class TestScaffoldCommands:
    """Test ptsd seed/bdd/test."""

    def test_seed_bdd_map(self, builder, project, in_project):
        builder.feature("auth")

        assert invoke("--agent", "seed", "init", "auth").output.strip() == (
            "ok .ptsd/seeds/auth/seed.yaml"
        )
        assert invoke("--agent", "bdd", "add", "auth").output.strip() == (
            "ok .ptsd/bdd/auth.feature"
        )
        mapped = invoke("test", "map", ".ptsd/bdd/auth.feature", "internal/auth_test.go")

        assert mapped.exit_code == 0
        assert project.state.load().features["auth"].test_files() == ["internal/auth_test.go"]

    def test_coverage(self, builder, in_project):
        builder.feature("auth").bdd("auth", scenarios=2)
        builder.feature("billing").bdd("billing")
        invoke("test", "map", ".ptsd/bdd/auth.feature", "internal/auth_test.go")

        result = invoke("--agent", "test", "coverage")

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "auth partial scenarios=2 tests=1",
            "billing no-tests scenarios=1 tests=0",
        ]

        data = json.loads(invoke("test", "coverage", "--json").output)
        assert [(e["feature"], e["status"]) for e in data] == [
            ("auth", "partial"),
            ("billing", "no-tests"),
        ]

    def test_bdd_without_seed_exits_1(self, builder, in_project):
        builder.feature("auth")
        result = invoke("--agent", "bdd", "add", "auth")
        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "err:pipeline auth has no seed" in result.output


class TestMisc:
    """Test version and project discovery."""

    def test_version(self):
        result = invoke("version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_outside_project(self, tmp_path, monkeypatch):
        outside = tmp_path / "elsewhere"
        outside.mkdir()
        monkeypatch.chdir(outside)
        result = invoke("context")
        assert result.exit_code == ExitCode.USER_ERROR
        assert "Not in a ptsd project directory" in result.output

    @pytest.mark.parametrize("args", [["gate-check"], ["auto-track"]])
    def test_file_option_required(self, in_project, args):
        assert invoke(*args).exit_code == 2
