"""
Tests for regression detection and reconciliation.
"""

import pytest

from ptsd.core.stages import ArtifactKind, Stage
from ptsd.core.state import Severity
from ptsd.core.state.regression import RegressionDetector, detect_regressions


def set_stage(project, feature_id, stage):
    with project.state.transaction() as state:
        state.feature(feature_id).stage = stage


@pytest.fixture
def auth(builder, project):
    """A feature with every fingerprinted artifact and a recorded baseline."""
    builder.feature("auth").prd({"auth": "Users log in."}).seed("auth").bdd("auth")
    builder.write("internal/auth_test.go", "package auth\n")
    set_stage(project, "auth", Stage.TESTS)
    assert detect_regressions(project) == []
    return builder


class TestBaseline:
    """Test first-observation behavior."""

    def test_first_pass_records_fingerprints_silently(self, auth, project):
        fs = project.state.load().features["auth"]
        assert set(fs.fingerprints) == {
            ArtifactKind.PRD,
            ArtifactKind.SEED,
            ArtifactKind.BDD,
            ArtifactKind.TEST,
        }
        assert fs.stage is Stage.TESTS

    def test_features_without_stage_are_skipped(self, builder, project):
        builder.feature("auth").seed("auth")
        with project.state.transaction() as state:
            state.feature("auth")
        assert detect_regressions(project) == []
        assert project.state.load().features["auth"].fingerprints == {}

    def test_missing_artifact_is_skipped(self, builder, project):
        builder.feature("auth").seed("auth")
        set_stage(project, "auth", Stage.SEED)
        detect_regressions(project)
        assert list(project.state.load().features["auth"].fingerprints) == [ArtifactKind.SEED]


class TestRegressions:
    """Test classification of out-of-order edits."""

    def test_prd_change_downgrades_stage(self, auth, project):
        auth.prd({"auth": "Users log in with SSO."})

        warnings = detect_regressions(project)

        assert len(warnings) == 1
        assert warnings[0].severity is Severity.ERROR
        assert warnings[0].category == "regression"
        assert warnings[0].artifact_kind is ArtifactKind.PRD
        assert warnings[0].message == "prd changed at stage tests, stage downgraded"
        assert project.state.load().features["auth"].stage is Stage.PRD

    def test_edit_to_other_prd_section_is_ignored(self, builder, project):
        builder.feature("auth").feature("billing")
        builder.prd({"auth": "Users log in.", "billing": "Monthly."}).seed("auth")
        set_stage(project, "auth", Stage.SEED)
        detect_regressions(project)

        builder.prd({"auth": "Users log in.", "billing": "Weekly."})
        assert detect_regressions(project) == []

    def test_bdd_change_warns_without_downgrade(self, auth, project):
        auth.bdd("auth", scenarios=2)

        warnings = detect_regressions(project)

        assert [w.severity for w in warnings] == [Severity.WARN]
        assert warnings[0].message == "bdd changed at stage tests, downstream may be stale"
        assert warnings[0].artifact_path == ".ptsd/bdd/auth.feature"
        assert project.state.load().features["auth"].stage is Stage.TESTS

    def test_test_change_at_impl(self, auth, project):
        set_stage(project, "auth", Stage.IMPL)
        auth.write("internal/auth_test.go", "package auth\n\nfunc TestLogin() {}\n")

        warnings = detect_regressions(project)

        assert len(warnings) == 1
        assert warnings[0].message == "test changed at stage impl, re-run tests"
        assert warnings[0].artifact_path == "internal/auth_test.go"

    def test_change_at_current_stage_is_silent(self, auth, project):
        auth.write("internal/auth_test.go", "package auth\n\n// more\n")
        assert detect_regressions(project) == []

    def test_second_pass_is_silent(self, auth, project):
        auth.seed("auth", "feature: auth\nfiles: [login.go]\n")
        assert len(detect_regressions(project)) == 1
        assert detect_regressions(project) == []

    def test_prd_downgrade_makes_later_changes_silent(self, auth, project):
        auth.prd({"auth": "Changed."}).seed("auth", "feature: auth\nfiles: [x]\n")

        warnings = detect_regressions(project)

        assert [w.artifact_kind for w in warnings] == [ArtifactKind.PRD]

    def test_unchanged_state_is_not_rewritten(self, auth, project):
        before = project.state.path.stat().st_mtime_ns
        content = project.state.path.read_bytes()
        RegressionDetector(project).detect_and_reconcile()
        assert project.state.path.read_bytes() == content
        assert project.state.path.stat().st_mtime_ns == before

    def test_warnings_ordered_by_feature(self, auth, project):
        auth.feature("billing").seed("billing")
        set_stage(project, "billing", Stage.BDD)
        detect_regressions(project)

        auth.seed("billing", "feature: billing\nfiles: [a]\n")
        auth.seed("auth", "feature: auth\nfiles: [b]\n")

        assert [w.feature for w in detect_regressions(project)] == ["auth", "billing"]
