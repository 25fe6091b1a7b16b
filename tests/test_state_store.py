"""
Tests for the feature state store and its models.
"""

import pytest

from ptsd.core.errors import StoreIOError
from ptsd.core.stages import ArtifactKind, Stage
from ptsd.core.state import FeatureState, ScoreEntry, StateStore


@pytest.fixture
def store(tmp_path):
    return StateStore(tmp_path / ".ptsd" / "state.yaml")


class TestStateStore:
    """Test load/save of state.yaml."""

    def test_missing_file_is_empty_state(self, store):
        assert store.load().features == {}
        assert not store.exists()

    def test_round_trip(self, store):
        with store.transaction() as state:
            fs = state.feature("auth")
            fs.stage = Stage.BDD
            fs.fingerprints[ArtifactKind.SEED] = "abc"
            fs.scores[Stage.SEED] = ScoreEntry(value=8)
            fs.test_mappings.append(".ptsd/bdd/auth.feature::auth_test.go")

        loaded = store.load().features["auth"]
        assert loaded.stage is Stage.BDD
        assert loaded.fingerprints == {ArtifactKind.SEED: "abc"}
        assert loaded.scores[Stage.SEED].value == 8
        assert loaded.test_mappings == [".ptsd/bdd/auth.feature::auth_test.go"]

    def test_unchanged_save_is_byte_identical(self, store):
        with store.transaction() as state:
            state.feature("billing").stage = Stage.SEED
            state.feature("auth").stage = Stage.PRD
        first = store.path.read_bytes()

        store.save(store.load())
        assert store.path.read_bytes() == first

    def test_features_written_in_sorted_order(self, store):
        with store.transaction() as state:
            state.feature("zeta")
            state.feature("alpha")
        text = store.path.read_text()
        assert text.index("alpha:") < text.index("zeta:")

    def test_transaction_does_not_save_on_error(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction() as state:
                state.feature("auth").stage = Stage.IMPL
                raise RuntimeError("boom")
        assert not store.exists()

    def test_corrupt_file_is_io_error(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("features: [not, a, mapping\n")
        with pytest.raises(StoreIOError):
            store.load()

    def test_invalid_stage_is_io_error(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("features:\n  auth:\n    stage: shipped\n")
        with pytest.raises(StoreIOError):
            store.load()

    def test_legacy_stage_names(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            "features:\n"
            "  auth:\n"
            "    stage: implemented\n"
            "    scores:\n"
            "      test:\n"
            "        value: 9\n"
        )
        fs = store.load().features["auth"]
        assert fs.stage is Stage.IMPL
        assert fs.scores[Stage.TESTS].value == 9


class TestFeatureState:
    """Test FeatureState helpers."""

    def test_test_files_from_mappings(self):
        fs = FeatureState(
            test_mappings=[
                ".ptsd/bdd/auth.feature::internal/auth_test.go",
                ".ptsd/bdd/auth.feature::web/login.test.ts",
                ".ptsd/bdd/other.feature::internal/auth_test.go",
            ]
        )
        assert fs.test_files() == ["internal/auth_test.go", "web/login.test.ts"]

    def test_score_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            ScoreEntry(value=11)
