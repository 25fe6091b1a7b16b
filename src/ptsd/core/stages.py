"""
Pipeline stage model.

A feature moves through five ordered stages:

    prd < seed < bdd < tests < impl

Each stage is defined by one artifact kind:

- prd: the feature's requirements anchor in .ptsd/docs/PRD.md
- seed: the seed manifest .ptsd/seeds/<id>/seed.yaml
- bdd: the scenario file .ptsd/bdd/<id>.feature
- tests: the feature's test file(s)
- impl: the feature's implementation file(s)
"""

from enum import Enum

from ptsd.core.errors import UserInputError

# Legacy spellings found in older state files
_STAGE_ALIASES = {
    "test": "tests",
    "implemented": "impl",
}


class Stage(str, Enum):
    """Ordered pipeline stages."""

    PRD = "prd"
    SEED = "seed"
    BDD = "bdd"
    TESTS = "tests"
    IMPL = "impl"

    @property
    def index(self) -> int:
        """Position of this stage in the pipeline (prd = 0)."""
        return _STAGE_ORDER.index(self)

    def next(self) -> "Stage | None":
        """Return the following stage, or None at the terminal stage."""
        idx = self.index + 1
        if idx >= len(_STAGE_ORDER):
            return None
        return _STAGE_ORDER[idx]

    @property
    def artifact(self) -> "ArtifactKind":
        """Artifact kind that defines this stage."""
        return ArtifactKind(_STAGE_TO_ARTIFACT[self])

    @classmethod
    def parse(cls, value: "str | Stage") -> "Stage":
        """
        Parse a stage name.

        Args:
            value: Stage name (e.g. 'bdd'); legacy spellings 'test' and
                'implemented' are accepted

        Returns:
            Corresponding Stage

        Raises:
            UserInputError: If the name is not a known stage
        """
        if isinstance(value, Stage):
            return value
        name = _STAGE_ALIASES.get(value.strip(), value.strip())
        try:
            return cls(name)
        except ValueError:
            valid = "|".join(s.value for s in cls)
            raise UserInputError(f"invalid stage {value!r}: must be {valid}") from None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Stage):
            return NotImplemented
        return self.index < other.index

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Stage):
            return NotImplemented
        return self.index <= other.index

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Stage):
            return NotImplemented
        return self.index > other.index

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Stage):
            return NotImplemented
        return self.index >= other.index


class ArtifactKind(str, Enum):
    """Kinds of files that define a stage."""

    PRD = "prd"
    SEED = "seed"
    BDD = "bdd"
    TEST = "test"
    IMPL = "impl"

    @property
    def stage(self) -> Stage:
        """Stage this artifact kind belongs to."""
        return _ARTIFACT_TO_STAGE[self]


_STAGE_ORDER: list[Stage] = [Stage.PRD, Stage.SEED, Stage.BDD, Stage.TESTS, Stage.IMPL]

_STAGE_TO_ARTIFACT: dict[Stage, str] = {
    Stage.PRD: "prd",
    Stage.SEED: "seed",
    Stage.BDD: "bdd",
    Stage.TESTS: "test",
    Stage.IMPL: "impl",
}

_ARTIFACT_TO_STAGE: dict[ArtifactKind, Stage] = {
    ArtifactKind.PRD: Stage.PRD,
    ArtifactKind.SEED: Stage.SEED,
    ArtifactKind.BDD: Stage.BDD,
    ArtifactKind.TEST: Stage.TESTS,
    ArtifactKind.IMPL: Stage.IMPL,
}

# Artifact kinds whose content is fingerprinted, in pipeline order
FINGERPRINTED_KINDS: list[ArtifactKind] = [
    ArtifactKind.PRD,
    ArtifactKind.SEED,
    ArtifactKind.BDD,
    ArtifactKind.TEST,
]


def all_stages() -> list[Stage]:
    """Return every stage in pipeline order."""
    return list(_STAGE_ORDER)
