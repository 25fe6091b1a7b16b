"""
Feature state store for reading/writing .ptsd/state.yaml.

The store has no partial updates: every mutation loads the full snapshot,
changes it in memory and atomically replaces the file. Keys are written in
sorted order so saving unchanged state is byte-identical.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pydantic import ValidationError

from ptsd.core.errors import StoreIOError
from ptsd.core.state.models import StateFile
from ptsd.utils.yamlfile import read_yaml, write_yaml

logger = logging.getLogger(__name__)


class StateStore:
    """
    Store for per-feature pipeline state.

    Example:
        >>> store = StateStore(Path(".ptsd/state.yaml"))
        >>> with store.transaction() as state:
        ...     state.feature("auth").test_mappings.append("bdd/auth.feature::auth_test.go")
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> StateFile:
        """
        Load the full state snapshot.

        Returns:
            StateFile (empty if the file doesn't exist)

        Raises:
            StoreIOError: If the file is present but unreadable or invalid
        """
        data = read_yaml(self.path)
        if data is None:
            return StateFile()
        try:
            return StateFile.model_validate({"features": data.get("features") or {}})
        except ValidationError as e:
            raise StoreIOError(f"invalid state file {self.path}: {e}") from e

    def save(self, state: StateFile) -> None:
        """Atomically rewrite the full state snapshot."""
        data = state.model_dump(mode="json")
        write_yaml(self.path, data)
        logger.debug("Saved state for %d feature(s)", len(state.features))

    @contextmanager
    def transaction(self) -> Iterator[StateFile]:
        """
        Load, yield for mutation, then save.

        Nothing is written if the block raises.
        """
        state = self.load()
        yield state
        self.save(state)
