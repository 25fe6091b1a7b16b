"""
Review status store for reading/writing .ptsd/review-status.yaml.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from ptsd.core.errors import StoreIOError
from ptsd.core.review.models import ReviewStatusEntry, ReviewStatusFile
from ptsd.utils.yamlfile import read_yaml, write_yaml

logger = logging.getLogger(__name__)

HEADER = "# Review status\n# Managed by ptsd - use `ptsd review` to set verdicts\n\n"


class ReviewStatusStore:
    """
    Store for review status entries.

    Example:
        >>> store = ReviewStatusStore(Path(".ptsd/review-status.yaml"))
        >>> entries = store.load()
        >>> entries.get("auth")
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, ReviewStatusEntry]:
        """
        Load all entries keyed by feature id.

        Raises:
            StoreIOError: If the file is present but unreadable or invalid
        """
        data = read_yaml(self.path)
        if data is None:
            return {}
        try:
            return ReviewStatusFile.model_validate(
                {"features": data.get("features") or {}}
            ).features
        except ValidationError as e:
            raise StoreIOError(f"invalid review status file {self.path}: {e}") from e

    def save(self, entries: dict[str, ReviewStatusEntry]) -> None:
        data = ReviewStatusFile(features=entries).model_dump(mode="json")
        write_yaml(self.path, data, header=HEADER)
        logger.debug("Saved review status for %d feature(s)", len(entries))

    def get(self, feature_id: str) -> ReviewStatusEntry | None:
        return self.load().get(feature_id)
