"""
Feature registry store for reading/writing .ptsd/features.yaml.

Every mutation is a read-modify-write of the whole file; features keep
their registration order.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from ptsd.core.errors import (
    DuplicateEntityError,
    EntityNotFoundError,
    StoreIOError,
    UserInputError,
)
from ptsd.core.registry.models import Feature, FeaturesFile, FeatureStatus
from ptsd.utils.yamlfile import read_yaml, write_yaml

logger = logging.getLogger(__name__)

HEADER = "# Feature registry\n# Managed by ptsd - edit with `ptsd feature`\n\n"


class FeatureRegistry:
    """
    Store for registered features.

    Example:
        >>> registry = FeatureRegistry(Path(".ptsd/features.yaml"))
        >>> registry.add("auth", "User authentication")
        >>> [f.id for f in registry.list_features()]
        ['auth']
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> list[Feature]:
        """
        Load all features.

        A missing registry file is an empty registry.

        Raises:
            StoreIOError: If the file is present but unreadable or invalid
        """
        data = read_yaml(self.path)
        if data is None:
            return []
        try:
            return FeaturesFile.model_validate(
                {"features": data.get("features") or []}
            ).features
        except ValidationError as e:
            raise StoreIOError(f"invalid feature registry {self.path}: {e}") from e

    def save(self, features: list[Feature]) -> None:
        """Rewrite the whole registry."""
        # List order is kept; only mapping keys are sorted
        data = FeaturesFile(features=features).model_dump(mode="json")
        write_yaml(self.path, data, header=HEADER)

    def ids(self) -> list[str]:
        return [f.id for f in self.load()]

    def get(self, feature_id: str) -> Feature | None:
        for feature in self.load():
            if feature.id == feature_id:
                return feature
        return None

    def require(self, feature_id: str) -> Feature:
        """
        Get a feature, raising if it isn't registered.

        Raises:
            EntityNotFoundError: If no feature has this id
        """
        feature = self.get(feature_id)
        if feature is None:
            raise EntityNotFoundError(f"feature {feature_id} not found")
        return feature

    def list_features(self, status: FeatureStatus | None = None) -> list[Feature]:
        features = self.load()
        if status is None:
            return features
        return [f for f in features if f.status == status]

    def add(self, feature_id: str, title: str = "") -> Feature:
        """
        Register a new feature with status 'planned'.

        Raises:
            UserInputError: If the id is empty or contains whitespace
            DuplicateEntityError: If the id is already registered
        """
        if not feature_id or any(c.isspace() for c in feature_id):
            raise UserInputError(f"invalid feature id {feature_id!r}")

        features = self.load()
        if any(f.id == feature_id for f in features):
            raise DuplicateEntityError(f"feature {feature_id} already exists")

        feature = Feature(id=feature_id, title=title, status=FeatureStatus.PLANNED)
        features.append(feature)
        self.save(features)
        logger.info("Registered feature %s", feature_id)
        return feature

    def set_status(self, feature_id: str, status: FeatureStatus) -> Feature:
        """
        Change a feature's lifecycle status.

        Raises:
            EntityNotFoundError: If no feature has this id
        """
        features = self.load()
        for feature in features:
            if feature.id == feature_id:
                feature.status = status
                self.save(features)
                logger.info("Feature %s status -> %s", feature_id, status.value)
                return feature
        raise EntityNotFoundError(f"feature {feature_id} not found")

    def remove(self, feature_id: str) -> None:
        """
        Remove a feature from the registry.

        Raises:
            EntityNotFoundError: If no feature has this id
        """
        features = self.load()
        remaining = [f for f in features if f.id != feature_id]
        if len(remaining) == len(features):
            raise EntityNotFoundError(f"feature {feature_id} not found")
        self.save(remaining)
        logger.info("Removed feature %s", feature_id)
