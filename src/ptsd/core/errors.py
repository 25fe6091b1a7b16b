"""
Categorized errors raised by the ptsd core.

Every exception carries a ``category`` that the CLI maps to an exit code:

- user: invalid input to a public operation (bad score, unknown stage name)
- validation: a referenced entity does not exist, or already exists
- pipeline: a pipeline rule forbids the operation (missing prerequisite)
- config: the configuration file cannot be parsed or validated
- io: a state file is present but cannot be read, parsed or written

Regression findings, gate-check denials and validation issues are NOT
exceptions; they are returned as ordinary result values.
"""


class PtsdError(Exception):
    """Base exception for all ptsd errors."""

    category = "io"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"err:{self.category} {self.message}"


class UserInputError(PtsdError):
    """Raised when a public operation receives invalid input."""

    category = "user"


class EntityNotFoundError(PtsdError):
    """Raised when a referenced feature or task does not exist."""

    category = "validation"


class DuplicateEntityError(PtsdError):
    """Raised when creating a feature that already exists."""

    category = "validation"


class PipelineError(PtsdError):
    """Raised when a pipeline rule forbids the requested operation."""

    category = "pipeline"


class ConfigError(PtsdError):
    """Raised when configuration cannot be loaded or validated."""

    category = "config"


class StoreIOError(PtsdError):
    """Raised when a persisted file is present but unreadable or corrupt."""

    category = "io"
