"""Error taxonomy for a generation run.

Every error aborts the whole run. The CLI maps each class to its own
exit status so scripts can tell which stage failed.
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for fatal generation errors."""

    exit_code = 1


class ConfigurationError(GeneratorError):
    """Raised when the generator options are incomplete or invalid."""

    exit_code = 2


class DiscoveryError(GeneratorError):
    """Raised when the profile document cannot be fetched or has no links."""

    exit_code = 3


class CollectionError(GeneratorError):
    """Raised when the schema of an entity cannot be fetched."""

    exit_code = 4

    def __init__(self, entity_name: str, message: str | None = None) -> None:
        self.entity_name = entity_name
        super().__init__(message or f"Could not collect schema for '{entity_name}'.")


class AuthenticationError(GeneratorError):
    """Raised when the credential exchange fails."""

    exit_code = 5


class ResolutionError(GeneratorError):
    """Raised when schema references of an entity cannot be resolved."""

    exit_code = 6

    def __init__(self, entity_name: str, message: str | None = None) -> None:
        self.entity_name = entity_name
        super().__init__(
            message or f"Could not collect schema references for '{entity_name}'."
        )


class EmissionError(GeneratorError):
    """Raised when resolved schemas cannot be rendered to modules."""

    exit_code = 7
