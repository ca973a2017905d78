"""Custom exceptions for docforge."""
from typing import Optional


class DocForgeError(Exception):
    """Base exception for docforge."""
    pass


class ConfigError(DocForgeError):
    """Raised when configuration files are malformed."""
    pass


class ScenarioNotFoundError(DocForgeError):
    """Raised when a requested prompt scenario is not registered."""
    pass


class ModeValidationError(DocForgeError):
    """Raised when a mode or completion tool receives malformed input.

    Raised before any mutation: no persistence call, no stream events.
    """
    pass


class PersistenceError(DocForgeError):
    """Raised when the chat store fails to persist a mode or completion change."""
    pass


class CapabilityEnumerationError(DocForgeError):
    """Raised when registered document capabilities cannot be listed."""
    pass


class RequiredLayerError(DocForgeError):
    """Raised when a required prompt layer resolves to nothing.

    Fatal for the step: the driver must not run with an incomplete prompt.
    """

    def __init__(self, message: str, scenario_id: str, source: Optional[str] = None):
        super().__init__(message)
        self.scenario_id = scenario_id
        self.source = source


class RunCancelled(DocForgeError):
    """Raised when a conversation run is cancelled between tool calls."""
    pass
