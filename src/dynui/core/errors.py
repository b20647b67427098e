"""Error taxonomy for the dynamic UI agent.

ConfigurationError is fatal to a request. SchemaError and GenerationError
are recovered by the fallback synthesizer when the built-in response schema
is in effect, and propagated to the caller otherwise.
"""

from typing import Any, Optional


class AgentError(Exception):
    """Base class for all agent errors."""


class ConfigurationError(AgentError, ValueError):
    """A required backend credential or selector is missing."""


class SchemaError(AgentError, ValueError):
    """Raw output does not conform to the active schema."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class GenerationError(AgentError):
    """The generation backend failed or returned no usable candidate."""
