"""Dynamic UI Agent - structured UI responses from natural language."""

from dynui.agent import (
    AgentConfig,
    AgentResponse,
    ChatMessage,
    LLMConfig,
    UIAgent,
    assign_ids,
    create_agent,
    respond,
)
from dynui.core.errors import (
    AgentError,
    ConfigurationError,
    GenerationError,
    SchemaError,
)

__version__ = "0.1.0"

__all__ = [
    "AgentConfig",
    "AgentError",
    "AgentResponse",
    "ChatMessage",
    "ConfigurationError",
    "GenerationError",
    "LLMConfig",
    "SchemaError",
    "UIAgent",
    "assign_ids",
    "create_agent",
    "respond",
]
