"""Dynamic UI Agent.

This package turns natural-language requests into validated,
recursively structured UI responses: the schema model, the tree
normalizer, the generation orchestrator, and the fallback synthesizer.
"""

from dynui.agent.agent import (
    UIAgent,
    create_agent,
    respond,
)
from dynui.agent.backend import (
    GenerationBackend,
    OpenAIBackend,
    create_backend,
)
from dynui.agent.fallback import (
    FALLBACK_RULES,
    FallbackRule,
    build_fallback_response,
)
from dynui.agent.models import (
    AgentConfig,
    LLMConfig,
    SamplingParams,
)
from dynui.agent.normalizer import (
    assign_ids,
    ensure_ids,
    iter_nodes,
)
from dynui.agent.schema import (
    BUILT_IN_SYSTEM_PROMPT,
    AgentResponse,
    ChatMessage,
    Node,
    UIAction,
    dump_response,
    validate_node,
    validate_response,
    validate_with,
)

__all__ = [
    # Schema
    "AgentResponse",
    "BUILT_IN_SYSTEM_PROMPT",
    "ChatMessage",
    "Node",
    "UIAction",
    "dump_response",
    "validate_node",
    "validate_response",
    "validate_with",
    # Normalizer
    "assign_ids",
    "ensure_ids",
    "iter_nodes",
    # Fallback
    "FALLBACK_RULES",
    "FallbackRule",
    "build_fallback_response",
    # Configuration
    "AgentConfig",
    "LLMConfig",
    "SamplingParams",
    # Backends
    "GenerationBackend",
    "OpenAIBackend",
    "create_backend",
    # Agent
    "UIAgent",
    "create_agent",
    "respond",
]
