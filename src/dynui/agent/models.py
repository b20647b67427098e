"""Configuration models for the agent.

These are per-request values supplied by the caller. Process-wide
defaults come from dynui.core.config.Settings.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from dynui.agent.schema import AgentResponse, ChatMessage
from dynui.core.config import Settings

if TYPE_CHECKING:
    from dynui.agent.backend import GenerationBackend


@dataclass(frozen=True)
class SamplingParams:
    """Fully resolved sampling parameters for one backend call."""

    model: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def request_options(self) -> dict[str, Any]:
        """Get backend request options, omitting unset values."""
        options: dict[str, Any] = dict(self.extra)
        if self.temperature is not None:
            options["temperature"] = self.temperature
        if self.max_tokens is not None:
            options["max_tokens"] = self.max_tokens
        if self.top_p is not None:
            options["top_p"] = self.top_p
        return options


@dataclass
class LLMConfig:
    """Caller's LLM selection and sampling overrides."""

    model: Optional[str] = None
    """Model name (default: LLM_MODEL setting)."""

    temperature: Optional[float] = None
    """Sampling temperature (default: LLM_TEMPERATURE setting)."""

    max_tokens: Optional[int] = None
    top_p: Optional[float] = None

    extra: dict[str, Any] = field(default_factory=dict)
    """Provider-specific request options passed through verbatim."""

    backend: Optional["GenerationBackend"] = None
    """Explicit generation backend (default: OpenAI client from settings)."""

    def resolve(self, settings: Settings) -> SamplingParams:
        """Fill in model and temperature from settings."""
        return SamplingParams(
            model=self.model or settings.llm_model,
            temperature=(
                self.temperature if self.temperature is not None else settings.llm_temperature
            ),
            max_tokens=self.max_tokens,
            top_p=self.top_p,
            extra=dict(self.extra),
        )


@dataclass
class AgentConfig:
    """Configuration for a UIAgent.

    Example:
        AgentConfig(
            history=[ChatMessage(role="user", content="Show my plans")],
            llm=LLMConfig(model="gpt-4o", temperature=0.2),
        )
    """

    system_prompt: Optional[str] = None
    """Override for the built-in system prompt."""

    schema: Optional[Any] = None
    """Alternative output schema; None means the built-in AgentResponse."""

    history: list[ChatMessage] = field(default_factory=list)
    """Prior conversation, sent between the system and user messages."""

    llm: LLMConfig = field(default_factory=LLMConfig)

    auto_assign_ids: bool = True
    """Assign node ids to the output (built-in schema only)."""

    @property
    def uses_builtin_schema(self) -> bool:
        """Whether output follows the built-in AgentResponse envelope."""
        return self.schema is None or self.schema is AgentResponse
