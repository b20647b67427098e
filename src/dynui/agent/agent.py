"""UI Generation Agent.

This module turns a natural-language request into a validated response
envelope describing UI components, or into an instance of a
caller-supplied schema.

Pipeline:
1. Assemble messages: system prompt, then history, then the user prompt
2. Call the generation backend, constrained to the active schema
3. Validate the candidate against the schema
4. Assign node ids (built-in schema only)

When generation or validation fails with the built-in schema, the
fallback synthesizer builds a response instead. With a custom schema
there is no generic fallback and the error is raised.
"""

import logging
import time
from typing import Any, Optional

from pydantic import ValidationError

from dynui.agent.backend import GenerationBackend, create_backend
from dynui.agent.fallback import build_fallback_response
from dynui.agent.models import AgentConfig, SamplingParams
from dynui.agent.normalizer import ensure_ids
from dynui.agent.schema import (
    BUILT_IN_SYSTEM_PROMPT,
    AgentResponse,
    ChatMessage,
    schema_descriptor,
    validate_with,
)
from dynui.core.config import get_settings
from dynui.core.errors import ConfigurationError, GenerationError, SchemaError


logger = logging.getLogger(__name__)


TOOL_INSTRUCTION = (
    "\n\nYou MUST call the emit_response tool with a valid response object. "
    "Do not output free text."
)


class UIAgent:
    """Generates structured UI responses for user prompts.

    Example:
        agent = UIAgent(AgentConfig(llm=LLMConfig(model="gpt-4o")))
        response = await agent.respond("Create a login form")
        # response.ui is the node forest, every node has an id
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        backend: Optional[GenerationBackend] = None,
    ):
        """Initialize the agent.

        Args:
            config: Agent configuration (default: built-in schema and prompt)
            backend: Generation backend, taking precedence over config.llm.backend
        """
        self.config = config or AgentConfig()
        self.backend = backend

    def get_config(self) -> AgentConfig:
        """Get the agent configuration."""
        return self.config

    def _history(self) -> list[ChatMessage]:
        """Coerce configured history entries to ChatMessage."""
        try:
            return [
                message if isinstance(message, ChatMessage) else ChatMessage.model_validate(message)
                for message in self.config.history
            ]
        except ValidationError as e:
            raise SchemaError(f"Invalid conversation history: {e}") from e

    def _build_messages(self, user_prompt: str) -> list[dict[str, str]]:
        """Build the message sequence sent to the backend."""
        system_prompt = self.config.system_prompt or BUILT_IN_SYSTEM_PROMPT

        messages = [{"role": "system", "content": system_prompt + TOOL_INSTRUCTION}]
        messages.extend(message.model_dump() for message in self._history())
        messages.append({"role": "user", "content": user_prompt})
        return messages

    def _resolve_backend(self) -> GenerationBackend:
        """Get the explicit backend, or build the default one from settings."""
        if self.backend is not None:
            return self.backend
        if self.config.llm.backend is not None:
            return self.config.llm.backend
        return create_backend()

    async def _generate(
        self,
        backend: GenerationBackend,
        messages: list[dict[str, str]],
        params: SamplingParams,
        schema: Any,
    ) -> Any:
        """Call the backend and validate its output.

        Raises:
            ConfigurationError: If the backend has no usable credentials
            GenerationError: If the backend call fails
            SchemaError: If the candidate doesn't match the schema
        """
        try:
            raw = await backend.generate(messages, schema_descriptor(schema), params)
        except (ConfigurationError, GenerationError):
            raise
        except Exception as e:
            raise GenerationError(f"Generation backend failed: {e}") from e

        if raw is None:
            raise GenerationError("Generation backend returned no candidate")
        return validate_with(schema, raw)

    async def respond(self, user_prompt: str) -> Any:
        """Generate a response for the user prompt.

        Args:
            user_prompt: The user's request

        Returns:
            AgentResponse for the built-in schema, otherwise an instance of
            the configured schema exactly as validated

        Raises:
            ValueError: If user_prompt is empty
            ConfigurationError: If no generation backend can be configured
            GenerationError: If generation fails with a custom schema
            SchemaError: If validation fails with a custom schema
        """
        if not user_prompt or not user_prompt.strip():
            raise ValueError("user_prompt must be a non-empty string")

        builtin = self.config.uses_builtin_schema
        schema = self.config.schema if self.config.schema is not None else AgentResponse

        messages = self._build_messages(user_prompt)
        backend = self._resolve_backend()
        params = self.config.llm.resolve(get_settings())

        start_time = time.time()

        try:
            result = await self._generate(backend, messages, params, schema)
        except (GenerationError, SchemaError) as e:
            elapsed = (time.time() - start_time) * 1000
            if not builtin:
                logger.error(f"Structured generation failed after {elapsed:.0f}ms: {e}")
                raise
            logger.warning(
                f"UI generation failed after {elapsed:.0f}ms, using fallback: {e}"
            )
            result = build_fallback_response(user_prompt)
        else:
            elapsed = (time.time() - start_time) * 1000
            logger.info(f"UI generation completed in {elapsed:.0f}ms")

        if builtin and self.config.auto_assign_ids:
            return ensure_ids(result)
        return result


async def respond(
    user_prompt: str,
    config: Optional[AgentConfig] = None,
    backend: Optional[GenerationBackend] = None,
) -> Any:
    """Generate a structured response for a single prompt."""
    return await UIAgent(config, backend).respond(user_prompt)


def create_agent(
    config: Optional[AgentConfig] = None,
    backend: Optional[GenerationBackend] = None,
) -> UIAgent:
    """Create an agent bound to a configuration and, optionally, a backend."""
    return UIAgent(config, backend)
