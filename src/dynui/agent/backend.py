"""Generation backends for the agent.

A backend takes the assembled chat messages, a JSON Schema describing
the required output, and sampling parameters, and returns a best-effort
JSON object. The agent validates that object; backends only guarantee
that it is a dict.
"""

import inspect
import json
import logging
import time
from typing import Any, Optional, Protocol

from openai import AsyncOpenAI, AuthenticationError, OpenAI, PermissionDeniedError

from dynui.agent.models import SamplingParams
from dynui.core.config import get_llm_client, get_settings
from dynui.core.errors import ConfigurationError, GenerationError


logger = logging.getLogger(__name__)


EMIT_TOOL_NAME = "emit_response"

EMIT_TOOL_DESCRIPTION = "Emit the structured UI response as a single response object."


class GenerationBackend(Protocol):
    """Capability for producing a candidate structured object."""

    async def generate(
        self,
        messages: list[dict[str, str]],
        schema: dict[str, Any],
        params: SamplingParams,
    ) -> dict[str, Any]:
        """Generate a candidate object.

        Raises:
            GenerationError: If no usable candidate was produced
        """
        ...


class OpenAIBackend:
    """Generates structured output through an OpenAI-compatible API.

    The model is forced to call a single function tool whose parameters
    are the output schema, so the reply is always tool-call arguments
    rather than free text.

    Example:
        backend = OpenAIBackend(AsyncOpenAI(api_key=...))
        raw = await backend.generate(messages, schema, SamplingParams(model="gpt-4o-mini"))
    """

    def __init__(self, client: OpenAI | AsyncOpenAI):
        """Initialize the backend.

        Args:
            client: OpenAI-compatible client (sync or async)
        """
        self.client = client

    def _build_request(
        self,
        messages: list[dict[str, str]],
        schema: dict[str, Any],
        params: SamplingParams,
    ) -> dict[str, Any]:
        """Build chat completion request kwargs."""
        request: dict[str, Any] = {
            "model": params.model,
            "messages": messages,
            "tools": [
                {
                    "type": "function",
                    "function": {
                        "name": EMIT_TOOL_NAME,
                        "description": EMIT_TOOL_DESCRIPTION,
                        "parameters": schema,
                    },
                }
            ],
            "tool_choice": {"type": "function", "function": {"name": EMIT_TOOL_NAME}},
        }
        request.update(params.request_options())
        return request

    def _parse_response(self, response: Any) -> dict[str, Any]:
        """Extract the emitted object from a chat completion.

        Raises:
            GenerationError: If there is no tool call or its arguments aren't a JSON object
        """
        if not response.choices:
            raise GenerationError("Backend returned no candidates")

        tool_calls = response.choices[0].message.tool_calls
        if not tool_calls:
            raise GenerationError("Model did not call the required tool")

        arguments = tool_calls[0].function.arguments
        if not arguments:
            raise GenerationError("Empty tool arguments from LLM")

        try:
            data = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise GenerationError(f"Failed to parse tool arguments: {e}") from e

        if not isinstance(data, dict):
            raise GenerationError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    async def generate(
        self,
        messages: list[dict[str, str]],
        schema: dict[str, Any],
        params: SamplingParams,
    ) -> dict[str, Any]:
        """Generate a candidate object (async, works with sync clients too).

        Raises:
            ConfigurationError: If the provider rejects the credentials
            GenerationError: If the request fails or yields no usable object
        """
        request = self._build_request(messages, schema, params)
        start_time = time.time()

        try:
            response = self.client.chat.completions.create(**request)
            if inspect.isawaitable(response):
                response = await response
        except (AuthenticationError, PermissionDeniedError) as e:
            logger.error(f"Generation request rejected credentials: {e}")
            raise ConfigurationError(f"LLM provider rejected the API key: {e}") from e
        except Exception as e:
            elapsed = (time.time() - start_time) * 1000
            logger.error(f"Generation request failed after {elapsed:.0f}ms: {e}")
            raise GenerationError(f"Generation request failed: {e}") from e

        elapsed = (time.time() - start_time) * 1000
        logger.debug(f"Generation request ({params.model}) completed in {elapsed:.0f}ms")

        return self._parse_response(response)


def create_backend(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    async_client: bool = True,
) -> OpenAIBackend:
    """Create an OpenAI backend.

    Args:
        api_key: API key for the LLM provider (default: LLM_API_KEY setting)
        base_url: Base URL for the LLM API (default: LLM_BASE_URL setting)
        async_client: Whether to use async client

    Returns:
        Configured OpenAIBackend

    Raises:
        ConfigurationError: If no API key is available
    """
    if api_key is None:
        return OpenAIBackend(get_llm_client(async_client=async_client))

    if not api_key:
        raise ConfigurationError("An API key is required to create a generation backend")

    client_cls = AsyncOpenAI if async_client else OpenAI
    return OpenAIBackend(
        client_cls(api_key=api_key, base_url=base_url or get_settings().llm_base_url)
    )
