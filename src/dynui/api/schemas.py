"""Request and response schemas for the API."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from dynui.agent.schema import ChatMessage


class ChatRequest(BaseModel):
    """Chat request: the last message is the prompt, the rest is history."""

    messages: list[ChatMessage] = Field(min_length=1)


class ChatResponse(BaseModel):
    """Envelope around a generated UI response."""

    type: Literal["ui"] = "ui"
    data: dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
