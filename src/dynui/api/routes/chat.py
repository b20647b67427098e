"""Chat route that answers with a structured UI response."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from dynui.agent.agent import UIAgent
from dynui.agent.models import AgentConfig, LLMConfig
from dynui.agent.schema import dump_response

from ..deps import Backend
from ..schemas import ChatRequest, ChatResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={500: {"model": ErrorResponse}},
)
async def chat(request: ChatRequest, backend: Backend) -> ChatResponse:
    """Generate a UI response for the latest message in the conversation."""
    *history, last_message = request.messages

    agent = UIAgent(AgentConfig(history=history, llm=LLMConfig(backend=backend)))
    try:
        response = await agent.respond(last_message.content)
    except Exception as e:
        logger.error(f"Chat API error: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate response"},
        )

    return ChatResponse(data=dump_response(response))
