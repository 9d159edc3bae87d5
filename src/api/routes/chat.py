"""
Chat endpoints.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_chat_use_case
from src.application.dto.requests import ChatRequest
from src.application.dto.responses import ChatResponse, ErrorResponse
from src.application.use_cases import ChatWithAssistantUseCase

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post(
    "",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
    },
)
async def chat(
    request: ChatRequest,
    use_case: ChatWithAssistantUseCase = Depends(get_chat_use_case),
) -> ChatResponse:
    """
    Send a message to the expense assistant.

    Always answers 200 for a well-formed request: when the assistant is
    not configured or fails, ``success``/``error`` say so and ``response``
    carries a message fit to display.
    """
    return await use_case.execute(request)
