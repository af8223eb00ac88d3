"""Relay endpoint streaming model explanations as plain text.

Validates the conversation, builds the prompt, and hands the relay's byte
stream to Starlette, which starts flushing it as soon as it is returned.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse

from api_explainer.models.schemas import ChatRequest, ErrorResponse
from api_explainer.relay.ollama_relay import OllamaRelay, get_relay
from api_explainer.relay.prompt import build_prompt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post(
    "/chat",
    response_class=StreamingResponse,
    responses={
        status.HTTP_200_OK: {"content": {"text/plain": {}}},
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def chat(
    payload: ChatRequest,
    relay: OllamaRelay = Depends(get_relay),
) -> StreamingResponse:
    """Stream an explanation of the latest user message.

    Args:
        payload: Conversation plus mode flag and decoding overrides.
        relay: The Ollama relay (overridable in tests).

    Returns:
        StreamingResponse with the concatenated response fragments.

    Raises:
        400: Missing or malformed request body.
        500: Ollama unreachable or returned an error before streaming.
    """
    prompt = build_prompt(payload.messages, payload.is_json)
    logger.info(
        f"Chat request: {len(payload.messages)} messages, json_mode={payload.is_json}"
    )

    stream = await relay.open_stream(
        prompt,
        model=payload.model,
        temperature=payload.temperature,
    )

    return StreamingResponse(
        stream,
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache"},
    )
