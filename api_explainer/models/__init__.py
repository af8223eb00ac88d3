"""Pydantic models for API requests, responses and backend events.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatMessage: Individual message in conversation
    - ChatRequest: Incoming relay request payload
    - ErrorResponse: Error body returned by the relay endpoint
    - GenerateRequest: Outbound Ollama generate payload
    - ModelEvent: One decoded line of the Ollama stream
"""

from api_explainer.models.schemas import (
    ChatMessage,
    ChatRequest,
    ErrorResponse,
    GenerateOptions,
    GenerateRequest,
    ModelEvent,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ErrorResponse",
    "GenerateOptions",
    "GenerateRequest",
    "ModelEvent",
]
