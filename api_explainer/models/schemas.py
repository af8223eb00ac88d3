from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A single chat message in the conversation.

    Attributes:
        role: The speaker identifier (user, assistant, or system).
        content: The message text.
    """

    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    """Request payload for the relay endpoint.

    Attributes:
        messages: The conversation so far, ending with the new user message.
        is_json: Use the JSON explanation prompt (wire name ``isJson``).
        temperature: Optional decoding temperature override.
        model: Optional Ollama model override.
    """

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage]
    is_json: bool = Field(False, alias="isJson")
    temperature: float | None = Field(None, ge=0.0)
    model: str | None = None


class ErrorResponse(BaseModel):
    """Error body returned for rejected or failed relay requests."""

    error: str


class GenerateOptions(BaseModel):
    temperature: float


class GenerateRequest(BaseModel):
    """Body of the streaming POST sent to Ollama's /api/generate."""

    model: str
    prompt: str
    stream: bool = True
    options: GenerateOptions


class ModelEvent(BaseModel):
    """One event from Ollama's newline-delimited JSON stream.

    Attributes:
        response: Text fragment generated since the previous event.
        done: Whether the backend has finished generating.
    """

    model_config = ConfigDict(extra="ignore")

    response: str | None = None
    done: bool = False
