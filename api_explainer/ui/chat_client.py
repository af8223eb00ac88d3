"""Client-side chat state and consumption of the relay stream.

Kept free of NiceGUI so the submission flow can be driven from tests with
any ``httpx.AsyncClient``.
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"


class ChatState(str, Enum):
    """Lifecycle of a single submission."""

    IDLE = "idle"
    AWAITING_FIRST_BYTE = "awaiting_first_byte"
    STREAMING = "streaming"


class ChatRequestError(Exception):
    """Raised when the relay rejects a chat request."""


class ChatSession:
    """Manages chat state for one page session."""

    def __init__(self, json_mode: bool = True) -> None:
        self.messages: list[dict[str, Any]] = []
        self.state: ChatState = ChatState.IDLE
        self.json_mode: bool = json_mode
        self.json_error: str | None = None
        self.model: str | None = None
        self.temperature: float | None = None

    @property
    def is_loading(self) -> bool:
        return self.state is not ChatState.IDLE

    def add_message(self, role: str, content: str, error: bool = False) -> None:
        self.messages.append({
            "role": role,
            "content": content,
            "time": datetime.now().strftime("%I:%M %p"),
            "error": error,
        })

    def append_to_reply(self, chunk: str) -> None:
        """Append streamed text to the latest assistant message."""
        if not self.messages or self.messages[-1]["role"] != "assistant":
            self.add_message("assistant", "")
        self.messages[-1]["content"] += chunk

    def clear(self) -> None:
        self.messages.clear()

    def check_input(self, text: str) -> bool:
        """Validate input for the current mode and record any JSON error.

        Args:
            text: The raw input text.

        Returns:
            True if the text is acceptable in the current mode.
        """
        if not self.json_mode:
            self.json_error = None
            return True
        try:
            json.loads(text)
        except json.JSONDecodeError as e:
            self.json_error = str(e)
            return False
        self.json_error = None
        return True

    def can_send(self, text: str) -> bool:
        if self.is_loading or not text.strip():
            return False
        return self.check_input(text)

    def request_payload(self) -> dict[str, Any]:
        """Build the relay request body from the transcript."""
        payload: dict[str, Any] = {
            "messages": [
                {"role": m["role"], "content": m["content"]} for m in self.messages
            ],
            "isJson": self.json_mode,
        }
        if self.model is not None:
            payload["model"] = self.model
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        return payload


def _error_text(status_code: int, body: bytes) -> str:
    text = body.decode("utf-8", errors="replace").strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return text or f"HTTP {status_code}"


async def submit_message(
    session: ChatSession,
    text: str,
    client: httpx.AsyncClient,
    on_update: Callable[[], None],
) -> bool:
    """Send the conversation to the relay and stream the reply into it.

    Single flight: returns immediately without a network call while a
    submission is in progress or when the input is not sendable.

    Args:
        session: The chat session to update.
        text: The new user message.
        client: HTTP client whose base URL points at the relay API.
        on_update: Called after every state change that needs a re-render.

    Returns:
        True if the submission was sent, False if it was rejected.
    """
    if not session.can_send(text):
        return False

    session.state = ChatState.AWAITING_FIRST_BYTE
    session.add_message("user", text)
    on_update()

    try:
        async with client.stream("POST", CHAT_PATH, json=session.request_payload()) as response:
            if response.is_error:
                raise ChatRequestError(
                    _error_text(response.status_code, await response.aread())
                )

            session.add_message("assistant", "")
            async for chunk in response.aiter_text():
                if not chunk:
                    continue
                session.state = ChatState.STREAMING
                session.append_to_reply(chunk)
                on_update()
    except ChatRequestError as e:
        logger.warning(f"Chat request rejected: {e}")
        session.add_message("assistant", f"Error: {e}", error=True)
    except httpx.RequestError as e:
        logger.warning(f"Chat stream failed: {e}")
        session.add_message("assistant", f"Error: Connection failed: {e}", error=True)
    finally:
        session.state = ChatState.IDLE
        on_update()

    return True


def prepare_upload_text(raw: bytes) -> str:
    """Decode an uploaded file for the input box.

    JSON documents are pretty-printed with two-space indentation; anything
    else is returned as decoded text.
    """
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except json.JSONDecodeError:
        return text
