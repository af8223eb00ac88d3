"""Prompt templates for the Ollama generate endpoint."""

from collections.abc import Sequence

from api_explainer.models.schemas import ChatMessage

JSON_INSTRUCTIONS = [
    "You are an API Response Explainer. Your job is to explain a JSON response "
    "in simple, beginner-friendly language.",
    "Rules: concise, clear, avoid jargon, call out assumptions, do not invent fields.",
    "Output format:",
    "- Summary",
    "- Fields (path, type, meaning, example)",
    "- Notes & pitfalls",
    "- Short example usage",
    "",
    "JSON to explain:",
]

CHAT_INSTRUCTIONS = [
    "You are a helpful assistant focused on explaining APIs and JSON payloads "
    "in simple terms.",
    "Answer clearly and concisely. If unsure, say what extra info is needed.",
    "",
    "User message:",
]


def latest_user_content(messages: Sequence[ChatMessage]) -> str:
    """Return the content of the most recent user message, or ''."""
    for message in reversed(messages):
        if message.role == "user":
            return message.content
    return ""


def build_prompt(messages: Sequence[ChatMessage], json_mode: bool) -> str:
    """Build the single prompt string sent to the model.

    Only the latest user message is embedded; earlier turns are not
    replayed. The content is inserted verbatim.

    Args:
        messages: The conversation, oldest first.
        json_mode: Select the structured JSON explanation template.

    Returns:
        The prompt text.
    """
    content = latest_user_content(messages)
    if json_mode:
        return "\n".join([*JSON_INSTRUCTIONS, "<json>", content, "</json>"])
    return "\n".join([*CHAT_INSTRUCTIONS, content])
