"""NiceGUI chat interface streaming explanations from the relay."""

import html
import os

import httpx
from nicegui import app, events, ui

from api_explainer.relay.config import get_relay_config
from api_explainer.ui.chat_client import (
    ChatSession,
    ChatState,
    prepare_upload_text,
    submit_message,
)
from api_explainer.ui.theme import Theme, dark_mode_value, load_theme, save_theme

API_BASE_URL = os.getenv("API_BASE_URL", f"http://localhost:{os.getenv('PORT', '8000')}")

# Plain Enter sends; Shift+Enter keeps the newline.
SEND_ON_ENTER = """(e) => {
    if (e.key === "Enter" && !e.shiftKey && !e.isComposing) {
        e.preventDefault();
        emit();
    }
}"""

JSON_PLACEHOLDER = "Paste your JSON data here..."
CHAT_PLACEHOLDER = "Ask me anything about APIs..."

CUSTOM_CSS = """
<style>
    .app-container { border-radius: 12px; overflow: hidden; }
    .header { background: linear-gradient(135deg, #6366f1 0%, #9333ea 100%); }
    .message-user {
        background: #3b82f6;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-user pre { white-space: pre-wrap; word-break: break-word; margin: 0; }
    .message-assistant { border: 1px solid rgba(128, 128, 128, 0.3); border-radius: 18px 18px 18px 4px; }
    .message-error { border-color: #ef4444; color: #ef4444; }
    .typing-dot {
        width: 8px; height: 8px;
        background: #9333ea;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.15s; }
    .typing-dot:nth-child(3) { animation-delay: 0.3s; }
    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()
    dark = ui.dark_mode(dark_mode_value(load_theme(app.storage.user)))

    messages_container: ui.column
    reply_view: ui.markdown | None = None
    input_field: ui.textarea
    send_btn: ui.button
    error_banner: ui.row
    error_label: ui.label

    def render_message(msg: dict, is_last: bool) -> None:
        nonlocal reply_view
        is_user = msg["role"] == "user"
        align = "justify-end" if is_user else "justify-start"

        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[80%] gap-1"):
                if is_user:
                    with ui.element("div").classes("px-4 py-3 message-user"):
                        content = html.escape(msg["content"])
                        ui.html(f"<pre>{content}</pre>", sanitize=False).classes(
                            "text-sm font-mono"
                        )
                else:
                    bubble = "message-assistant"
                    if msg["error"]:
                        bubble += " message-error"
                    with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                        view = ui.markdown(msg["content"]).classes("text-sm")
                    if is_last and session.is_loading:
                        reply_view = view
                ui.label(msg["time"]).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start"):
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")

    def refresh_messages() -> None:
        nonlocal reply_view
        reply_view = None
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Welcome to API Explainer").classes("text-lg text-gray-400")
                    ui.label(
                        "Paste your JSON data below and I'll explain it in detail"
                        if session.json_mode
                        else "Ask me anything about API responses"
                    ).classes("text-sm text-gray-400")
                return
            for i, msg in enumerate(session.messages):
                render_message(msg, is_last=i == len(session.messages) - 1)
            if session.state is ChatState.AWAITING_FIRST_BYTE:
                render_typing_indicator()

    def update_controls() -> None:
        text = input_field.value or ""
        if text.strip():
            session.check_input(text)
        else:
            session.json_error = None
        error_label.set_text(f"JSON Error: {session.json_error}" if session.json_error else "")
        error_banner.set_visibility(session.json_error is not None)
        send_btn.set_enabled(session.can_send(text))

    def on_update() -> None:
        if session.state is ChatState.STREAMING and reply_view is not None:
            reply_view.set_content(session.messages[-1]["content"])
        else:
            refresh_messages()
        update_controls()

    async def send_message() -> None:
        text = input_field.value or ""
        if not session.can_send(text):
            update_controls()
            return

        input_field.value = ""
        async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=None) as client:
            await submit_message(session, text, client, on_update)

        last = session.messages[-1] if session.messages else None
        if last and last["error"]:
            ui.notify(last["content"], type="negative")

    def set_json_mode(enabled: bool) -> None:
        session.json_mode = enabled
        input_field.props(f'placeholder="{JSON_PLACEHOLDER if enabled else CHAT_PLACEHOLDER}"')
        if not session.messages:
            refresh_messages()
        update_controls()

    def set_theme(value: str) -> None:
        theme = Theme(value)
        save_theme(app.storage.user, theme)
        dark.set_value(dark_mode_value(theme))

    async def handle_upload(e: events.UploadEventArguments) -> None:
        input_field.value = prepare_upload_text(await e.file.read())
        e.sender.reset()
        update_controls()

    def new_chat() -> None:
        if session.is_loading:
            return
        session.clear()
        refresh_messages()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-4xl mx-auto app-container shadow-md").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-3 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("data_object").classes("text-white text-3xl")
                ui.label("API Response Explainer").classes("text-lg font-semibold text-white")
            with ui.row().classes("items-center gap-3"):
                ui.label(f"Ollama · {get_relay_config().model}").classes(
                    "text-xs text-white/80 font-mono"
                )
                ui.switch(
                    "JSON",
                    value=session.json_mode,
                    on_change=lambda e: set_json_mode(bool(e.value)),
                ).props("dark dense color=white")
                ui.toggle(
                    {theme.value: theme.value.title() for theme in Theme},
                    value=load_theme(app.storage.user).value,
                    on_change=lambda e: set_theme(e.value),
                ).props("dense flat text-color=white")
                ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")

        # Input
        with ui.column().classes("w-full p-4 gap-2 border-t"):
            with ui.row().classes("w-full items-center gap-2 text-red-500") as error_banner:
                ui.icon("error_outline")
                error_label = ui.label("").classes("text-sm")
            error_banner.set_visibility(False)

            with ui.row().classes("w-full gap-3 items-end"):
                input_field = (
                    ui.textarea(
                        placeholder=JSON_PLACEHOLDER,
                        on_change=lambda _: update_controls(),
                    )
                    .props("autogrow outlined dense rows=2 input-style='max-height: 200px'")
                    .classes("flex-grow font-mono")
                    .on("keydown", send_message, js_handler=SEND_ON_ENTER)
                )
                ui.upload(
                    on_upload=handle_upload,
                    auto_upload=True,
                    max_files=1,
                    label="JSON file",
                ).props('accept=".json,application/json,text/json" flat dense').classes("w-40")
                send_btn = ui.button(icon="send", on_click=send_message).props(
                    "round unelevated color=primary"
                )

    refresh_messages()
    update_controls()
