"""Main application entry point.

Serves the relay API and the NiceGUI chat page from one uvicorn server.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Mount the chat page on the API app and serve both."""
    import uvicorn
    from nicegui import ui

    from api_explainer.api import app
    from api_explainer.relay import get_relay_config
    from api_explainer.ui import chat_page  # noqa: F401 - registers "/"

    ui.run_with(
        app,
        title="API Explainer",
        favicon="🧾",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "api-explainer-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(
        f"Serving API Explainer on http://localhost:{port} with model {get_relay_config().model}"
    )
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
