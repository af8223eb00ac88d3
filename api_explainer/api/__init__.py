"""FastAPI endpoints for the API Explainer.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Plain-text streaming explanation of the latest message
"""

from api_explainer.api.app import app, create_app

__all__ = ["app", "create_app"]
