"""Integration tests for components working together as a system.

Coverage:
    - /api/chat through the real FastAPI app with a scripted Ollama backend
    - Chat client submitting to the app over ASGI
    - Error mapping to 400/500 JSON bodies
"""
