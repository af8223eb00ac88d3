"""Test suite for the API Explainer.

Organized into unit/ (isolated components) and integration/ (the FastAPI
app and chat client working together over ASGI).

Ollama is never contacted: backends are scripted with httpx.MockTransport.
"""
