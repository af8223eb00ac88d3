"""API Explainer - plain-language explanations of JSON API responses.

Combines FastAPI for HTTP streaming, httpx for talking to a local Ollama
server, NiceGUI for the chat interface, and Pydantic for data validation.

Components:
    - api: HTTP relay endpoint and application factory
    - relay: prompt building and Ollama stream re-framing
    - ui: browser chat interface and its client-side state
    - models: request/response schemas
"""

__version__ = "0.1.0"
