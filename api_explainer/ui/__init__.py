"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat transcript display with incremental streaming updates
    - JSON input validation and JSON file upload
    - Light/dark/system theme preference

The submission state machine lives in chat_client and has no NiceGUI
dependency. Talks to the relay only over HTTP.
"""
