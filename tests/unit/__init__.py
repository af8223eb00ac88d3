"""Unit tests for individual components in isolation.

Coverage:
    - models/: Pydantic validation and wire names
    - relay/: Prompt templates, NDJSON decoding, relay streaming and config
    - ui/: Chat session state machine and theme preference
"""
