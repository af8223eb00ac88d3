"""Relay configuration with environment variable loading.

Pydantic-based configuration for the Ollama stream relay. Defaults are read
from the environment (and a .env file), then validated like explicit values.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_GENERATE_URL = "http://localhost:11434/api/generate"


class RelayConfig(BaseModel):
    """Configuration for the Ollama relay.

    Attributes:
        generate_url: Full URL of Ollama's generate endpoint.
        model: Model used when a request does not name one.
        temperature: Temperature used when a request does not set one.
        timeout: Backend timeout in seconds (None waits indefinitely).
        error_sentinel: Append an in-band error marker to streams that fail
            after the response headers were sent.
    """

    model_config = ConfigDict(validate_default=True)

    generate_url: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_URL", DEFAULT_GENERATE_URL),
        description="Ollama generate endpoint",
    )
    model: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_MODEL", "llama3"),
        min_length=1,
        description="Default model identifier",
    )
    temperature: float = Field(
        default_factory=lambda: os.getenv("OLLAMA_TEMPERATURE", "0.2"),
        ge=0.0,
        le=2.0,
        description="Default sampling temperature",
    )
    timeout: float | None = Field(
        default_factory=lambda: os.getenv("OLLAMA_TIMEOUT") or None,
        gt=0,
        description="Backend timeout in seconds",
    )
    error_sentinel: bool = Field(
        default_factory=lambda: os.getenv("RELAY_ERROR_SENTINEL", "false"),
        description="Mark mid-stream failures in-band",
    )

    @field_validator("generate_url")
    @classmethod
    def validate_generate_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("OLLAMA_URL must be an http:// or https:// URL")
        return v


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.

    Raises:
        ValidationError: If an environment value is invalid.
    """
    return RelayConfig()
