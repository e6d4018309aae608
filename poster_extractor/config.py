"""
Runtime configuration read from the environment.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field

from .claude_client import DEFAULT_MAX_TOKENS, DEFAULT_MODEL
from .exceptions import ConfigurationError


class Settings(BaseModel):
    """Application settings."""
    api_key: Optional[str] = Field(None, description="Anthropic API key")
    model: str = Field(DEFAULT_MODEL, description="Claude model identifier")
    max_tokens: int = Field(DEFAULT_MAX_TOKENS, gt=0, description="Output token limit")
    host: str = Field("127.0.0.1", description="Web server bind address")
    port: int = Field(8080, gt=0, lt=65536, description="Web server port")

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """
        Load settings from environment variables.

        Keyword arguments that are not None (e.g. from the command line)
        take precedence over the environment.
        """
        values = {
            "api_key": os.getenv("ANTHROPIC_API_KEY") or os.getenv("CLAUDE_API_KEY"),
            "model": os.getenv("POSTER_MODEL", DEFAULT_MODEL),
            "max_tokens": os.getenv("POSTER_MAX_TOKENS", DEFAULT_MAX_TOKENS),
            "host": os.getenv("POSTER_HOST", "127.0.0.1"),
            "port": os.getenv("POSTER_PORT", 8080),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(
                "Anthropic API key required. Use --api-key or set ANTHROPIC_API_KEY environment variable."
            )
        return self.api_key
