"""apollo-mcp configuration.

Loads settings from environment variables (with .env support via python-dotenv).
All config is immutable after construction and passed explicitly to the
gateway; nothing reads the environment after startup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DEFAULT_BASE_URL = "https://api.apollo.io/v1"
DEFAULT_PORT = 8000

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _safe_int(env_var: str, default: int) -> int:
    """Read an int from env, falling back to default on parse error."""
    try:
        return int(os.getenv(env_var, str(default)))
    except (ValueError, TypeError):
        return default


def _safe_float(env_var: str, default: float) -> float:
    """Read a float from env, falling back to default on parse error."""
    try:
        return float(os.getenv(env_var, str(default)))
    except (ValueError, TypeError):
        return default


@dataclass(frozen=True)
class ApolloMcpConfig:
    """Immutable configuration loaded from environment variables."""

    # Upstream
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        object.__setattr__(self, "api_key", (self.api_key or "").strip())
        object.__setattr__(self, "base_url", (self.base_url or DEFAULT_BASE_URL).rstrip("/"))
        object.__setattr__(self, "log_level", (self.log_level or "INFO").upper())

        if not self.api_key:
            raise ValueError("APOLLO_API_KEY is required")
        if not self.base_url.startswith(("https://", "http://")):
            raise ValueError(
                f"Invalid APOLLO_BASE_URL='{self.base_url}'. Expected an http(s) URL"
            )
        if self.timeout <= 0:
            raise ValueError("APOLLO_TIMEOUT must be > 0")
        if not (1 <= self.port <= 65535):
            raise ValueError("PORT must be between 1 and 65535")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL='{self.log_level}'. "
                "Expected: CRITICAL | ERROR | WARNING | INFO | DEBUG"
            )

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> ApolloMcpConfig:
        """Load config from environment, optionally reading a .env file first."""
        if dotenv_path:
            load_dotenv(dotenv_path)
        else:
            load_dotenv(find_dotenv(usecwd=True))

        return cls(
            api_key=os.getenv("APOLLO_API_KEY", ""),
            base_url=os.getenv("APOLLO_BASE_URL", DEFAULT_BASE_URL),
            timeout=_safe_float("APOLLO_TIMEOUT", 30.0),
            host=os.getenv("MCP_HOST", "0.0.0.0"),
            port=_safe_int("PORT", DEFAULT_PORT),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    _SENSITIVE_FIELDS = frozenset({"api_key"})

    def __repr__(self) -> str:
        fields = []
        for f in self.__dataclass_fields__:
            val = getattr(self, f)
            if f in self._SENSITIVE_FIELDS and val:
                fields.append(f"{f}='***'")
            else:
                fields.append(f"{f}={val!r}")
        return f"ApolloMcpConfig({', '.join(fields)})"

    @property
    def numeric_log_level(self) -> int:
        """Log level as understood by logging.basicConfig."""
        return getattr(logging, self.log_level)
