"""Centralised settings for the policyscan service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The module-level ``settings`` instance is meant for entry points only (the
CLI and the uvicorn app).  Everything below them receives a ``Settings``
value explicitly so tests can inject their own.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_POLICY_URL = "https://stripe.com/docs/treasury/marketing-treasury"


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Bounded fetch
    # ------------------------------------------------------------------
    max_response_size: int = field(
        default_factory=lambda: int(os.environ.get("MAX_RESPONSE_SIZE", str(5 * 1024 * 1024)))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Rendering proxy
    # ------------------------------------------------------------------
    proxy_base_url: str = field(
        default_factory=lambda: os.environ.get("RENDER_PROXY_URL", "https://r.jina.ai")
    )
    proxy_token: str = field(
        default_factory=lambda: os.environ.get("RENDER_PROXY_TOKEN", "")
    )

    # ------------------------------------------------------------------
    # Compliance policy source
    # ------------------------------------------------------------------
    policy_url: str = field(
        default_factory=lambda: os.environ.get("COMPLIANCE_POLICY_URL", _DEFAULT_POLICY_URL)
    )

    # ------------------------------------------------------------------
    # Completion model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "openai")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-3.5-turbo")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    llm_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = field(default_factory=lambda: os.environ.get("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "8080")))
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )


# Module-level singleton for entry points:
#   from policyscan.config import settings
settings = Settings()
