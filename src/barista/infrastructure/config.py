"""Runtime settings, read from ``BARISTA_*`` environment variables or ``.env``."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from barista.application.process_message import TurnPolicy

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    # --- Storage ---
    DATA_DIR: Path = _PROJECT_ROOT / "data"

    # --- Language model (any OpenAI-compatible endpoint) ---
    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=2.0)
    OPENAI_MAX_TOKENS: int = 1024

    # --- Turn policy ---
    MAX_ORDER_QUANTITY: int = Field(default=20, ge=1)
    RETRIEVAL_LIMIT: int = Field(default=5, ge=0)
    CONFIDENCE_THRESHOLD: float = Field(default=0.5, ge=0.0, le=1.0)
    CONTEXT_MESSAGES: int = Field(default=10, ge=0)

    LOG_LEVEL: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="BARISTA_",
        env_file=".env",
        extra="ignore",
    )

    def turn_policy(self) -> TurnPolicy:
        return TurnPolicy(
            max_total_quantity=self.MAX_ORDER_QUANTITY,
            retrieval_limit=self.RETRIEVAL_LIMIT,
            confidence_threshold=self.CONFIDENCE_THRESHOLD,
            context_messages=self.CONTEXT_MESSAGES,
        )


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
