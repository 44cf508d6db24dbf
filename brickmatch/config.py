# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Application Configuration
Runtime settings are loaded from environment variables with defaults tuned
for whole-catalog batch runs. Override via .env or environment.

Matching thresholds that define the algorithm itself live as named constants
in the matching modules; only operational knobs belong here.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Review ──────────────────────────────────────────────────────────────
    # Pairings below this are flagged for the manual review UI
    review_confidence_threshold: float = Field(0.7, ge=0.0, le=1.0)

    # ─── Conflict Resolution ─────────────────────────────────────────────────
    # A rejected claim is re-matched only if an alternative scores above this
    rematch_min_score: float = Field(0.3, ge=0.0, le=1.0)

    # ─── Batch Driver ────────────────────────────────────────────────────────
    batch_max_workers: int = Field(4, ge=1)

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
