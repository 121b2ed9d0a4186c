"""Configuration for the local worker.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The engine itself reads no configuration; these settings only shape the
worker around it (log output and the shard-size bound the caller enforces).
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkerSettings(BaseSettings):
    """Settings for the local worker.

    Environment variables:
    - LOG_LEVEL                    (optional)
    - SWARM_ENGINE_DEBUG           (optional)
    - SWARM_MAX_SHARD_SIZE         (optional)
    - SWARM_MIN_ANSWER_LENGTH      (optional)
    - SWARM_REVIEW_PREVIEW_CHARS   (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `WorkerSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    engine_debug: bool = Field(
        default=False,
        validation_alias="SWARM_ENGINE_DEBUG",
        description="Emit per-task routing logs from the compute engine",
    )

    max_shard_size: int = Field(
        default=8192,
        gt=0,
        validation_alias="SWARM_MAX_SHARD_SIZE",
        description=(
            "Largest shard size the worker will compute. Spectral kernels allocate "
            "buffers proportional to the next power of two above this value."
        ),
    )

    min_answer_length: int = Field(
        default=10,
        ge=1,
        validation_alias="SWARM_MIN_ANSWER_LENGTH",
        description="Minimum length of a written answer for review/produce tasks",
    )
    review_preview_chars: int = Field(
        default=200,
        ge=1,
        validation_alias="SWARM_REVIEW_PREVIEW_CHARS",
        description="Characters of each peer response shown when asking for ratings",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level
