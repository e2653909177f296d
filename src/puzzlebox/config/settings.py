"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the puzzle box.

Usage:
    from puzzlebox.config import PuzzleBoxSettings

    # Load from environment variables (PUZZLEBOX_*)
    settings = PuzzleBoxSettings()

    # Or override with explicit values
    settings = PuzzleBoxSettings(guard_timeout=1.0, strict_targets=True)
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PuzzleBoxSettings(BaseSettings):
    """Configuration for the puzzle registry, guards and notifications.

    Attributes:
        id_prefix: Prefix of generated puzzle ids ("puzzle" -> "puzzle-k3j9...").
        resource_scheme: URI prefix under which puzzles are exposed as resources.
        guard_timeout: Seconds a single guard evaluation may take before it is
            treated as a rejection.
        guard_retry_attempts: Attempts per guard call when the oracle raises (1 = no retry).
        guard_retry_backoff: Backoff between guard retries.
        guard_retry_delay: Base delay in seconds for guard retry backoff.
        delivery_timeout: Seconds a single notification delivery may take.
        strict_targets: Reject definitions whose actions target unknown states at parse time.
        page_size: Number of resources per page when listing puzzles.
        log_level: Level passed to configure_logging().

    Environment Variables:
        PUZZLEBOX_ID_PREFIX
        PUZZLEBOX_RESOURCE_SCHEME
        PUZZLEBOX_GUARD_TIMEOUT
        PUZZLEBOX_GUARD_RETRY_ATTEMPTS
        PUZZLEBOX_GUARD_RETRY_BACKOFF
        PUZZLEBOX_GUARD_RETRY_DELAY
        PUZZLEBOX_DELIVERY_TIMEOUT
        PUZZLEBOX_STRICT_TARGETS
        PUZZLEBOX_PAGE_SIZE
        PUZZLEBOX_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="PUZZLEBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    id_prefix: str = "puzzle"
    resource_scheme: str = "puzzlebox://puzzle/"
    guard_timeout: float = Field(default=5.0, gt=0)
    guard_retry_attempts: int = Field(default=1, ge=1)
    guard_retry_backoff: Literal["none", "linear", "exponential"] = "none"
    guard_retry_delay: float = Field(default=0.1, ge=0)
    delivery_timeout: float = Field(default=5.0, gt=0)
    strict_targets: bool = False
    page_size: int = Field(default=25, gt=0)
    log_level: str = "INFO"
