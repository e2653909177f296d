"""Configuration module using Pydantic Settings.

Provides typed configuration with environment variable support.

Usage:
    from puzzlebox.config import PuzzleBoxSettings, configure_logging

    settings = PuzzleBoxSettings(guard_timeout=2.0)
    configure_logging(settings.log_level)
"""

from puzzlebox.config.logging import configure_logging
from puzzlebox.config.settings import PuzzleBoxSettings

__all__ = [
    "PuzzleBoxSettings",
    "configure_logging",
]
