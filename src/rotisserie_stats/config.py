"""Centralized configuration for rotisserie draft statistics.

Values come from environment variables so the same code can serve a local CLI
session and a hosted deployment without edits.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from rotisserie_stats.data.records import DEFAULT_NUM_DRAFTERS
from rotisserie_stats.draft.turn_order import DEFAULT_DOUBLE_PICK_STARTS_AFTER_ROUND


@dataclass
class DraftConfig:
    """Settings for reading live and historical drafts."""

    user_name: str = "User"  # Seat name treated as "you" in live drafts
    default_num_drafters: int = DEFAULT_NUM_DRAFTERS
    double_pick_starts_after_round: int = DEFAULT_DOUBLE_PICK_STARTS_AFTER_ROUND

    @classmethod
    def from_env(cls) -> DraftConfig:
        """Load draft configuration from environment variables."""
        return cls(
            user_name=os.getenv("DRAFT_USER_NAME", "User"),
            default_num_drafters=int(
                os.getenv("DEFAULT_NUM_DRAFTERS", str(DEFAULT_NUM_DRAFTERS))
            ),
            double_pick_starts_after_round=int(
                os.getenv(
                    "DOUBLE_PICK_STARTS_AFTER_ROUND",
                    str(DEFAULT_DOUBLE_PICK_STARTS_AFTER_ROUND),
                )
            ),
        )


@dataclass
class Config:
    """Main configuration object."""

    draft: DraftConfig = field(default_factory=DraftConfig)

    log_level: str = "INFO"
    data_dir: Path = field(default_factory=lambda: Path("data"))

    # Singleton instance
    _instance: ClassVar[Config | None] = None

    @classmethod
    def get_instance(cls) -> Config:
        """Get or create the singleton configuration instance."""
        if cls._instance is None:
            cls._instance = cls.from_env()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance so the next access re-reads the environment."""
        cls._instance = None

    @classmethod
    def from_env(cls) -> Config:
        """Load full configuration from environment variables."""
        return cls(
            draft=DraftConfig.from_env(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            data_dir=Path(os.getenv("DATA_DIR", "data")),
        )


def get_config() -> Config:
    """Get the global configuration instance.

    Example:
        >>> config = get_config()
        >>> print(config.draft.user_name)
        User
    """
    return Config.get_instance()
