"""Runtime settings read from the Lambda environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from app.exceptions import ConfigurationError

TABLE_NAME_ENV_VAR = "DYNAMODB_TABLE_NAME"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration for the product handler."""

    table_name: str
    region_name: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigurationError: If the table name is not configured.
        """
        table_name = os.getenv(TABLE_NAME_ENV_VAR, "").strip()
        if not table_name:
            raise ConfigurationError(TABLE_NAME_ENV_VAR)
        region_name = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
        return cls(table_name=table_name, region_name=region_name or None)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return settings, reading the environment once per process."""
    return Settings.from_env()


def clear_settings_cache() -> None:
    """Clear cached settings (useful in tests)."""
    get_settings.cache_clear()
