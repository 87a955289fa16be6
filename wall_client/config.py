"""Configuration for the AnonWall client."""

import os
from pathlib import Path

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Client settings with environment variable support."""

    # Posts table
    store_endpoint: str = Field(default="http://localhost:8000")
    request_timeout: float = Field(default=10.0)

    # Feed polling
    poll_interval: float = Field(default=5.0)
    max_poll_backoff: float = Field(default=60.0)

    # Local key/value storage (identity and theme)
    storage_path: Path = Field(default=Path.home() / ".anonwall" / "storage.json")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    def __init__(self, **kwargs):
        env_values = {}

        env_mapping = {
            "WALL_STORE_ENDPOINT": "store_endpoint",
            "WALL_REQUEST_TIMEOUT": "request_timeout",
            "WALL_POLL_INTERVAL": "poll_interval",
            "WALL_MAX_POLL_BACKOFF": "max_poll_backoff",
            "WALL_STORAGE_PATH": "storage_path",
            "WALL_LOG_LEVEL": "log_level",
            "WALL_LOG_FORMAT": "log_format",
        }

        for env_var, field_name in env_mapping.items():
            if env_var in os.environ:
                env_values[field_name] = os.environ[env_var]

        # kwargs take precedence over the environment
        final_values = {**env_values, **kwargs}
        super().__init__(**final_values)


# Global settings instance
settings = Settings()
