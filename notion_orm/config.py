"""
Explicit runtime configuration.

Core components take a ``NotionOrmConfig`` in their constructors; only
``NotionOrmConfig.from_env`` touches the process environment.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


_TRUTHY = {"1", "true", "yes", "on"}


class NotionOrmConfig(BaseModel):
    """Configuration for the remote client and query layer."""

    api_key: Optional[str] = None
    notion_version: str = "2022-06-28"
    base_url: str = "https://api.notion.com/v1"
    max_retries: int = Field(default=3, ge=1)
    retry_delay: float = 1.0
    timeout: float = 30.0
    relation_cache_ttl: float = 300.0
    debug: bool = False

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides) -> "NotionOrmConfig":
        """
        Build a config from environment variables.

        Reads ``NOTION_API_KEY``, ``NOTION_VERSION`` and ``NOTION_ORM_DEBUG``
        after loading a ``.env`` file if one is present.

        Args:
            env_file: Optional explicit path to a .env file
            **overrides: Values that take precedence over the environment

        Returns:
            Populated NotionOrmConfig
        """
        load_dotenv(env_file)

        values = {
            "api_key": os.getenv("NOTION_API_KEY"),
            "debug": os.getenv("NOTION_ORM_DEBUG", "").lower() in _TRUTHY,
        }
        notion_version = os.getenv("NOTION_VERSION")
        if notion_version:
            values["notion_version"] = notion_version

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
