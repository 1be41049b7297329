"""Settings for text ingestion and logging, read from the environment."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SpamTreeSettings(BaseSettings):
    """Runtime settings for spamtree.

    Values are read from ``SPAMTREE_*`` environment variables or a local
    ``.env`` file, falling back to the defaults below.

    Attributes:
        text_column (str): Dataset column holding the raw text of each sample.
        label_column (str): Dataset column holding the expected label.
        lowercase (bool): Whether tokens are lowercased before counting.
        min_token_length (int): Tokens shorter than this are dropped.
        log_level (str): Default minimum level for ``enable_logging``.
        log_format (Literal["short", "full"]): Default log line layout.

    Examples:
        >>> settings = SpamTreeSettings(text_column="body")
        >>> settings.text_column
        'body'
    """

    model_config = SettingsConfigDict(
        env_prefix="SPAMTREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    text_column: str = Field(default="text", min_length=1, description="Dataset column holding the sample text.")
    label_column: str = Field(default="label", min_length=1, description="Dataset column holding the label.")
    lowercase: bool = Field(default=True, description="Lowercase tokens before counting.")
    min_token_length: int = Field(default=1, ge=1, description="Tokens shorter than this are dropped.")
    log_level: Literal["TRACE", "DEBUG", "INFO", "SPLIT", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="SPLIT",
        description="Default minimum level for enable_logging.",
    )
    log_format: Literal["short", "full"] = Field(default="short", description="Default log line layout.")


@lru_cache(maxsize=1)
def get_settings() -> SpamTreeSettings:
    """Return the process-wide settings, loading them on first use.

    Returns:
        SpamTreeSettings: The cached settings instance.
    """
    return SpamTreeSettings()
