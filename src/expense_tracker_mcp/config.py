"""
Configuration for the expense tracker MCP server.

Values come from EXPENSE_TRACKER_* environment variables or a .env file;
command-line flags override them.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ledger_path: Optional[Path] = Field(
        default=None,
        description="Path to the JSON ledger (default: ~/.expense-tracker/ledger.json)",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # Dashboard
    top_categories: int = Field(
        default=4,
        ge=0,
        le=30,
        description="Categories shown individually before folding the rest into 'Other'",
    )
    recent_items_limit: int = Field(
        default=10,
        ge=0,
        description="Number of recent expenses shown on the dashboard",
    )

    # Synthetic buckets
    uncategorized_label: str = Field(default="Uncategorized")
    uncategorized_color: str = Field(default="#95a5a6", pattern=r"^#[0-9a-fA-F]{6}$")
    other_label: str = Field(default="Other")
    other_color: str = Field(default="#bdc3c7", pattern=r"^#[0-9a-fA-F]{6}$")

    currency_symbol: str = Field(default="₽")


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload.
    """
    return Settings()
