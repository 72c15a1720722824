"""Runtime configuration using pydantic-settings."""

from __future__ import annotations

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings

__all__ = ["GGUFPullSettings", "get_settings"]

DEFAULT_USER_AGENT = "GGUF-Downloader/1.0 (github.com/emreugur35/ggufDownloader)"


class GGUFPullSettings(BaseSettings):
    """Registry, catalog and download settings."""

    model_config = {"env_prefix": "AUMAI_GGUFPULL_"}

    registry_url: str = "https://registry.ollama.ai"
    catalog_url: str = "https://ollama.com/search?o=popular&c=all&q="
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = Field(default=30.0, gt=0)        # seconds, per request phase
    chunk_size: int = Field(default=64 * 1024, gt=0)
    output_dir: str = "."
    summary_limit: int = Field(default=10, gt=0)      # rows in the no-argument listing
    log_level: str = "WARNING"


def get_settings(**overrides: Any) -> GGUFPullSettings:
    """Build settings from the environment, then apply non-``None`` overrides."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return GGUFPullSettings(**values)
