"""Export settings: BeatSaver endpoint, playlist defaults, paths and logging.

Every field can be set through a ``BSEXPORT_``-prefixed environment variable,
e.g. ``BSEXPORT_OUTPUT_DIR`` or ``BSEXPORT_PLAYER_DATA_PATH``.
"""

from pathlib import Path
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for one export run.

    Values come from the environment first, then from a .env file in the
    working directory. CLI options override the matching fields per run.
    """

    model_config = SettingsConfigDict(
        env_prefix="BSEXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # BeatSaver
    beatsaver_base_url: str = "https://api.beatsaver.com"
    batch_size: int = Field(default=50, ge=1, le=50)
    request_timeout: float = 30.0
    user_agent: str = "bsexport/0.1.0"

    # Playlist
    playlist_author: str = "BeatSaberExportVotes"

    # Paths
    player_data_path: Path | None = None
    output_dir: Path = Field(default_factory=Path.cwd)

    # Logging
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"


@lru_cache
def get_settings() -> Settings:
    """Settings read once per process."""
    return Settings()
