"""
Songline Configuration

Centralized settings, paths, and constants for the application.
"""

import logging
import os
from pathlib import Path
from dataclasses import dataclass, field
import appdirs


# Application info
APP_NAME = "Songline"
APP_AUTHOR = "Songline"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Data directory (stores song catalogs)
    data_dir: Path = Path(appdirs.user_data_dir(APP_NAME, APP_AUTHOR))

    # Config directory
    config_dir: Path = Path(appdirs.user_config_dir(APP_NAME, APP_AUTHOR))

    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def songs_dir(self) -> Path:
        return self.data_dir / "songs"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "songline.log"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        for dir_path in [self.data_dir, self.config_dir, self.log_dir, self.songs_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class GameSettings:
    """Match-related settings."""
    # Songs a team must place (beyond its anchor) to win
    default_win_count: int = 10

    # Preview length in milliseconds
    preview_length_ms: int = 30_000  # 30 seconds

    # Preview progress tick interval in milliseconds
    tick_interval_ms: int = 100

    # Playback volume, 0-100
    default_volume: int = 80


@dataclass(frozen=True)
class CatalogSettings:
    """Song catalog settings."""
    # One JSON file per difficulty tier
    files: dict[str, str] = field(default_factory=lambda: {
        "easy": "songs-easy.json",
        "medium": "songs-medium.json",
        "hard": "songs-hard.json",
    })

    # Record field handed to the playback provider as media_ref
    media_ref_field: str = "spotify_search"

    # HTTP timeout in seconds (remote catalogs)
    request_timeout: float = 15.0


@dataclass(frozen=True)
class YouTubeSettings:
    """YouTube Data API settings."""
    api_base_url: str = "https://www.googleapis.com/youtube/v3"
    embed_base_url: str = "https://www.youtube.com/embed"
    api_key: str = field(default_factory=lambda: os.environ.get("YOUTUBE_API_KEY", ""))

    # Maximum results per search
    max_results: int = 1

    # Music category
    video_category_id: str = "10"

    request_timeout: float = 15.0


@dataclass(frozen=True)
class SpotifySettings:
    """Spotify embed and Web API settings."""
    embed_base_url: str = "https://open.spotify.com/embed/track"
    token_url: str = "https://accounts.spotify.com/api/token"
    api_base_url: str = "https://api.spotify.com/v1"

    # Delay between search requests in seconds
    request_delay: float = 0.1

    request_timeout: float = 15.0


# Singleton instances
PATHS = Paths()
GAME_SETTINGS = GameSettings()
CATALOG_SETTINGS = CatalogSettings()
YOUTUBE_SETTINGS = YouTubeSettings()
SPOTIFY_SETTINGS = SpotifySettings()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(paths: Paths = PATHS, level: int = logging.INFO) -> None:
    """Log to stderr and to the application log file."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(paths.log_file, encoding="utf-8"),
        ],
        force=True,
    )


def init_config(paths: Paths = PATHS) -> None:
    """Initialize configuration, create required directories and set up logging."""
    paths.ensure_directories()
    configure_logging(paths)
