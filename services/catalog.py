"""
Song Catalogs

Catalog providers supply the unordered song list for a difficulty tier.
Catalog files are flat JSON arrays of {artist, track, year, ...} records,
one file per tier.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

import requests
from pydantic import ValidationError

from config import CATALOG_SETTINGS, PATHS
from engine.errors import CatalogError
from models.schemas import SongRecord
from models.song import Difficulty, Song

logger = logging.getLogger(__name__)


def parse_catalog(raw, media_ref_field: str = CATALOG_SETTINGS.media_ref_field) -> list[Song]:
    """
    Validate raw catalog data and convert it to songs.

    Args:
        raw: Decoded JSON, expected to be a list of song records
        media_ref_field: Record field used as the playback reference

    Returns:
        List of Song objects in file order

    Raises:
        CatalogError: The data is not a list, a record is invalid, or two
            records share an id
    """
    if not isinstance(raw, list):
        raise CatalogError(f"Catalog must be a JSON array, got {type(raw).__name__}")

    songs = []
    seen: set[str] = set()
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise CatalogError(f"Catalog entry #{i} is not an object")
        try:
            record = SongRecord.model_validate(item)
        except ValidationError as e:
            raise CatalogError(f"Catalog entry #{i} is invalid: {e}") from e

        song = record.to_song(media_ref_field)
        if song.id in seen:
            raise CatalogError(f"Duplicate song id in catalog: {song.id}")
        seen.add(song.id)
        songs.append(song)

    return songs


class StaticCatalogProvider:
    """Catalog held in memory, keyed by difficulty."""

    def __init__(self, songs: dict[Difficulty, Iterable[Song]]):
        self._songs = {difficulty: list(items) for difficulty, items in songs.items()}

    def fetch(self, difficulty: Difficulty) -> list[Song]:
        if difficulty not in self._songs:
            raise CatalogError(f"No songs for difficulty: {difficulty.value}")
        return list(self._songs[difficulty])


class JsonCatalogProvider:
    """
    Catalog read from a directory of JSON files.

    Usage:
        provider = JsonCatalogProvider(PATHS.songs_dir)
        songs = provider.fetch(Difficulty.MEDIUM)  # reads songs-medium.json
    """

    def __init__(self, songs_dir: Optional[Path] = None,
                 files: Optional[dict[str, str]] = None,
                 media_ref_field: str = CATALOG_SETTINGS.media_ref_field):
        self.songs_dir = Path(songs_dir) if songs_dir is not None else PATHS.songs_dir
        self.files = files or CATALOG_SETTINGS.files
        self.media_ref_field = media_ref_field

    def path_for(self, difficulty: Difficulty) -> Path:
        try:
            return self.songs_dir / self.files[difficulty.value]
        except KeyError:
            raise CatalogError(f"No catalog file configured for {difficulty.value}") from None

    def fetch(self, difficulty: Difficulty) -> list[Song]:
        path = self.path_for(difficulty)
        logger.info("Loading songs from %s", path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Could not read {path}: {e}") from e

        songs = parse_catalog(raw, self.media_ref_field)
        logger.info("Loaded %d songs for %s difficulty", len(songs), difficulty.value)
        return songs


class HttpCatalogProvider:
    """Catalog served over HTTP, one JSON file per tier under base_url."""

    def __init__(self, base_url: str,
                 files: Optional[dict[str, str]] = None,
                 media_ref_field: str = CATALOG_SETTINGS.media_ref_field,
                 session: Optional[requests.Session] = None,
                 timeout: float = CATALOG_SETTINGS.request_timeout):
        self.base_url = base_url.rstrip("/")
        self.files = files or CATALOG_SETTINGS.files
        self.media_ref_field = media_ref_field
        self.session = session or requests.Session()
        self.timeout = timeout

    def url_for(self, difficulty: Difficulty) -> str:
        try:
            return f"{self.base_url}/{self.files[difficulty.value]}"
        except KeyError:
            raise CatalogError(f"No catalog file configured for {difficulty.value}") from None

    def fetch(self, difficulty: Difficulty) -> list[Song]:
        url = self.url_for(difficulty)
        logger.info("Fetching songs from %s", url)
        try:
            r = self.session.get(url, timeout=self.timeout)
            r.raise_for_status()
            raw = r.json()
        except (requests.RequestException, ValueError) as e:
            raise CatalogError(f"Could not fetch {url}: {e}") from e

        songs = parse_catalog(raw, self.media_ref_field)
        logger.info("Loaded %d songs for %s difficulty", len(songs), difficulty.value)
        return songs
