"""
Spotify Track Mapping

Looks every catalog song up on the Spotify Web API and stores the matching
track id in the record (spotify_track_id), so the Spotify embed provider
can play it without any API key at game time.
"""

import base64
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests

from config import SPOTIFY_SETTINGS, SpotifySettings

logger = logging.getLogger(__name__)


@dataclass
class MappingReport:
    """Result of mapping one catalog file."""
    path: Path
    found: int = 0
    not_found: int = 0

    @property
    def total(self) -> int:
        return self.found + self.not_found


class SpotifyClient:
    def __init__(self, client_id: str, client_secret: str,
                 settings: SpotifySettings = SPOTIFY_SETTINGS,
                 session: Optional[requests.Session] = None):
        self.client_id = client_id
        self.client_secret = client_secret
        self.settings = settings
        self.session = session or requests.Session()
        self._token: Optional[str] = None

    def authenticate(self) -> str:
        # Client credentials flow: POST /api/token with Basic auth
        auth = base64.b64encode(f"{self.client_id}:{self.client_secret}".encode()).decode()
        r = self.session.post(
            self.settings.token_url,
            data={"grant_type": "client_credentials"},
            headers={"Authorization": f"Basic {auth}"},
            timeout=self.settings.request_timeout,
        )
        r.raise_for_status()
        self._token = r.json()["access_token"]
        return self._token

    def search_track(self, artist: str, track: str) -> Optional[str]:
        if self._token is None:
            self.authenticate()

        params = {"q": f"track:{track} artist:{artist}", "type": "track", "limit": 1}
        r = self.session.get(
            f"{self.settings.api_base_url}/search",
            params=params,
            headers={"Authorization": f"Bearer {self._token}"},
            timeout=self.settings.request_timeout,
        )
        r.raise_for_status()
        items = r.json().get("tracks", {}).get("items") or []
        return items[0]["id"] if items else None


class SpotifyCatalogMapper:
    """
    Adds spotify_track_id to every record of the catalog files.

    Usage:
        mapper = SpotifyCatalogMapper(SpotifyClient(client_id, client_secret))
        for path in paths:
            report = mapper.map_file(path)
    """

    def __init__(self, client: SpotifyClient,
                 delay: float = SPOTIFY_SETTINGS.request_delay,
                 sleep: Callable[[float], None] = time.sleep):
        self.client = client
        self.delay = delay
        self._sleep = sleep

    def map_songs(self, songs: list[dict], on_progress: Callable[[int, dict, Optional[str]], None] = None) -> tuple[int, int]:
        """
        Look up each song and set spotify_track_id where a match exists.

        Returns:
            (found, not_found) counts
        """
        found = 0
        not_found = 0

        for i, song in enumerate(songs):
            try:
                track_id = self.client.search_track(song.get("artist", ""), song.get("track", ""))
            except requests.RequestException as e:
                logger.warning("Search failed for %s - %s: %s",
                               song.get("artist"), song.get("track"), e)
                track_id = None

            if track_id:
                song["spotify_track_id"] = track_id
                found += 1
            else:
                not_found += 1

            if on_progress is not None:
                on_progress(i, song, track_id)

            # Rate limiting between requests
            self._sleep(self.delay)

        return found, not_found

    def map_file(self, path: Path, on_progress=None) -> MappingReport:
        """Update one catalog file in place."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            songs = json.load(f)

        found, not_found = self.map_songs(songs, on_progress)

        # Write beside the catalog, then swap it in
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(songs, f, indent=2, ensure_ascii=False)
            tmp_path.replace(path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.info("%s updated: %d found, %d not found", path.name, found, not_found)
        return MappingReport(path=path, found=found, not_found=not_found)
