"""
Spotify embed preview provider.

Songs are referenced directly by Spotify track id. The embed widget owns
its own controls, so pause/resume only update the tracked state and
volume cannot be changed from here.
"""

import logging
from typing import Optional

from PySide6.QtCore import Signal

from config import SPOTIFY_SETTINGS, SpotifySettings
from playback.base import PlaybackProvider, PlaybackState

logger = logging.getLogger(__name__)


class SpotifyEmbedProvider(PlaybackProvider):
    """Direct track-id embed provider."""

    embed_changed = Signal(str)     # embed URL, "" when cleared

    def __init__(self, settings: SpotifySettings = SPOTIFY_SETTINGS):
        super().__init__()
        self.settings = settings
        self.current_track_id: Optional[str] = None

    def embed_url(self, track_id: str) -> str:
        return f"{self.settings.embed_base_url}/{track_id}?utm_source=generator&theme=0"

    def start(self, media_ref: str) -> bool:
        if not media_ref:
            logger.warning("No Spotify track id provided")
            return False

        self.current_track_id = media_ref
        self.embed_changed.emit(self.embed_url(media_ref))
        self._set_state(PlaybackState.PLAYING)
        return True

    def stop(self) -> None:
        self.current_track_id = None
        self.embed_changed.emit("")
        self._set_state(PlaybackState.PAUSED)

    def pause(self) -> None:
        self._set_state(PlaybackState.PAUSED)

    def resume(self) -> None:
        if self.current_track_id is None:
            return
        self._set_state(PlaybackState.PLAYING)

    def set_volume(self, volume: int) -> None:
        # Not available with Spotify embeds
        logger.info("Volume control not available with Spotify embeds")
