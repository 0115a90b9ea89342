"""
YouTube preview provider.

Songs are referenced by a free-text query ("artist title"). The query is
resolved to a video through the YouTube Data API search endpoint and the
embed URL is handed to the presentation layer, which owns the player.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import requests
from PySide6.QtCore import Signal

from config import YOUTUBE_SETTINGS, YouTubeSettings
from engine.errors import PlaybackError
from playback.base import PlaybackProvider, PlaybackState


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoInfo:
    video_id: str
    title: str
    thumbnail: Optional[str]


class YouTubeClient:
    def __init__(self, settings: YouTubeSettings = YOUTUBE_SETTINGS,
                 session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def search_video(self, query: str) -> Optional[VideoInfo]:
        # GET /search?part=snippet&q=...&type=video&maxResults=1&videoCategoryId=10
        if not self.settings.api_key:
            raise PlaybackError("YouTube API key is not configured")

        params = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "maxResults": self.settings.max_results,
            "key": self.settings.api_key,
            "videoCategoryId": self.settings.video_category_id,
        }
        r = self.session.get(
            f"{self.settings.api_base_url}/search",
            params=params,
            timeout=self.settings.request_timeout,
        )
        r.raise_for_status()
        items = r.json().get("items") or []
        if not items:
            return None

        item = items[0]
        snippet = item.get("snippet") or {}
        thumbnail = ((snippet.get("thumbnails") or {}).get("medium") or {}).get("url")
        return VideoInfo(
            video_id=item["id"]["videoId"],
            title=snippet.get("title", ""),
            thumbnail=thumbnail,
        )


class YouTubeProvider(PlaybackProvider):
    """
    Search-and-embed preview provider.

    start() looks the query up and emits embed_changed with the embed URL;
    pause/resume/volume are forwarded as commands to the embedded player
    through player_command. State is tracked locally.
    """

    embed_changed = Signal(str)             # embed URL, "" when cleared
    player_command = Signal(str, object)    # command name, argument

    def __init__(self, client: Optional[YouTubeClient] = None,
                 settings: YouTubeSettings = YOUTUBE_SETTINGS):
        super().__init__()
        self.settings = settings
        self.client = client or YouTubeClient(settings)
        self.current_video: Optional[VideoInfo] = None

    def embed_url(self, video_id: str) -> str:
        query = urlencode({
            "autoplay": 1,
            "controls": 0,
            "playsinline": 1,
            "modestbranding": 1,
            "rel": 0,
        })
        return f"{self.settings.embed_base_url}/{video_id}?{query}"

    def start(self, media_ref: str) -> bool:
        try:
            video = self.client.search_video(media_ref)
        except (requests.RequestException, PlaybackError, KeyError, ValueError) as e:
            logger.warning("YouTube search failed for %r: %s", media_ref, e)
            return False

        if video is None:
            logger.warning("No YouTube video found for %r", media_ref)
            return False

        self.current_video = video
        self.embed_changed.emit(self.embed_url(video.video_id))
        self.player_command.emit("volume", self._volume)
        self._set_state(PlaybackState.PLAYING)
        return True

    def stop(self) -> None:
        self.current_video = None
        self.embed_changed.emit("")
        self._set_state(PlaybackState.PAUSED)

    def pause(self) -> None:
        if self.current_video is None:
            return
        self.player_command.emit("pause", None)
        self._set_state(PlaybackState.PAUSED)

    def resume(self) -> None:
        if self.current_video is None:
            return
        self.player_command.emit("play", None)
        self._set_state(PlaybackState.PLAYING)

    def set_volume(self, volume: int) -> None:
        self._volume = self.clamp_volume(volume)
        self.player_command.emit("volume", self._volume)
