"""
Songline Playback

Preview players the application controller can wire in. The game engine
does not depend on any of them.
"""

from playback.base import PlaybackProvider, PlaybackState
from playback.spotify import SpotifyEmbedProvider
from playback.youtube import YouTubeProvider, YouTubeClient, VideoInfo

__all__ = [
    "PlaybackProvider",
    "PlaybackState",
    "SpotifyEmbedProvider",
    "YouTubeProvider",
    "YouTubeClient",
    "VideoInfo",
]
