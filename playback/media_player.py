"""
QtMultimedia preview player.

Plays previews that are reachable as a URL or a local file (for instance a
catalog's preview_url field).
"""

import logging

from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QMediaPlayer, QAudioOutput

from playback.base import PlaybackProvider, PlaybackState

logger = logging.getLogger(__name__)


class MediaPlayerProvider(PlaybackProvider):
    """
    Preview player backed by QMediaPlayer.

    Qt reports playback state changes through signals; they are mirrored
    into get_state() so callers can poll instead.
    """

    def __init__(self, volume: int = 80):
        super().__init__()
        self.audio = QAudioOutput()
        self.media = QMediaPlayer()
        self.media.setAudioOutput(self.audio)
        self.current_ref: str | None = None

        self.set_volume(volume)

        self.media.playbackStateChanged.connect(self._on_qt_state_changed)
        self.media.errorOccurred.connect(self._on_qt_error)

    def start(self, media_ref: str) -> bool:
        if not media_ref:
            logger.warning("No preview source provided")
            return False

        url = QUrl.fromUserInput(media_ref)
        if not url.isValid():
            logger.warning("Invalid preview source: %s", media_ref)
            return False

        self.current_ref = media_ref
        self.media.setSource(url)
        self.media.play()
        self._set_state(PlaybackState.PLAYING)
        return True

    def stop(self) -> None:
        self.media.stop()
        self.current_ref = None
        self._set_state(PlaybackState.PAUSED)

    def pause(self) -> None:
        self.media.pause()
        self._set_state(PlaybackState.PAUSED)

    def resume(self) -> None:
        if self.current_ref is None:
            return
        self.media.play()
        self._set_state(PlaybackState.PLAYING)

    def set_volume(self, volume: int) -> None:
        self._volume = self.clamp_volume(volume)
        self.audio.setVolume(self._volume / 100.0)

    def _on_qt_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState:
            self._set_state(PlaybackState.PLAYING)
        else:
            self._set_state(PlaybackState.PAUSED)

    def _on_qt_error(self, error: QMediaPlayer.Error, message: str) -> None:
        logger.warning("Preview playback failed for %s: %s", self.current_ref, message)
        self._set_state(PlaybackState.PAUSED)
