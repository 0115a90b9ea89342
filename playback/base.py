"""
Playback provider contract.

A provider plays the short preview of a drawn song. The game engine never
talks to a provider; the application controller does, and a provider
failure never changes which song was drawn.
"""

from enum import Enum

from PySide6.QtCore import QObject, Signal


class PlaybackState(Enum):
    PLAYING = "playing"
    PAUSED = "paused"


class PlaybackProvider(QObject):
    """
    Base class for preview players.

    Subclasses implement start/stop/pause/resume/set_volume/get_state.
    start() reports failure by returning False rather than raising, so a
    missing preview never interrupts a turn. State can be polled with
    get_state() or followed through the state_changed signal.
    """

    state_changed = Signal(object)      # PlaybackState

    def __init__(self):
        super().__init__()
        self._state = PlaybackState.PAUSED
        self._volume = 100

    @property
    def volume(self) -> int:
        return self._volume

    def start(self, media_ref: str) -> bool:
        """Start the preview for media_ref. Returns False if it cannot play."""
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def resume(self) -> None:
        raise NotImplementedError

    def set_volume(self, volume: int) -> None:
        """Set playback volume, 0-100."""
        raise NotImplementedError

    def get_state(self) -> PlaybackState:
        return self._state

    def toggle(self) -> None:
        """Toggle play/pause."""
        if self.get_state() == PlaybackState.PLAYING:
            self.pause()
        else:
            self.resume()

    def _set_state(self, new_state: PlaybackState) -> None:
        if self._state != new_state:
            self._state = new_state
            self.state_changed.emit(new_state)

    @staticmethod
    def clamp_volume(volume: int) -> int:
        return max(0, min(100, int(volume)))
