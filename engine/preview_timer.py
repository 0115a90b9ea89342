"""
Preview Timer - Countdown for song previews.

Tracks how long the drawn song has been playing, reports progress for the
playback bar and fires once the preview length has elapsed so the caller
can pause the player.
"""

from PySide6.QtCore import QObject, Qt, Signal, QTimer, QElapsedTimer

from config import GAME_SETTINGS


class PreviewTimer(QObject):
    """
    Countdown for one song preview (30 seconds by default).

    Reports progress every tick and fires expired when the preview is over.
    Pausing freezes the countdown; the played time carries over on resume.

    Usage:
        timer = PreviewTimer()
        timer.progress_changed.connect(on_progress)
        timer.expired.connect(player.pause)
        timer.start()
    """

    # Signals
    tick = Signal(int)                  # milliseconds remaining
    progress_changed = Signal(float)    # percent of the preview played
    expired = Signal()                  # preview is over

    # Constants
    PREVIEW_LENGTH_MS = GAME_SETTINGS.preview_length_ms
    TICK_INTERVAL_MS = GAME_SETTINGS.tick_interval_ms

    def __init__(self, duration_ms: int = None):
        """
        Initialize the preview timer.

        Args:
            duration_ms: Custom preview length in milliseconds (default: 30000)
        """
        super().__init__()

        self._duration_ms = duration_ms or self.PREVIEW_LENGTH_MS
        self._played_ms = 0
        self._active = False
        self._is_paused = False

        self._ticker = QTimer(self)
        self._ticker.setInterval(self.TICK_INTERVAL_MS)
        self._ticker.setTimerType(Qt.TimerType.PreciseTimer)
        self._ticker.timeout.connect(self._on_tick)

        # Measures the current uninterrupted stretch of playback
        self._stretch = QElapsedTimer()

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    @property
    def is_running(self) -> bool:
        """True while the preview is counting down."""
        return self._active and not self._is_paused

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    @property
    def has_expired(self) -> bool:
        """True once the whole preview has been played."""
        return not self._active and self._played_ms >= self._duration_ms

    @property
    def elapsed_ms(self) -> int:
        played = self._played_ms
        if self.is_running and self._stretch.isValid():
            played += self._stretch.elapsed()
        return min(played, self._duration_ms)

    @property
    def remaining_ms(self) -> int:
        return self._duration_ms - self.elapsed_ms

    @property
    def progress(self) -> float:
        """Percent of the preview played, 0-100."""
        return 100.0 * self.elapsed_ms / self._duration_ms

    def start(self, duration_ms: int = None) -> None:
        """Start counting down a new preview."""
        if duration_ms is not None:
            self._duration_ms = duration_ms
        self._played_ms = 0
        self._active = True
        self._is_paused = False

        self._stretch.start()
        self._ticker.start()

        self.tick.emit(self._duration_ms)

    def stop(self) -> None:
        """Stop the countdown, keeping the time played so far."""
        self._freeze()
        self._ticker.stop()
        self._active = False
        self._is_paused = False

    def pause(self) -> None:
        if self.is_running:
            self._ticker.stop()
            self._freeze()
            self._is_paused = True

    def resume(self) -> None:
        if self._active and self._is_paused:
            self._stretch.start()
            self._is_paused = False
            self._ticker.start()

    def reset(self, duration_ms: int = None) -> None:
        """Stop and rewind to the full preview length."""
        self.stop()
        if duration_ms is not None:
            self._duration_ms = duration_ms
        self._played_ms = 0

    def _freeze(self) -> None:
        # Fold the running stretch into the played total
        if self.is_running:
            self._played_ms = self.elapsed_ms
            self._stretch.invalidate()

    def _on_tick(self) -> None:
        remaining = self.remaining_ms

        self.tick.emit(remaining)
        self.progress_changed.emit(self.progress)

        if remaining <= 0:
            self._ticker.stop()
            self._freeze()
            self._active = False
            self.expired.emit()
