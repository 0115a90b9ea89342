"""
Event Bus - Central signal hub for inter-module communication.

All modules connect to this single object rather than directly to each other,
enabling loose coupling between the game engine, the preview players and
whatever presentation layer is wired in.
"""

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """
    Central signal hub for Songline.

    The EventBus acts as a mediator between application components:
    - GameEngine emits match events
    - Playback providers and the preview timer emit playback events
    - Presentation layers listen and update their displays

    Usage:
        # In SonglineApp
        self.engine.song_placed.connect(self.event_bus.song_placed.emit)

        # In a scoreboard view
        self.event_bus.state_updated.connect(self._on_state_updated)
    """

    # ============ Match Lifecycle ============
    match_started = Signal(object)      # MatchSnapshot
    match_reset = Signal()
    victory = Signal(dict)              # {team_index, team_name, score, years}
    catalog_exhausted = Signal()        # no song left to draw

    # ============ Turn Events ============
    song_drawn = Signal(object)         # Song
    song_placed = Signal(object)        # PlacementResult
    turn_advanced = Signal(int)         # active team index
    state_updated = Signal(object)      # MatchSnapshot

    # ============ Playback Events ============
    playback_state_changed = Signal(object)     # PlaybackState
    preview_progress = Signal(float)            # percent played
    preview_expired = Signal()

    # ============ System Events ============
    system_message = Signal(str, str)   # (level, message) - e.g., ("warning", "Preview unavailable")

    def __init__(self):
        super().__init__()

    def emit_message(self, level: str, message: str) -> None:
        """Emit a system message (info, warning, error)."""
        self.system_message.emit(level, message)
