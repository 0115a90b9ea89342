"""
Songline Application Controller

Top-level controller that wires together all application components. A
presentation layer calls these methods for user actions and listens to
the event bus for updates.
"""

import logging
from typing import Optional, Sequence

from PySide6.QtCore import QObject

from config import CATALOG_SETTINGS, GAME_SETTINGS
from engine.errors import NoSongsRemainingError, PlaybackError
from engine.game import GameEngine, MatchSnapshot, PlacementResult
from engine.preview_timer import PreviewTimer
from models.song import Difficulty, Song
from playback.base import PlaybackProvider
from playback.spotify import SpotifyEmbedProvider
from playback.youtube import YouTubeProvider
from services.catalog import JsonCatalogProvider
from services.event_bus import EventBus

logger = logging.getLogger(__name__)


def default_playback(media_ref_field: str) -> PlaybackProvider:
    """
    Pick the preview player that understands the catalog's media_ref field.

    spotify_track_id values are Spotify track ids, preview_url values are
    playable URLs or files; anything else (spotify_search by default) is a
    free-text query resolved through YouTube search.
    """
    if media_ref_field == "spotify_track_id":
        return SpotifyEmbedProvider()
    if media_ref_field == "preview_url":
        from playback.media_player import MediaPlayerProvider
        return MediaPlayerProvider(volume=GAME_SETTINGS.default_volume)

    return YouTubeProvider()


class SonglineApp(QObject):
    """
    Top-level application controller.

    Owns one GameEngine, one playback provider and the preview timer, and
    decides the policies the engine leaves to its caller: playback is
    started after a draw and stopped after a placement, a preview that
    fails to play is reported but never redraws, and an exhausted catalog
    blocks further draws until the players end the match.
    """

    def __init__(self, catalog_provider=None,
                 playback: Optional[PlaybackProvider] = None,
                 event_bus: Optional[EventBus] = None,
                 engine: Optional[GameEngine] = None,
                 preview_timer: Optional[PreviewTimer] = None):
        super().__init__()

        self.event_bus = event_bus or EventBus()
        self.engine = engine or GameEngine(catalog_provider or JsonCatalogProvider())
        self.playback = playback or default_playback(
            getattr(self.engine.catalog_provider, "media_ref_field", CATALOG_SETTINGS.media_ref_field)
        )
        self.preview_timer = preview_timer or PreviewTimer()

        # Settings of the last started match, for play_again()
        self._last_settings: Optional[tuple[list[str], Difficulty, int]] = None

        self._connect_signals()
        self.playback.set_volume(GAME_SETTINGS.default_volume)

    def _connect_signals(self) -> None:
        """Wire engine, player and timer signals to the event bus."""
        self.engine.match_started.connect(self.event_bus.match_started.emit)
        self.engine.match_reset.connect(self.event_bus.match_reset.emit)
        self.engine.song_drawn.connect(self.event_bus.song_drawn.emit)
        self.engine.song_placed.connect(self.event_bus.song_placed.emit)
        self.engine.turn_advanced.connect(self.event_bus.turn_advanced.emit)
        self.engine.victory.connect(self.event_bus.victory.emit)
        self.engine.state_updated.connect(self.event_bus.state_updated.emit)

        self.playback.state_changed.connect(self.event_bus.playback_state_changed.emit)

        self.preview_timer.progress_changed.connect(self.event_bus.preview_progress.emit)
        self.preview_timer.expired.connect(self._on_preview_expired)

    # ============ Match Actions ============

    def start_game(self, team_names: Sequence[str], difficulty: Difficulty | str,
                   win_count: Optional[int] = None) -> MatchSnapshot:
        """
        Start a new match.

        Blank team names fall back to "Team 1", "Team 2", ...
        """
        names = [name.strip() or f"Team {i + 1}" for i, name in enumerate(team_names)]
        target = win_count if win_count is not None else GAME_SETTINGS.default_win_count

        self._stop_preview()
        snapshot = self.engine.initialize(names, difficulty, target)
        self._last_settings = (names, snapshot.difficulty, target)
        return snapshot

    def draw_card(self) -> Optional[Song]:
        """
        Draw the next song for the active team and start its preview.

        Returns:
            The drawn song, or None when the catalog is exhausted
        """
        try:
            song = self.engine.draw_next_song()
        except NoSongsRemainingError:
            logger.info("No more songs available")
            self.event_bus.catalog_exhausted.emit()
            self.event_bus.emit_message("info", "No more songs available!")
            return None

        try:
            started = self.playback.start(song.media_ref)
        except PlaybackError as e:
            logger.warning("Playback provider error: %s", e)
            started = False

        if started:
            self.preview_timer.start(GAME_SETTINGS.preview_length_ms)
        else:
            logger.warning("Preview unavailable for %s", song)
            self.event_bus.emit_message(
                "warning", f"Could not play {song.artist} - {song.title}"
            )

        return song

    def place(self, insert_index: int, team_index: Optional[int] = None) -> PlacementResult:
        """
        Place the drawn song for the active team (or team_index) and stop the preview.
        """
        if team_index is None:
            team_index = self.engine.active_team_index

        result = self.engine.place_song(team_index, insert_index)
        self._stop_preview()
        return result

    def next_turn(self) -> int:
        """Pass the turn to the next team."""
        return self.engine.advance_turn()

    def end_game(self) -> None:
        """Abandon the current match and go back to setup."""
        self._stop_preview()
        self.engine.reset()

    def play_again(self) -> MatchSnapshot:
        """Start a new match with the settings of the previous one."""
        if self._last_settings is None:
            raise RuntimeError("No previous match to replay")

        names, difficulty, target = self._last_settings
        self.end_game()
        return self.start_game(names, difficulty, target)

    # ============ Playback Controls ============

    def toggle_playback(self) -> None:
        """
        Toggle play/pause of the current preview.

        A preview whose time is up stays paused.
        """
        if self.engine.pending_song is None:
            return
        if self.preview_timer.has_expired:
            logger.debug("Preview over, not resuming")
            return
        self.playback.toggle()
        if self.preview_timer.is_running:
            self.preview_timer.pause()
        else:
            self.preview_timer.resume()

    def set_volume(self, volume: int) -> None:
        """Set playback volume (0-100)."""
        self.playback.set_volume(volume)

    def _stop_preview(self) -> None:
        self.preview_timer.reset()
        self.playback.stop()

    def _on_preview_expired(self) -> None:
        """Pause the player once the preview length has elapsed."""
        self.playback.pause()
        self.event_bus.preview_expired.emit()

    # ============ Query Methods ============

    def get_game_state(self) -> MatchSnapshot:
        return self.engine.snapshot()
