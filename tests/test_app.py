"""
Tests for the SonglineApp controller.

The controller is exercised with an in-memory catalog and a recording
playback provider.
"""

import json
import time

import pytest
from unittest.mock import MagicMock

from engine.errors import ConfigError, PlaybackError
from engine.game import MatchPhase
from models.song import Difficulty, Song
from playback.base import PlaybackProvider, PlaybackState
from playback.spotify import SpotifyEmbedProvider
from playback.youtube import VideoInfo, YouTubeProvider
from services.catalog import JsonCatalogProvider, StaticCatalogProvider


def make_song(song_id, year) -> Song:
    return Song(id=str(song_id), artist=f"Artist {song_id}", title=f"Title {song_id}",
                year=year, media_ref=f"ref-{song_id}")


SONGS = [make_song(1, 1990), make_song(2, 2000), make_song(3, 2010), make_song(4, 1980)]


class RecordingPlayback(PlaybackProvider):
    """Playback provider that records calls instead of playing."""

    def __init__(self, fail: bool = False, raise_error: bool = False):
        super().__init__()
        self.fail = fail
        self.raise_error = raise_error
        self.calls = []

    def start(self, media_ref: str) -> bool:
        self.calls.append(("start", media_ref))
        if self.raise_error:
            raise PlaybackError("player crashed")
        if self.fail:
            return False
        self._set_state(PlaybackState.PLAYING)
        return True

    def stop(self) -> None:
        self.calls.append(("stop",))
        self._set_state(PlaybackState.PAUSED)

    def pause(self) -> None:
        self.calls.append(("pause",))
        self._set_state(PlaybackState.PAUSED)

    def resume(self) -> None:
        self.calls.append(("resume",))
        self._set_state(PlaybackState.PLAYING)

    def set_volume(self, volume: int) -> None:
        self.calls.append(("volume", volume))
        self._volume = self.clamp_volume(volume)


@pytest.fixture
def make_app(qapp):
    from app import SonglineApp
    from engine.game import GameEngine

    def factory(songs=SONGS, playback=None):
        engine = GameEngine(StaticCatalogProvider({Difficulty.EASY: songs}),
                            shuffle=lambda items: list(items))
        return SonglineApp(engine=engine, playback=playback or RecordingPlayback())

    return factory


class TestSonglineAppMatch:
    """Tests for match actions."""

    def test_start_game_uses_default_target(self, make_app):
        app = make_app()

        snapshot = app.start_game(["Red", "Blue"], Difficulty.EASY)

        assert snapshot.phase == MatchPhase.PLAYING
        assert [team.target for team in snapshot.teams] == [10, 10]

    def test_blank_names_get_defaults(self, make_app):
        app = make_app()

        snapshot = app.start_game(["", "  "], "easy", win_count=5)

        assert [team.name for team in snapshot.teams] == ["Team 1", "Team 2"]

    def test_single_team_rejected(self, make_app):
        app = make_app()

        with pytest.raises(ConfigError):
            app.start_game(["Red"], Difficulty.EASY)

        assert app.get_game_state().phase == MatchPhase.SETUP

    def test_draw_starts_preview(self, make_app):
        app = make_app()
        app.start_game(["Red", "Blue"], Difficulty.EASY)

        song = app.draw_card()

        assert song.id == "3"
        assert ("start", "ref-3") in app.playback.calls
        assert app.preview_timer.is_running
        app.end_game()

    def test_failed_preview_does_not_redraw(self, make_app):
        """A preview that cannot play is reported; the drawn song stays."""
        app = make_app(playback=RecordingPlayback(fail=True))
        messages = MagicMock()
        app.event_bus.system_message.connect(messages)
        app.start_game(["Red", "Blue"], Difficulty.EASY)

        song = app.draw_card()

        assert song.id == "3"
        assert app.engine.pending_song == song
        assert app.engine.drawn_ids == {"1", "2", "3"}
        assert not app.preview_timer.is_running
        assert messages.call_args[0][0] == "warning"

    def test_playback_error_is_not_fatal(self, make_app):
        app = make_app(playback=RecordingPlayback(raise_error=True))
        app.start_game(["Red", "Blue"], Difficulty.EASY)

        song = app.draw_card()

        assert song is not None
        assert app.get_game_state().phase == MatchPhase.AWAITING_PLACEMENT

    def test_place_uses_active_team_and_stops_preview(self, make_app):
        app = make_app()
        app.start_game(["Red", "Blue"], Difficulty.EASY)
        app.draw_card()

        result = app.place(1)

        assert result.correct
        assert result.team_index == 0
        assert app.playback.calls[-1] == ("stop",)
        assert not app.preview_timer.is_running

    def test_full_turn_cycle(self, make_app):
        app = make_app()
        app.start_game(["Red", "Blue"], Difficulty.EASY)

        app.draw_card()
        app.place(1)
        assert app.next_turn() == 1

        app.draw_card()
        result = app.place(1)

        assert not result.correct
        assert result.correct_year == 1980
        assert app.get_game_state().teams[1].years == [2000]

    def test_catalog_exhausted_blocks_draws(self, make_app):
        app = make_app(songs=SONGS[:3])
        exhausted = MagicMock()
        app.event_bus.catalog_exhausted.connect(exhausted)
        app.start_game(["Red", "Blue"], Difficulty.EASY)
        app.draw_card()
        app.place(1)

        assert app.draw_card() is None

        exhausted.assert_called_once()
        assert app.get_game_state().phase == MatchPhase.PLAYING

    def test_victory_forwarded_to_event_bus(self, make_app):
        app = make_app()
        victory = MagicMock()
        app.event_bus.victory.connect(victory)
        app.start_game(["Red", "Blue"], Difficulty.EASY, win_count=1)
        app.draw_card()

        result = app.place(1)

        assert result.victory
        victory.assert_called_once()
        assert victory.call_args[0][0]["team_name"] == "Red"

    def test_end_game_resets(self, make_app):
        app = make_app()
        app.start_game(["Red", "Blue"], Difficulty.EASY)
        app.draw_card()

        app.end_game()

        assert app.get_game_state().phase == MatchPhase.SETUP
        assert ("stop",) in app.playback.calls

    def test_play_again_reuses_settings(self, make_app):
        app = make_app()
        app.start_game(["Red", "Blue"], Difficulty.EASY, win_count=1)
        app.draw_card()
        app.place(1)

        snapshot = app.play_again()

        assert snapshot.phase == MatchPhase.PLAYING
        assert [team.name for team in snapshot.teams] == ["Red", "Blue"]
        assert [team.score for team in snapshot.teams] == [0, 0]
        assert snapshot.drawn_count == 2

    def test_play_again_without_match(self, make_app):
        app = make_app()

        with pytest.raises(RuntimeError):
            app.play_again()


class TestSonglineAppPlayback:
    """Tests for playback controls."""

    def test_initial_volume_from_settings(self, make_app):
        app = make_app()

        assert ("volume", 80) in app.playback.calls

    def test_set_volume(self, make_app):
        app = make_app()

        app.set_volume(35)

        assert app.playback.volume == 35

    def test_toggle_pauses_and_resumes(self, make_app):
        app = make_app()
        app.start_game(["Red", "Blue"], Difficulty.EASY)
        app.draw_card()

        app.toggle_playback()
        assert app.playback.get_state() == PlaybackState.PAUSED
        assert app.preview_timer.is_paused

        app.toggle_playback()
        assert app.playback.get_state() == PlaybackState.PLAYING
        assert app.preview_timer.is_running
        app.end_game()

    def test_toggle_without_song_does_nothing(self, make_app):
        app = make_app()
        app.start_game(["Red", "Blue"], Difficulty.EASY)

        app.toggle_playback()

        assert ("pause",) not in app.playback.calls
        assert ("resume",) not in app.playback.calls

    def test_preview_expiry_pauses_player(self, make_app):
        app = make_app()
        expired = MagicMock()
        app.event_bus.preview_expired.connect(expired)
        app.start_game(["Red", "Blue"], Difficulty.EASY)
        app.draw_card()

        app.preview_timer.expired.emit()

        assert app.playback.calls[-1] == ("pause",)
        expired.assert_called_once()

    def test_playback_state_forwarded(self, make_app):
        app = make_app()
        states = MagicMock()
        app.event_bus.playback_state_changed.connect(states)
        app.start_game(["Red", "Blue"], Difficulty.EASY)

        app.draw_card()

        states.assert_called_with(PlaybackState.PLAYING)

    def test_toggle_after_preview_expired_stays_paused(self, make_app, qapp):
        app = make_app()
        expired = MagicMock()
        app.event_bus.preview_expired.connect(expired)
        app.start_game(["Red", "Blue"], Difficulty.EASY)
        app.draw_card()

        app.preview_timer.start(duration_ms=50)
        deadline = time.monotonic() + 3
        while not expired.called and time.monotonic() < deadline:
            qapp.processEvents()
            time.sleep(0.01)

        app.toggle_playback()

        expired.assert_called_once()
        assert ("resume",) not in app.playback.calls
        assert app.playback.get_state() == PlaybackState.PAUSED
        assert not app.preview_timer.is_running

    def test_next_song_preview_can_be_toggled_after_expiry(self, make_app):
        """An expired preview does not block the next song's controls."""
        app = make_app(songs=SONGS + [make_song(5, 1970)])
        app.start_game(["Red", "Blue"], Difficulty.EASY)
        app.draw_card()
        app.preview_timer.expired.emit()
        app.place(1)
        app.next_turn()
        app.draw_card()

        app.toggle_playback()

        assert app.playback.calls[-1] == ("pause",)
        assert app.preview_timer.is_paused


class TestSonglineAppDefaults:
    """Tests for the default preview player wiring."""

    CATALOG = [
        {"artist": "Queen", "track": "Bohemian Rhapsody", "year": 1975,
         "spotify_search": "Queen Bohemian Rhapsody"},
        {"artist": "ABBA", "track": "Waterloo", "year": 1974,
         "spotify_search": "ABBA Waterloo"},
        {"artist": "Nirvana", "track": "Smells Like Teen Spirit", "year": 1991,
         "spotify_search": "Nirvana Smells Like Teen Spirit"},
    ]

    def test_default_app_uses_youtube_search(self, qapp):
        from app import SonglineApp

        app = SonglineApp()

        assert isinstance(app.playback, YouTubeProvider)

    @pytest.mark.parametrize("field, provider_class", [
        ("spotify_search", YouTubeProvider),
        ("spotify_track_id", SpotifyEmbedProvider),
    ])
    def test_provider_follows_media_ref_field(self, qapp, field, provider_class):
        from app import default_playback

        assert isinstance(default_playback(field), provider_class)

    def test_preview_url_uses_media_player(self, qapp):
        from app import default_playback
        from playback.media_player import MediaPlayerProvider

        assert isinstance(default_playback("preview_url"), MediaPlayerProvider)

    def test_catalog_record_reaches_default_player(self, qapp, tmp_path):
        """A drawn song's media_ref is a query the default player can search."""
        from app import SonglineApp

        (tmp_path / "songs-easy.json").write_text(json.dumps(self.CATALOG), encoding="utf-8")
        app = SonglineApp(catalog_provider=JsonCatalogProvider(tmp_path))
        app.playback.client = MagicMock()
        app.playback.client.search_video.return_value = VideoInfo("abc123", "Title", None)
        app.start_game(["Red", "Blue"], Difficulty.EASY)

        song = app.draw_card()

        app.playback.client.search_video.assert_called_once_with(song.media_ref)
        assert song.media_ref in {record["spotify_search"] for record in self.CATALOG}
        assert app.playback.get_state() == PlaybackState.PLAYING
        assert app.preview_timer.is_running
        app.end_game()
