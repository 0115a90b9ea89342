"""
Game Engine - Core timeline game logic for Songline.

The GameEngine runs independently of any GUI and playback backend. It owns
one match: the shuffled catalog, the team timelines, the drawn songs and
the phase of the match.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from PySide6.QtCore import QObject, Signal
from pydantic import ValidationError

from engine.errors import (
    CatalogError,
    ConfigError,
    InsufficientSongsError,
    InvalidStateError,
    NoSongsRemainingError,
)
from engine.shuffle import fisher_yates
from engine.timeline import TeamTimeline, TimelineEntry
from models.schemas import MatchSettings
from models.song import Difficulty, Song

logger = logging.getLogger(__name__)


class MatchPhase(Enum):
    """State machine states for the match lifecycle."""
    SETUP = "setup"
    PLAYING = "playing"
    AWAITING_PLACEMENT = "awaiting_placement"
    VICTORY = "victory"


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of placing the pending song into a timeline."""
    correct: bool
    victory: bool = False
    winning_team: Optional[int] = None
    correct_year: Optional[int] = None
    team_index: int = 0
    song: Optional[Song] = None


@dataclass(frozen=True)
class TeamSnapshot:
    """Read-only copy of a team and its timeline."""
    name: str
    target: int
    score: int
    timeline: tuple[TimelineEntry, ...]

    @property
    def years(self) -> list[int]:
        return [entry.year for entry in self.timeline]


@dataclass(frozen=True)
class MatchSnapshot:
    """
    Immutable snapshot of the current match state.
    Emitted after every engine action for GUI updates.
    """
    phase: MatchPhase = MatchPhase.SETUP
    teams: tuple[TeamSnapshot, ...] = ()
    active_team_index: int = 0
    pending_song: Optional[Song] = None
    difficulty: Optional[Difficulty] = None
    drawn_count: int = 0
    remaining_count: int = 0
    winning_team: Optional[int] = None

    @property
    def active_team(self) -> Optional[TeamSnapshot]:
        if not self.teams:
            return None
        return self.teams[self.active_team_index]


class GameEngine(QObject):
    """
    Core logic for a timeline music trivia match.
    Emits Qt Signals so presentation layers can react without polling.

    The engine validates placements, keeps scores and drives the phase
    state machine. It does NOT play previews - starting and stopping
    playback for the drawn song is the caller's job.

    Usage:
        engine = GameEngine(JsonCatalogProvider(songs_dir))
        engine.initialize(["Red", "Blue"], Difficulty.EASY, win_target=10)
        song = engine.draw_next_song()
        result = engine.place_song(engine.active_team_index, insert_index=1)
        if not result.victory:
            engine.advance_turn()
    """

    # Signals
    phase_changed = Signal(str)         # new phase value
    match_started = Signal(object)      # MatchSnapshot
    song_drawn = Signal(object)         # Song
    song_placed = Signal(object)        # PlacementResult
    turn_advanced = Signal(int)         # new active team index
    victory = Signal(dict)              # winner details
    match_reset = Signal()
    state_updated = Signal(object)      # MatchSnapshot

    def __init__(self, catalog_provider,
                 shuffle: Optional[Callable[[Sequence[Song]], list[Song]]] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize the game engine.

        Args:
            catalog_provider: Object with fetch(difficulty) -> list[Song]
            shuffle: Catalog shuffle (default: Fisher-Yates using rng)
            rng: Random generator for the default shuffle
        """
        super().__init__()
        self.catalog_provider = catalog_provider
        self._rng = rng or random.Random()
        self._shuffle = shuffle or (lambda songs: fisher_yates(songs, self._rng))
        self._phase = MatchPhase.SETUP
        self._reset_state()

    def _reset_state(self) -> None:
        """Reset all match state to pre-initialize values."""
        self._teams: list[TeamTimeline] = []
        self._active_team_index: int = 0
        self._catalog: list[Song] = []
        self._drawn_ids: set[str] = set()
        self._pending_song: Optional[Song] = None
        self._difficulty: Optional[Difficulty] = None
        self._winning_team: Optional[int] = None

    @property
    def phase(self) -> MatchPhase:
        """Current phase of the match."""
        return self._phase

    @phase.setter
    def phase(self, new_phase: MatchPhase) -> None:
        """Set the match phase and emit signal."""
        if new_phase != self._phase:
            self._phase = new_phase
            self.phase_changed.emit(new_phase.value)

    # ============ Match Lifecycle ============

    def initialize(self, team_names: Sequence[str], difficulty: Difficulty | str,
                   win_target: int) -> MatchSnapshot:
        """
        Start a new match.

        Everything is validated and fetched before any match field is
        touched: on failure the previous state is left as it was.

        Args:
            team_names: One name per team, at least two
            difficulty: Catalog tier to draw from
            win_target: Placed songs a team needs to win (>= 1)

        Returns:
            Snapshot of the freshly started match

        Raises:
            ConfigError: Bad team names, difficulty or win target
            CatalogError: The catalog could not be fetched or is malformed
            InsufficientSongsError: Not enough songs for anchors plus a draw
        """
        settings = self._validate_settings(team_names, difficulty, win_target)
        songs = self._fetch_catalog(settings.difficulty)

        required = len(settings.team_names) + 1
        available = len({song.id for song in songs})
        if available < required:
            raise InsufficientSongsError(available, required)

        catalog = self._shuffle(songs)
        teams = [TeamTimeline(name=name, target=settings.win_target)
                 for name in settings.team_names]
        drawn_ids: set[str] = set()

        anchors = self._take_unused(catalog, drawn_ids, len(teams))
        if len(anchors) < len(teams):
            raise InsufficientSongsError(len(anchors), len(teams))

        for team, song in zip(teams, anchors):
            drawn_ids.add(song.id)
            team.set_anchor(song)

        # Commit
        self._reset_state()
        self._teams = teams
        self._catalog = catalog
        self._drawn_ids = drawn_ids
        self._difficulty = settings.difficulty
        self.phase = MatchPhase.PLAYING

        logger.info(
            "Match started: %d teams, %s, target %d, %d songs",
            len(teams), settings.difficulty.value, settings.win_target, len(catalog),
        )

        snapshot = self.snapshot()
        self.match_started.emit(snapshot)
        self.state_updated.emit(snapshot)
        return snapshot

    def reset(self) -> None:
        """Drop the current match and return to SETUP. Safe from any phase."""
        was_active = self._phase != MatchPhase.SETUP
        self._reset_state()
        self.phase = MatchPhase.SETUP
        if was_active:
            logger.info("Match reset")
            self.match_reset.emit()
            self.state_updated.emit(self.snapshot())

    # ============ Turn Actions ============

    def draw_next_song(self) -> Song:
        """
        Draw the next unused song from the shuffled catalog.

        The song becomes the pending song waiting for placement. Playback
        is not started here.

        Raises:
            InvalidStateError: Not in PLAYING phase
            NoSongsRemainingError: Every catalog song has been drawn
        """
        self._require_phase(MatchPhase.PLAYING, "draw a song")

        found = self._take_unused(self._catalog, self._drawn_ids, 1)
        if not found:
            logger.info("Catalog exhausted after %d songs", len(self._drawn_ids))
            raise NoSongsRemainingError(
                f"All {len(self._drawn_ids)} songs of this match have been drawn"
            )

        song = found[0]
        self._drawn_ids.add(song.id)
        self._pending_song = song
        self.phase = MatchPhase.AWAITING_PLACEMENT

        logger.debug("Drew %s for team %d", song.id, self._active_team_index)
        self.song_drawn.emit(song)
        self.state_updated.emit(self.snapshot())
        return song

    def place_song(self, team_index: int, insert_index: int) -> PlacementResult:
        """
        Place the pending song into a team's timeline.

        The placement is correct when the song's year is not older than
        the entry before insert_index and not newer than the entry at it.
        A correct placement inserts the song; a wrong one leaves the
        timeline untouched and reveals the year. The pending song is
        cleared either way.

        Args:
            team_index: Team whose timeline receives the song
            insert_index: Position in the timeline, 0..len(timeline)

        Returns:
            PlacementResult describing the outcome

        Raises:
            InvalidStateError: No song is waiting, or an index is out of range
        """
        self._require_phase(MatchPhase.AWAITING_PLACEMENT, "place a song")
        if self._pending_song is None:
            self._invalid_state("Cannot place a song: no song is pending")
        if not 0 <= team_index < len(self._teams):
            self._invalid_state(f"Team index {team_index} out of range")

        team = self._teams[team_index]
        if not team.is_valid_index(insert_index):
            self._invalid_state(
                f"Insert index {insert_index} outside 0..{len(team)} for {team.name}"
            )

        song = self._pending_song
        correct = team.insert(song, insert_index)
        self._pending_song = None

        if correct and team.has_won:
            self._winning_team = team_index
            result = PlacementResult(
                correct=True,
                victory=True,
                winning_team=team_index,
                team_index=team_index,
                song=song,
            )
            self.phase = MatchPhase.VICTORY
        elif correct:
            result = PlacementResult(correct=True, team_index=team_index, song=song)
            self.phase = MatchPhase.PLAYING
        else:
            result = PlacementResult(
                correct=False,
                correct_year=song.year,
                team_index=team_index,
                song=song,
            )
            self.phase = MatchPhase.PLAYING

        logger.info(
            "%s placed %s at %d: %s (score %d/%d)",
            team.name, song.id, insert_index,
            "correct" if correct else "wrong", team.score, team.target,
        )

        self.song_placed.emit(result)
        if result.victory:
            self.victory.emit({
                "team_index": team_index,
                "team_name": team.name,
                "score": team.score,
                "years": team.years(),
            })
        self.state_updated.emit(self.snapshot())
        return result

    def advance_turn(self) -> int:
        """
        Pass the turn to the next team.

        Returns:
            The new active team index
        """
        self._require_phase(MatchPhase.PLAYING, "advance the turn")
        if self._teams:
            self._active_team_index = (self._active_team_index + 1) % len(self._teams)

        self.turn_advanced.emit(self._active_team_index)
        self.state_updated.emit(self.snapshot())
        return self._active_team_index

    # ============ Helpers ============

    def _validate_settings(self, team_names, difficulty, win_target) -> MatchSettings:
        """Check match parameters before anything is fetched or mutated."""
        if isinstance(team_names, str):
            raise ConfigError("Team names must be a list of names, not a single string")
        try:
            return MatchSettings(
                team_names=list(team_names),
                difficulty=difficulty,
                win_target=win_target,
            )
        except (ValidationError, TypeError) as e:
            raise ConfigError(f"Invalid match settings: {e}") from e

    def _fetch_catalog(self, difficulty: Difficulty) -> list[Song]:
        """Request the song list, normalizing provider failures to CatalogError."""
        try:
            songs = list(self.catalog_provider.fetch(difficulty))
        except CatalogError:
            raise
        except Exception as e:
            raise CatalogError(f"Could not load {difficulty.value} songs: {e}") from e

        if not all(isinstance(song, Song) for song in songs):
            raise CatalogError(f"Catalog provider returned malformed {difficulty.value} songs")
        return songs

    @staticmethod
    def _take_unused(catalog: Sequence[Song], drawn_ids: set[str], count: int) -> list[Song]:
        """First count songs, in catalog order, whose ids have not been drawn."""
        picked: list[Song] = []
        seen = set(drawn_ids)
        for song in catalog:
            if len(picked) == count:
                break
            if song.id not in seen:
                seen.add(song.id)
                picked.append(song)
        return picked

    def _require_phase(self, phase: MatchPhase, action: str) -> None:
        if self._phase != phase:
            self._invalid_state(f"Cannot {action} in phase: {self._phase.value}")

    @staticmethod
    def _invalid_state(message: str) -> None:
        logger.error(message)
        raise InvalidStateError(message)

    # ============ Query Methods ============

    @property
    def teams(self) -> tuple[TeamSnapshot, ...]:
        return tuple(
            TeamSnapshot(
                name=team.name,
                target=team.target,
                score=team.score,
                timeline=tuple(team.entries),
            )
            for team in self._teams
        )

    @property
    def active_team_index(self) -> int:
        return self._active_team_index

    @property
    def active_team(self) -> Optional[TeamSnapshot]:
        teams = self.teams
        return teams[self._active_team_index] if teams else None

    @property
    def pending_song(self) -> Optional[Song]:
        return self._pending_song

    @property
    def difficulty(self) -> Optional[Difficulty]:
        return self._difficulty

    @property
    def drawn_ids(self) -> frozenset[str]:
        return frozenset(self._drawn_ids)

    @property
    def remaining_count(self) -> int:
        """Songs that can still be drawn in this match."""
        return len({song.id for song in self._catalog} - self._drawn_ids)

    @property
    def is_match_over(self) -> bool:
        return self._phase == MatchPhase.VICTORY

    def snapshot(self) -> MatchSnapshot:
        """Get the current match state snapshot."""
        return MatchSnapshot(
            phase=self._phase,
            teams=self.teams,
            active_team_index=self._active_team_index,
            pending_song=self._pending_song,
            difficulty=self._difficulty,
            drawn_count=len(self._drawn_ids),
            remaining_count=self.remaining_count,
            winning_team=self._winning_team,
        )
