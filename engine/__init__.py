"""
Songline Game Engine

Core game logic for the timeline music trivia game.
This module contains no GUI or playback dependencies.
"""

from engine.errors import (
    SonglineError,
    ConfigError,
    CatalogError,
    InsufficientSongsError,
    NoSongsRemainingError,
    InvalidStateError,
    PlaybackError,
)
from engine.game import GameEngine, MatchPhase, MatchSnapshot, PlacementResult, TeamSnapshot
from engine.preview_timer import PreviewTimer
from engine.shuffle import fisher_yates
from engine.timeline import TeamTimeline, TimelineEntry

__all__ = [
    "SonglineError",
    "ConfigError",
    "CatalogError",
    "InsufficientSongsError",
    "NoSongsRemainingError",
    "InvalidStateError",
    "PlaybackError",
    "GameEngine",
    "MatchPhase",
    "MatchSnapshot",
    "PlacementResult",
    "TeamSnapshot",
    "PreviewTimer",
    "fisher_yates",
    "TeamTimeline",
    "TimelineEntry",
]
