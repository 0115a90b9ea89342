"""
Song records and difficulty tiers.
"""

import enum
from dataclasses import dataclass


class Difficulty(enum.Enum):
    """Catalog difficulty tiers, one song file per tier."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class Song:
    """
    A song drawn from the catalog.

    Songs are immutable: the same record is shared between the shuffled
    catalog, the pending draw and the timeline it ends up in.

    Attributes:
        id: Identifier, unique within the catalog
        artist: Performing artist
        title: Track title
        year: Release year, the value players have to guess
        media_ref: Opaque reference handed to the playback provider
    """
    id: str
    artist: str
    title: str
    year: int
    media_ref: str = ""

    def __str__(self) -> str:
        return f"{self.artist} - {self.title} ({self.year})"
