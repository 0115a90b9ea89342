"""
Team Timelines

Each team owns a private timeline of songs ordered by release year:
- The first entry is the anchor, dealt at match start
- Drawn songs are inserted at the position the team picks
- A placement only lands if it keeps the timeline in chronological order
- Score is the number of placed songs, the anchor does not count
"""

from dataclasses import dataclass, field
from typing import Optional

from models.song import Song


@dataclass(frozen=True)
class TimelineEntry:
    """A song sitting in a team's timeline."""
    song: Song
    is_anchor: bool = False

    @property
    def year(self) -> int:
        return self.song.year


@dataclass
class TeamTimeline:
    """
    A team and its chronological timeline.

    The timeline is sorted ascending by year at all times: every insertion
    goes through accepts() first, so an out-of-order entry never lands.

    Attributes:
        name: The team's display name
        target: Placed songs needed to win
        entries: Timeline entries, oldest first
    """
    name: str
    target: int
    entries: list[TimelineEntry] = field(default_factory=list)

    @property
    def score(self) -> int:
        """Placed songs, not counting the anchor."""
        return max(len(self.entries) - 1, 0)

    @property
    def has_won(self) -> bool:
        return self.score >= self.target

    @property
    def anchor(self) -> Optional[TimelineEntry]:
        for entry in self.entries:
            if entry.is_anchor:
                return entry
        return None

    def __len__(self) -> int:
        return len(self.entries)

    def years(self) -> list[int]:
        return [entry.year for entry in self.entries]

    def is_valid_index(self, index: int) -> bool:
        """Insert positions run from 0 (before the oldest) to len (after the newest)."""
        return 0 <= index <= len(self.entries)

    def accepts(self, year: int, index: int) -> bool:
        """
        Check whether a song from the given year belongs at index.

        Ties are accepted on either side: a song from the same year as its
        neighbour is placeable before or after it.
        """
        if not self.is_valid_index(index):
            raise IndexError(f"Insert position {index} outside 0..{len(self.entries)}")

        if index > 0 and self.entries[index - 1].year > year:
            return False
        if index < len(self.entries) and year > self.entries[index].year:
            return False
        return True

    def set_anchor(self, song: Song) -> None:
        """Seed an empty timeline with its starting song."""
        if self.entries:
            raise ValueError(f"Timeline for {self.name} already has an anchor")
        self.entries.append(TimelineEntry(song=song, is_anchor=True))

    def insert(self, song: Song, index: int) -> bool:
        """
        Insert a drawn song at index if the placement is chronological.

        Returns:
            True if the song was inserted, False if the placement was wrong
            (the timeline is left untouched)
        """
        if not self.accepts(song.year, index):
            return False
        self.entries.insert(index, TimelineEntry(song=song, is_anchor=False))
        return True

    def get_timeline_state(self) -> list[dict]:
        """
        Get the timeline for display.

        Returns:
            List of dicts with song info, oldest first
        """
        return [
            {
                "id": entry.song.id,
                "artist": entry.song.artist,
                "title": entry.song.title,
                "year": entry.year,
                "is_anchor": entry.is_anchor,
            }
            for entry in self.entries
        ]
