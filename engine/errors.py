"""
Songline exceptions.

Raised by the game engine, catalog providers and playback providers so the
application layer can tell user-fixable problems from caller bugs.
"""


class SonglineError(Exception):
    """Base class for all game errors."""
    pass


# ============ Setup ============

class ConfigError(SonglineError):
    """Bad match setup parameters (team names, difficulty, win target)."""
    pass


# ============ Catalog ============

class CatalogError(SonglineError):
    """Song catalog unreachable or malformed."""
    pass


class InsufficientSongsError(CatalogError):
    """Catalog too small for the requested number of teams."""

    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        super().__init__(
            f"Catalog has {available} usable songs, {required} required"
        )


class NoSongsRemainingError(SonglineError):
    """Every song of the catalog has been drawn in this match."""
    pass


# ============ State ============

class InvalidStateError(SonglineError):
    """An operation was called while its preconditions did not hold."""
    pass


# ============ Playback ============

class PlaybackError(SonglineError):
    """A playback provider could not resolve or play a preview."""
    pass
