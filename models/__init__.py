"""
Songline Models

Song records and the pydantic schemas used to validate catalogs and match
settings.
"""

from models.song import Song, Difficulty
from models.schemas import SongRecord, MatchSettings

__all__ = [
    "Song",
    "Difficulty",
    "SongRecord",
    "MatchSettings",
]
