"""
Pydantic schemas for data validation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.song import Difficulty, Song


# ============ Catalog Schemas ============

class SongRecord(BaseModel):
    """
    Schema for one entry of a catalog file.

    Catalog files carry extra audio fields (spotify_search,
    spotify_track_id, preview_url, ...); they are kept so the
    configured media field can be picked up.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    artist: str = Field(..., min_length=1)
    track: str = Field(..., min_length=1)
    year: int = Field(..., ge=1, le=9999)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        if v is None:
            return None
        return str(v)

    @field_validator("artist", "track")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v.strip()

    @property
    def song_id(self) -> str:
        return self.id or f"{self.artist} - {self.track}"

    def media_ref(self, field_name: str) -> str:
        """Value of the given audio field, or an "artist track" search query."""
        value = (self.model_extra or {}).get(field_name)
        if value:
            return str(value)
        return f"{self.artist} {self.track}"

    def to_song(self, media_ref_field: str) -> Song:
        return Song(
            id=self.song_id,
            artist=self.artist,
            title=self.track,
            year=self.year,
            media_ref=self.media_ref(media_ref_field),
        )


# ============ Match Schemas ============

class MatchSettings(BaseModel):
    """Schema for starting a new match."""
    team_names: list[str] = Field(..., min_length=2)
    difficulty: Difficulty
    win_target: int = Field(..., ge=1)

    @field_validator("team_names")
    @classmethod
    def names_not_empty(cls, v: list[str]) -> list[str]:
        names = [name.strip() for name in v]
        if any(not name for name in names):
            raise ValueError("Team names cannot be empty")
        return names
