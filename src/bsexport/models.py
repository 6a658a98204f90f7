"""Pydantic data models for bsexport.

Source files and BeatSaver responses are validated through these schemas
before any field is used, so a missing field surfaces as a single
ValidationError naming every offending location.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

CUSTOM_LEVEL_PREFIX = "custom_level_"


class VoteType(str, Enum):
    """Vote direction stored in votedSongs.json."""

    UPVOTE = "Upvote"
    DOWNVOTE = "Downvote"

    def matches(self, value: str) -> bool:
        return value.casefold() == self.value.casefold()


class ExportMode(str, Enum):
    """What to export. The value doubles as the playlist title prefix."""

    FAVORITES = "Favorites"
    UPVOTES = "Upvotes"
    DOWNVOTES = "Downvotes"

    @classmethod
    def parse(cls, text: str) -> "ExportMode":
        """Parse a console answer such as ``u``, ``Upvotes`` or ``favourite``.

        Raises:
            ValueError: If the text names no known mode
        """
        key = text.strip().lower()
        for mode, aliases in _MODE_ALIASES.items():
            if key in aliases:
                return mode
        raise ValueError(f"Unrecognized export mode: {text!r}")

    @property
    def vote_type(self) -> VoteType | None:
        """Vote direction to filter on, or None for favorites."""
        if self is ExportMode.UPVOTES:
            return VoteType.UPVOTE
        if self is ExportMode.DOWNVOTES:
            return VoteType.DOWNVOTE
        return None


_MODE_ALIASES: dict[ExportMode, set[str]] = {
    ExportMode.FAVORITES: {"f", "fav", "favorite", "favorites", "favourite", "favourites"},
    ExportMode.UPVOTES: {"u", "up", "upvote", "upvotes"},
    ExportMode.DOWNVOTES: {"d", "down", "downvote", "downvotes"},
}


class VoteRecord(BaseModel):
    """One entry of votedSongs.json, keyed by map hash."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    hash: str = Field(min_length=1, description="Map content hash")
    vote_type: str = Field(alias="voteType", description="Upvote or Downvote, any case")


class LocalPlayer(BaseModel):
    """A local player from PlayerData.dat."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    player_id: str = Field(default="", alias="playerId")
    player_name: str = Field(default="", alias="playerName")
    favorites_level_ids: list[str] = Field(default_factory=list, alias="favoritesLevelIds")

    @field_validator("favorites_level_ids", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    def custom_level_hashes(self) -> list[str]:
        """Favorite hashes of custom levels, in profile order.

        Built-in levels carry no ``custom_level_`` prefix and have no
        BeatSaver entry, so they are left out.
        """
        return [
            level_id[len(CUSTOM_LEVEL_PREFIX):]
            for level_id in self.favorites_level_ids
            if level_id.startswith(CUSTOM_LEVEL_PREFIX)
        ]


class PlayerProfile(BaseModel):
    """The parts of PlayerData.dat needed for a favorites export."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    local_players: list[LocalPlayer] = Field(alias="localPlayers")


class CatalogEntry(BaseModel):
    """The fields read from a BeatSaver map object."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    name: str


class ResolvedMap(BaseModel):
    """A map whose BeatSaver key and name are known."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    beatsaver_id: str = Field(alias="key", description="BeatSaver map key")
    hash: str = Field(description="Map content hash")
    name: str = Field(alias="songName", description="Song name on BeatSaver")


class Playlist(BaseModel):
    """A .bplist playlist as read by the game client."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(alias="playlistTitle")
    author: str = Field(alias="playlistAuthor")
    description: str = Field(alias="playlistDescription")
    image: str | None = Field(default=None, alias="image")
    songs: list[ResolvedMap] = Field(default_factory=list, alias="songs")

    def to_json(self) -> str:
        """Serialize to the compact .bplist JSON document."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Playlist":
        return cls.model_validate_json(data)


class SkippedMap(BaseModel):
    """A hash the catalog could not resolve."""

    hash: str
    reason: str


class ExportResult(BaseModel):
    """Summary of a finished export."""

    mode: ExportMode
    output_path: Path
    playlist: Playlist
    requested: int = Field(description="Number of hashes sent to BeatSaver")
    skipped: list[SkippedMap] = Field(default_factory=list)
    exported_at: datetime
