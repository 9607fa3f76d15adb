"""Gallery records: artworks, collections and favorites."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Artwork(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    title: str | None = None


class Collection(BaseModel):
    """A user's collection; ``artworks`` is filled by a second query."""

    model_config = ConfigDict(extra="allow")

    id: int
    title: str | None = None
    artworks: list[Artwork] = Field(default_factory=list)


class Favorite(BaseModel):
    model_config = ConfigDict(extra="allow")

    artwork_id: int | None = None
