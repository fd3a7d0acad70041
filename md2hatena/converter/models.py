"""Pydantic models for the conversion pipeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ResolvedImage(BaseModel):
    """An image whose Hatena Fotolife URL is known."""

    model_config = ConfigDict(frozen=True)

    original_url: str
    destination_url: str


class ScanResult(BaseModel):
    """Output of the first pass over a note."""

    pending: list[str] = Field(
        default_factory=list, description="Unresolved image URLs in first-seen order"
    )
    alt_map: dict[str, str] = Field(
        default_factory=dict, description="image URL -> alt text"
    )
