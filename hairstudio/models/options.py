from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

Gender = Literal["female", "male"]


class HairOptions(BaseModel):
    """Hair edit request: the target style and/or colour, by name."""

    gender: Gender = "female"
    hair_style: str | None = None
    hair_color: str | None = None

    @field_validator("hair_style", "hair_color", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TryOnOptions(BaseModel):
    """Virtual try-on request: scene description and framing."""

    scene: str = "Studio with a plain light-grey backdrop"
    lighting: str = "Soft natural light"
    shot_type: str = "Full body shot"
    look_at_camera: bool = True
    aspect_ratio: str = Field("3:4", description="Ratio in 'W:H' form, already extracted from any label.")
    has_bottoms: bool = False


class CatalogEntry(BaseModel):
    id: str
    label: str
    color: str | None = None  # hex swatch, colours only


HAIR_STYLES_FEMALE = [
    CatalogEntry(id="Very Short", label="Very short"),
    CatalogEntry(id="Short", label="Short"),
    CatalogEntry(id="Short Bob", label="Short bob"),
    CatalogEntry(id="Medium", label="Medium"),
    CatalogEntry(id="Semi-Long", label="Semi-long"),
    CatalogEntry(id="Long", label="Long"),
    CatalogEntry(id="Ponytail", label="Ponytail"),
    CatalogEntry(id="Half Up", label="Half up"),
    CatalogEntry(id="Bun Hair", label="Bun"),
    CatalogEntry(id="Twin Tail", label="Twin tails"),
    CatalogEntry(id="Three-strand Braid", label="Three-strand braid"),
]

HAIR_STYLES_MALE = [
    CatalogEntry(id="Buzz Cut", label="Buzz cut"),
    CatalogEntry(id="Two Block", label="Two block"),
    CatalogEntry(id="Mash", label="Mash"),
    CatalogEntry(id="Center Part", label="Center part"),
    CatalogEntry(id="Wolf", label="Wolf cut"),
    CatalogEntry(id="Dreadlocks", label="Dreadlocks"),
    CatalogEntry(id="Braids", label="Braids"),
    CatalogEntry(id="Spiky Short", label="Spiky short"),
]

HAIR_COLORS = [
    CatalogEntry(id="Black", label="Black", color="#1a1a1a"),
    CatalogEntry(id="Dark Brown", label="Dark brown", color="#3d2b1f"),
    CatalogEntry(id="Brown", label="Brown", color="#654321"),
    CatalogEntry(id="Light Brown", label="Light brown", color="#8d6e63"),
    CatalogEntry(id="Blonde", label="Blonde", color="#e6c27b"),
    CatalogEntry(id="Red", label="Red", color="#8d1d1d"),
    CatalogEntry(id="Silver", label="Silver", color="#c0c0c0"),
    CatalogEntry(id="Blue", label="Blue", color="#1e3a8a"),
    CatalogEntry(id="Pink", label="Pink", color="#f472b6"),
]


def hair_styles_for(gender: Gender) -> list[CatalogEntry]:
    return HAIR_STYLES_MALE if gender == "male" else HAIR_STYLES_FEMALE
