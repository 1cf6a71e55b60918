from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .options import CatalogEntry, Gender


class GeneratedImage(BaseModel):
    """Image returned by the generative API, still base64 encoded."""

    model_config = ConfigDict(frozen=True)

    data: str = Field(..., repr=False)
    mime_type: str = "image/jpeg"

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class GenerationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl")


class ErrorResponse(BaseModel):
    error: str


class KeyReport(BaseModel):
    present: bool
    length: int
    first_char: str | None = Field(None, alias="firstChar")
    last_char: str | None = Field(None, alias="lastChar")

    model_config = ConfigDict(populate_by_name=True)


class EnvCheckResponse(BaseModel):
    status: str = "Debug Check"
    timestamp: datetime
    environment: dict[str, str | KeyReport]


class OptionsCatalog(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    gender: Gender
    hair_styles: list[CatalogEntry] = Field(..., alias="hairStyles")
    hair_colors: list[CatalogEntry] = Field(..., alias="hairColors")
