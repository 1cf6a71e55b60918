from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field


class InvalidAspectRatioError(ValueError):
    """Raised when an aspect-ratio string is not of the form ``W:H`` with positive integers."""


class Dimensions(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)

    @property
    def ratio(self) -> float:
        return self.width / self.height

    def __str__(self) -> str:  # e.g., "1024x768"
        return f"{self.width}x{self.height}"


class AspectRatio(BaseModel):
    """Width-to-height ratio expressed as two positive integers."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    @classmethod
    def parse(cls, text: str) -> "AspectRatio":
        """Parse ``"W:H"`` (e.g. ``"16:9"``), failing fast on anything else."""

        parts = text.strip().split(":") if isinstance(text, str) else []
        if len(parts) != 2:
            raise InvalidAspectRatioError(f"Aspect ratio must look like 'W:H', got {text!r}")
        try:
            width, height = (int(p.strip()) for p in parts)
        except ValueError as exc:
            raise InvalidAspectRatioError(f"Aspect ratio parts must be integers, got {text!r}") from exc
        if width <= 0 or height <= 0:
            raise InvalidAspectRatioError(f"Aspect ratio parts must be positive, got {text!r}")
        return cls(width=width, height=height)

    @property
    def value(self) -> float:
        return self.width / self.height

    def __str__(self) -> str:
        return f"{self.width}:{self.height}"


_LABELLED_RATIO = re.compile(r"\((\d+:\d+)\)")


def extract_aspect_ratio(label: str | None, default: str = "3:4") -> str:
    """Pull a ``W:H`` ratio out of a UI label such as ``"Portrait (3:4)"``.

    A bare ratio (anything containing ``:``) is returned as-is; an empty or
    unlabelled value falls back to *default*. The result is not validated.
    """

    if not label:
        return default
    match = _LABELLED_RATIO.search(label)
    if match:
        return match.group(1)
    if ":" in label:
        return label.strip()
    return default
