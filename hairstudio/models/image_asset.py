from __future__ import annotations

import base64

from pydantic import BaseModel, ConfigDict, Field

JPEG_MIME_TYPE = "image/jpeg"


class ImageAsset(BaseModel):
    """An in-memory image: raw bytes plus mime type and filename.

    Instances are frozen. Cropping or resizing always yields a new asset.
    """

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False)
    mime_type: str = JPEG_MIME_TYPE
    filename: str = "image.jpg"

    @property
    def size(self) -> int:
        return len(self.data)

    def replace(self, data: bytes, *, mime_type: str = JPEG_MIME_TYPE) -> "ImageAsset":
        """Return a new asset with the same filename and the given payload."""
        return ImageAsset(data=data, mime_type=mime_type, filename=self.filename)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"
