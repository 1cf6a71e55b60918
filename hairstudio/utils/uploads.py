"""Turn multipart uploads into :class:`ImageAsset` instances."""
from __future__ import annotations

import logging

from fastapi import UploadFile

from hairstudio.config import get_settings
from hairstudio.models import ImageAsset

logger = logging.getLogger(__name__)

_VALID_IMAGE_PREFIX = "image/"


class UploadRejectedError(Exception):
    """Raised when an uploaded file is not an acceptable image."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def read_image_upload(upload: UploadFile | None, *, field: str) -> ImageAsset | None:
    """Read *upload* into an asset, or return ``None`` if the field was left empty.

    Browsers submit an empty part (no filename, no bytes) for an unused file
    input, so that counts as absent too.
    """

    if upload is None:
        return None
    data = await upload.read()
    if not data and not upload.filename:
        return None

    content_type = upload.content_type or "application/octet-stream"
    if not content_type.startswith(_VALID_IMAGE_PREFIX):
        raise UploadRejectedError(400, f"{field}: unsupported content type {content_type}; expected image/*")
    if not data:
        raise UploadRejectedError(400, f"{field}: uploaded file is empty")

    max_bytes = get_settings().max_upload_bytes
    if len(data) > max_bytes:
        raise UploadRejectedError(413, f"{field}: image exceeds {max_bytes} byte limit")

    logger.debug("Read upload %s (%s, %d bytes)", upload.filename, content_type, len(data))
    return ImageAsset(data=data, mime_type=content_type, filename=upload.filename or f"{field}.jpg")
