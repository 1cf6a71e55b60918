"""Image pre-processing applied before photos are sent to the generator.

Two operations are exposed, always applied in the order crop then resize:

* :func:`crop_image` cuts the largest centered rectangle of a target aspect
  ratio out of the source.
* :func:`resize_image` shrinks the image into a bounding box, keeping the
  aspect ratio, and re-encodes it as JPEG to keep request payloads small.

Both return new :class:`~hairstudio.models.ImageAsset` instances. Their
failure policies differ: resizing is best effort and hands back the original
asset on any decode or encode problem, while cropping raises.
"""
from __future__ import annotations

import io
import logging
import math
from typing import Tuple

from PIL import Image, ImageOps

from hairstudio.models import JPEG_MIME_TYPE, AspectRatio, Dimensions, ImageAsset

logger = logging.getLogger(__name__)

DEFAULT_MAX_WIDTH = 800
DEFAULT_MAX_HEIGHT = 800
DEFAULT_RESIZE_QUALITY = 0.6
DEFAULT_CROP_QUALITY = 0.95

Box = Tuple[int, int, int, int]


class ImageProcessingError(Exception):
    """Base class for crop/resize failures."""


class ImageDecodeError(ImageProcessingError):
    """The input bytes could not be decoded as an image."""


class ImageEncodeError(ImageProcessingError):
    """The processed image could not be re-encoded."""


# ------------------------------------------------------------------
# Geometry
# ------------------------------------------------------------------

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def fit_within(source: Dimensions, max_width: int, max_height: int) -> Dimensions:
    """Return the size *source* should be scaled to so it fits the bounding box.

    Images already inside the box are left alone. Otherwise the tighter bound
    is hit exactly and the other side is scaled proportionally.
    """

    if max_width < 1 or max_height < 1:
        raise ValueError(f"Bounding box must be positive, got {max_width}x{max_height}")

    width_scale = max_width / source.width
    height_scale = max_height / source.height
    if width_scale >= 1 and height_scale >= 1:
        return source

    if width_scale <= height_scale:
        height = max(1, _round_half_up(source.height * max_width / source.width))
        return Dimensions(width=max_width, height=min(height, max_height))
    width = max(1, _round_half_up(source.width * max_height / source.height))
    return Dimensions(width=min(width, max_width), height=max_height)


def center_crop_box(source: Dimensions, target: AspectRatio) -> Box:
    """Largest centered ``(left, top, right, bottom)`` box with the target ratio."""

    crop_width = source.width
    crop_height = source.height
    if source.ratio > target.value:
        # Wider than the target: keep full height, trim the sides.
        crop_width = min(source.width, max(1, _round_half_up(source.height * target.value)))
    else:
        crop_height = min(source.height, max(1, _round_half_up(source.width / target.value)))

    left = (source.width - crop_width) // 2
    top = (source.height - crop_height) // 2
    return left, top, left + crop_width, top + crop_height


# ------------------------------------------------------------------
# Codec helpers
# ------------------------------------------------------------------

def _pillow_quality(quality: float) -> int:
    if not 0 <= quality <= 1:
        raise ValueError(f"Quality must be within [0, 1], got {quality}")
    return max(1, min(95, _round_half_up(quality * 100)))


def _decode(asset: ImageAsset) -> Image.Image:
    try:
        with Image.open(io.BytesIO(asset.data)) as opened:
            opened.load()
            img = ImageOps.exif_transpose(opened)
            if img.mode != "RGB":
                img = img.convert("RGB")
            return img
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"Could not decode {asset.filename!r}: {exc}") from exc


def _encode_jpeg(img: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    try:
        img.save(buffer, format="JPEG", quality=quality, optimize=True)
    except (OSError, ValueError) as exc:
        raise ImageEncodeError(f"JPEG encoding failed: {exc}") from exc
    return buffer.getvalue()


def read_dimensions(asset: ImageAsset) -> Dimensions:
    """Decode *asset* just far enough to report its (orientation-corrected) size."""

    img = _decode(asset)
    return Dimensions(width=img.width, height=img.height)


# ------------------------------------------------------------------
# Public operations
# ------------------------------------------------------------------

def resize_image(
    asset: ImageAsset,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
    quality: float = DEFAULT_RESIZE_QUALITY,
) -> ImageAsset:
    """Shrink *asset* into ``max_width`` x ``max_height`` and re-encode as JPEG.

    Parameters
    ----------
    asset : ImageAsset
        Source image in any format Pillow can read.
    max_width, max_height : int
        Bounding box in pixels. Smaller images are not upscaled.
    quality : float
        JPEG quality on a 0-1 scale.

    Returns
    -------
    ImageAsset
        A new JPEG asset with the original filename, or *asset* itself if the
        image could not be decoded or encoded.
    """

    pil_quality = _pillow_quality(quality)
    if max_width < 1 or max_height < 1:
        raise ValueError(f"Bounding box must be positive, got {max_width}x{max_height}")

    try:
        img = _decode(asset)
        target = fit_within(Dimensions(width=img.width, height=img.height), max_width, max_height)
        if (target.width, target.height) != img.size:
            img = img.resize((target.width, target.height), Image.Resampling.LANCZOS)
        data = _encode_jpeg(img, pil_quality)
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Image resize failed, keeping original %s: %s", asset.filename, exc)
        return asset

    logger.debug("Resized %s to %s (%d -> %d bytes)", asset.filename, target, asset.size, len(data))
    return asset.replace(data, mime_type=JPEG_MIME_TYPE)


def crop_image(
    asset: ImageAsset,
    aspect_ratio: str | AspectRatio,
    quality: float = DEFAULT_CROP_QUALITY,
) -> ImageAsset:
    """Center-crop *asset* to *aspect_ratio* (``"W:H"``) and re-encode as JPEG.

    Raises
    ------
    InvalidAspectRatioError
        If the ratio string is malformed or has a zero/negative part.
    ImageDecodeError, ImageEncodeError
        If the image cannot be read or written. There is no fallback.
    """

    target = aspect_ratio if isinstance(aspect_ratio, AspectRatio) else AspectRatio.parse(aspect_ratio)
    pil_quality = _pillow_quality(quality)

    img = _decode(asset)
    box = center_crop_box(Dimensions(width=img.width, height=img.height), target)
    if box != (0, 0, img.width, img.height):
        img = img.crop(box)
    data = _encode_jpeg(img, pil_quality)

    logger.debug("Cropped %s to %s with box %s", asset.filename, target, box)
    return asset.replace(data, mime_type=JPEG_MIME_TYPE)


def prepare_image(
    asset: ImageAsset,
    *,
    aspect_ratio: str | AspectRatio | None = None,
    max_dim: int = DEFAULT_MAX_WIDTH,
    quality: float = DEFAULT_RESIZE_QUALITY,
    crop_quality: float = DEFAULT_CROP_QUALITY,
) -> ImageAsset:
    """Crop (when a ratio is given) and then resize into a square bounding box."""

    if aspect_ratio is not None:
        asset = crop_image(asset, aspect_ratio, crop_quality)
    return resize_image(asset, max_dim, max_dim, quality)
