"""Stand-alone crop and resize endpoints returning JPEG bytes."""
from __future__ import annotations

import logging

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from hairstudio.models import ErrorResponse, ImageAsset
from hairstudio.utils.image_ops import (
    DEFAULT_CROP_QUALITY,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_WIDTH,
    DEFAULT_RESIZE_QUALITY,
    crop_image,
    resize_image,
)
from hairstudio.utils.uploads import UploadRejectedError, read_image_upload

router = APIRouter(prefix="/api/images")
logger = logging.getLogger(__name__)


def _jpeg_response(asset: ImageAsset) -> Response:
    return Response(
        content=asset.data,
        media_type=asset.mime_type,
        headers={"Content-Disposition": f'inline; filename="{asset.filename}"'},
    )


async def _require(upload: UploadFile) -> ImageAsset:
    asset = await read_image_upload(upload, field="file")
    if asset is None:
        raise UploadRejectedError(400, "file: an image is required")
    return asset


@router.post("/resize", response_class=Response, responses={400: {"model": ErrorResponse}})
async def resize(
    file: UploadFile = File(...),
    max_width: int = Form(DEFAULT_MAX_WIDTH, alias="maxWidth", ge=1),
    max_height: int = Form(DEFAULT_MAX_HEIGHT, alias="maxHeight", ge=1),
    quality: float = Form(DEFAULT_RESIZE_QUALITY, ge=0, le=1),
):
    """Best effort: an undecodable image comes back unchanged."""
    asset = await _require(file)
    resized = await run_in_threadpool(resize_image, asset, max_width, max_height, quality)
    return _jpeg_response(resized)


@router.post(
    "/crop",
    response_class=Response,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def crop(
    file: UploadFile = File(...),
    aspect_ratio: str = Form(..., alias="aspectRatio"),
    quality: float = Form(DEFAULT_CROP_QUALITY, ge=0, le=1),
):
    asset = await _require(file)
    cropped = await run_in_threadpool(crop_image, asset, aspect_ratio, quality)
    return _jpeg_response(cropped)
