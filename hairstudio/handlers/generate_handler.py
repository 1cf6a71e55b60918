"""Generation endpoints: two-stage hair edit and virtual try-on."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from hairstudio.config import get_settings
from hairstudio.models import (
    ErrorResponse,
    GenerationResponse,
    HairOptions,
    TryOnOptions,
    extract_aspect_ratio,
)
from hairstudio.services.gemini import GeminiClient, MissingAPIKeyError, get_gemini_client
from hairstudio.services.pipeline import HairPipeline, StageError, TryOnPipeline
from hairstudio.services.prompts import COLOR_STAGE, STYLE_STAGE
from hairstudio.utils.uploads import read_image_upload

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

_STAGE_LABELS = {
    STYLE_STAGE: "Style generation error",
    COLOR_STAGE: "Color generation error",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def get_client() -> GeminiClient | None:
    """Dependency returning the shared client, or ``None`` when no key is set."""
    try:
        return get_gemini_client()
    except MissingAPIKeyError:
        return None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _stage_error(exc: StageError) -> JSONResponse:
    label = _STAGE_LABELS.get(exc.stage, "Generation error")
    return _error(500, f"{label}: {exc.cause}")


# ---------------------------------------------------------------------------
# POST /api/generate
# ---------------------------------------------------------------------------


@router.post("/generate", response_model=GenerationResponse, responses=_ERROR_RESPONSES)
async def generate(
    model_image: UploadFile | None = File(None, alias="modelImage"),
    ref_image: UploadFile | None = File(None, alias="refImage"),
    color_ref_image: UploadFile | None = File(None, alias="colorRefImage"),
    hair_color: str | None = Form(None, alias="hairColor"),
    hair_style: str | None = Form(None, alias="hairStyle"),
    gender: str = Form("female"),
    client: GeminiClient | None = Depends(get_client),
):
    model_asset = await read_image_upload(model_image, field="modelImage")
    if model_asset is None:
        return _error(400, "A model image is required.")
    if client is None:
        return _error(500, "Server configuration error: missing API key")

    style_ref = await read_image_upload(ref_image, field="refImage")
    color_ref = await read_image_upload(color_ref_image, field="colorRefImage")
    options = HairOptions(
        gender="male" if gender == "male" else "female",
        hair_style=hair_style,
        hair_color=hair_color,
    )

    try:
        result = await HairPipeline(client).run(model_asset, options, style_ref=style_ref, color_ref=color_ref)
    except StageError as exc:
        return _stage_error(exc)
    return GenerationResponse(image_url=result.to_data_url())


# ---------------------------------------------------------------------------
# POST /api/try-on
# ---------------------------------------------------------------------------


@router.post("/try-on", response_model=GenerationResponse, responses=_ERROR_RESPONSES)
async def try_on(
    model_image: UploadFile | None = File(None, alias="modelImage"),
    garment_image: UploadFile | None = File(None, alias="garmentImage"),
    bottoms_image: UploadFile | None = File(None, alias="bottomsImage"),
    scene: str = Form(TryOnOptions.model_fields["scene"].default),
    lighting: str = Form(TryOnOptions.model_fields["lighting"].default),
    shot_type: str = Form(TryOnOptions.model_fields["shot_type"].default, alias="shotType"),
    look_at_camera: bool = Form(True, alias="lookAtCamera"),
    aspect_ratio: str | None = Form(None, alias="aspectRatio"),
    client: GeminiClient | None = Depends(get_client),
):
    model_asset = await read_image_upload(model_image, field="modelImage")
    if model_asset is None:
        return _error(400, "A model image is required.")
    if client is None:
        return _error(500, "Server configuration error: missing API key")

    garment = await read_image_upload(garment_image, field="garmentImage")
    bottoms = await read_image_upload(bottoms_image, field="bottomsImage")
    options = TryOnOptions(
        scene=scene,
        lighting=lighting,
        shot_type=shot_type,
        look_at_camera=look_at_camera,
        aspect_ratio=extract_aspect_ratio(aspect_ratio, get_settings().default_aspect_ratio),
    )

    try:
        result = await TryOnPipeline(client).run(model_asset, options, garment=garment, bottoms=bottoms)
    except StageError as exc:
        return _stage_error(exc)
    return GenerationResponse(image_url=result.to_data_url())
