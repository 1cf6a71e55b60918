"""Generation pipelines: pre-process uploads, build prompts, call the image API."""
from __future__ import annotations

import base64
import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from hairstudio.config import Settings, get_settings
from hairstudio.models import GeneratedImage, HairOptions, ImageAsset, TryOnOptions
from hairstudio.services.gemini import GeminiClient, GeminiError
from hairstudio.services.prompts import build_tryon_prompt, plan_hair_stages
from hairstudio.utils.image_ops import prepare_image, resize_image

logger = logging.getLogger(__name__)

TRYON_STAGE = "try-on"


class StageError(Exception):
    """A pipeline stage failed; wraps the underlying API error."""

    def __init__(self, stage: str, cause: Exception):
        super().__init__(f"{stage} stage failed: {cause}")
        self.stage = stage
        self.cause = cause


class HairPipeline:
    """Two-stage hair edit: hairstyle first, then hair colour on the result."""

    def __init__(self, client: GeminiClient, settings: Settings | None = None):
        self.client = client
        self.settings = settings or get_settings()

    async def _shrink_reference(self, asset: Optional[ImageAsset]) -> Optional[ImageAsset]:
        if asset is None:
            return None
        dim = self.settings.reference_image_max_dim
        return await run_in_threadpool(resize_image, asset, dim, dim, self.settings.reference_image_quality)

    async def run(
        self,
        model_image: ImageAsset,
        options: HairOptions,
        style_ref: ImageAsset | None = None,
        color_ref: ImageAsset | None = None,
    ) -> GeneratedImage:
        stages = plan_hair_stages(options, model_image.filename, style_ref, color_ref)
        logger.info(
            "Hair pipeline: gender=%s style=%s color=%s style_ref=%s color_ref=%s stages=%s",
            options.gender,
            options.hair_style,
            options.hair_color,
            style_ref is not None,
            color_ref is not None,
            [s.name for s in stages],
        )
        if not stages:
            return GeneratedImage(data=model_image.to_base64(), mime_type=model_image.mime_type)

        dim = self.settings.model_image_max_dim
        current = await run_in_threadpool(
            resize_image, model_image, dim, dim, self.settings.model_image_quality
        )

        result = GeneratedImage(data=current.to_base64(), mime_type=current.mime_type)
        for stage in stages:
            logger.info("Executing %s stage", stage.name)
            reference = await self._shrink_reference(stage.reference)
            try:
                result = await self.client.generate_image(
                    stage.prompt,
                    current,
                    [reference] if reference is not None else [],
                )
            except GeminiError as exc:
                logger.error("%s stage failed: %s", stage.name, exc)
                raise StageError(stage.name, exc) from exc
            current = ImageAsset(
                data=base64.b64decode(result.data),
                mime_type=result.mime_type,
                filename=model_image.filename,
            )
        return result


class TryOnPipeline:
    """Single-call virtual try-on with the model photo cropped to the chosen ratio."""

    def __init__(self, client: GeminiClient, settings: Settings | None = None):
        self.client = client
        self.settings = settings or get_settings()

    async def run(
        self,
        model_image: ImageAsset,
        options: TryOnOptions,
        garment: ImageAsset | None = None,
        bottoms: ImageAsset | None = None,
    ) -> GeneratedImage:
        logger.info("Cropping model image to %s", options.aspect_ratio)
        primary = await run_in_threadpool(
            prepare_image,
            model_image,
            aspect_ratio=options.aspect_ratio,
            max_dim=self.settings.model_image_max_dim,
            quality=self.settings.model_image_quality,
            crop_quality=self.settings.crop_quality,
        )

        references: list[ImageAsset] = []
        ref_dim = self.settings.reference_image_max_dim
        for asset in (garment, bottoms):
            if asset is not None:
                references.append(
                    await run_in_threadpool(
                        resize_image, asset, ref_dim, ref_dim, self.settings.reference_image_quality
                    )
                )

        prompt = build_tryon_prompt(options.model_copy(update={"has_bottoms": bottoms is not None}))
        try:
            return await self.client.generate_image(
                prompt, primary, references, temperature=self.settings.tryon_temperature
            )
        except GeminiError as exc:
            logger.error("Try-on generation failed: %s", exc)
            raise StageError(TRYON_STAGE, exc) from exc
