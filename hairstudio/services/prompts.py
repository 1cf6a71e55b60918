"""Prompt templates for the hair and try-on pipelines.

Every function here is pure: an options record goes in, a string comes out.
"""
from __future__ import annotations

from typing import NamedTuple, Optional

from hairstudio.models import HairOptions, ImageAsset, TryOnOptions

STYLE_STAGE = "style"
COLOR_STAGE = "color"


class PromptStage(NamedTuple):
    name: str
    prompt: str
    reference: Optional[ImageAsset] = None


def _subject(options: HairOptions) -> str:
    return "man" if options.gender == "male" else "woman"


def build_style_prompt(options: HairOptions, model_name: str, style_ref_name: str | None = None) -> str:
    """Hairstyle instruction, copying a reference photo or rebuilding a named style."""

    subject = _subject(options)
    if style_ref_name:
        return f"""
# Task: hairstyle transplant (exact copy)

## Goal
Use {model_name} as the base photo and replace the hair on its head with the
hairstyle shown in {style_ref_name}, copied as-is. Do not adapt the style to
the person.

## Instructions
1. Remove the original hairstyle of {model_name} completely. No strands of it may remain.
2. Reproduce the hairstyle of {style_ref_name} precisely:
   - Length: short stays short, long stays long.
   - Silhouette: match the volume and outline exactly.
   - Flow and texture: same straightness or wave, same shine.
   - Fringe: same forehead coverage and parting position.

## Forbidden
- Adjusting the hairstyle to suit the face.
- Any trace of the original hairstyle showing through or blending in.
- Settling for a merely similar result.

Subject: {subject}.
""".strip()

    return f"""
# Task: rebuild the hairstyle from its definition

## Goal
Rebuild the hair of {model_name} from scratch as a "{options.hair_style}" hairstyle.

## Instructions
1. Discard the current hairstyle entirely.
2. Apply the standard shape of "{options.hair_style}" (length, structure, texture),
   clearly enough that it is recognisable at a glance.

## Constraints
- Keep the face unchanged and rewrite only the hair.
- Do not let the original hairstyle influence the result.

Subject: {subject}.
""".strip()


def build_color_prompt(options: HairOptions, model_name: str, color_ref_name: str | None = None) -> str:
    """Hair colour instruction, sampling a reference photo or using a named colour."""

    if color_ref_name:
        target = f"the colour of the hair in {color_ref_name}"
        apply_step = (
            f"2. Take the hue, saturation and brightness from {color_ref_name} as they are\n"
            "   and apply them to all of the hair."
        )
        match = "the reference image"
    else:
        target = f'"{options.hair_color}"'
        apply_step = f'2. Render "{options.hair_color}" faithfully across all of the hair.'
        match = "the requested colour"

    return f"""
**Repaint the hair of the person in {model_name} completely in {target}.**
Ignore the original hair colour entirely.

Steps:
1. Reset the current hair colour.
{apply_step}
   The original colour must not show through.

Constraints:
- Keep the face, skin tone and background unchanged.
- Keep the hair texture and shine; change only the colour to match {match}.
""".strip()


def plan_hair_stages(
    options: HairOptions,
    model_name: str,
    style_ref: ImageAsset | None = None,
    color_ref: ImageAsset | None = None,
) -> list[PromptStage]:
    """Ordered prompt stages for a hair edit: style first, then colour.

    A stage is planned only when it has a source, either a name from the
    options or a reference image. A reference image wins over a name.
    """

    stages: list[PromptStage] = []
    if style_ref is not None or options.hair_style:
        prompt = build_style_prompt(options, model_name, style_ref.filename if style_ref else None)
        stages.append(PromptStage(STYLE_STAGE, prompt, style_ref))
    if color_ref is not None or options.hair_color:
        prompt = build_color_prompt(options, model_name, color_ref.filename if color_ref else None)
        stages.append(PromptStage(COLOR_STAGE, prompt, color_ref))
    return stages


def build_tryon_prompt(options: TryOnOptions) -> str:
    bottoms_line = "\n- Bottoms: The pants/skirt to be worn." if options.has_bottoms else ""
    eye_contact = "Looking at camera" if options.look_at_camera else "Looking away"
    return f"""
Act as a professional fashion photographer.
Task: Create a realistic "Virtual Try-On" photo.

Input:
- Model: Use this person's pose and features as the base.
- Garment: The clothing to be worn by the model.{bottoms_line}

Instructions:
1. Dress the model in the provided garment(s) naturally.
2. Match wrinkles, fabric physics, and lighting to the scene.
3. Keep the model's pose and facial features consistent with the original photo.
4. Background: {options.scene}.
5. Lighting: {options.lighting}.
6. Shot: {options.shot_type}.
7. Eye Contact: {eye_contact}.

Output Requirement:
- Photorealistic quality (8k).
- Aspect Ratio: {options.aspect_ratio}.
""".strip()
