"""Gemini ``generateContent`` wrapper for image editing.

Sends one text prompt plus one primary image and optional reference images,
and returns exactly one generated image. A reply without an image is turned
into an exception: a text-only reply usually carries the model's refusal.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, Optional, Sequence

import httpx

from hairstudio.config import get_settings
from hairstudio.models import GeneratedImage, ImageAsset

logger = logging.getLogger(__name__)

_SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


class GeminiError(Exception):
    """Base class for failures talking to the Gemini API."""


class MissingAPIKeyError(GeminiError):
    """Raised when no API key is configured."""


class GeminiTransportError(GeminiError):
    """Raised when the request never produced an HTTP response (timeout, DNS, ...)."""


class GeminiAPIError(GeminiError):
    """Raised when the Gemini API returns an error status."""

    def __init__(self, status: int, message: str, response_json: Optional[dict[str, Any]] = None):
        super().__init__(f"Gemini API error {status}: {message}")
        self.status = status
        self.response_json = response_json or {}


class GenerationRefusedError(GeminiError):
    """The model answered with text instead of an image."""

    def __init__(self, reason: str):
        super().__init__(f"Generation refused (text response: {reason})")
        self.reason = reason


class UnexpectedResponseError(GeminiError):
    """The reply contained neither an image nor text."""


class GeminiClient:  # pylint: disable=too-few-public-methods
    """Minimal async client for the Gemini image model."""

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 120.0,
        generation_config: dict[str, Any] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise MissingAPIKeyError("GEMINI_API_KEY is not configured")
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._generation_config = generation_config or {}
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @property
    def model(self) -> str:
        return self._model

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate_image(
        self,
        prompt: str,
        image: ImageAsset,
        references: Sequence[ImageAsset] = (),
        *,
        temperature: float | None = None,
    ) -> GeneratedImage:
        """Edit *image* according to *prompt* and return the single result."""

        parts: list[Dict[str, Any]] = [{"text": prompt}, _inline_part(image)]
        parts.extend(_inline_part(ref) for ref in references)

        config = dict(self._generation_config)
        if temperature is not None:
            config["temperature"] = temperature
        payload: Dict[str, Any] = {
            "contents": [{"parts": parts}],
            "generationConfig": config,
            "safetySettings": [
                {"category": category, "threshold": "BLOCK_NONE"} for category in _SAFETY_CATEGORIES
            ],
        }
        data = await self._post(payload)
        return parse_generated_image(data)

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}/models/{self._model}:generateContent"
        logger.debug("POST %s (%d parts)", url, len(payload["contents"][0]["parts"]))
        try:
            resp = await self._client.post(url, params={"key": self._api_key}, json=payload)
        except httpx.HTTPError as exc:
            raise GeminiTransportError(f"Request to {url} failed: {exc}") from exc
        if resp.status_code >= 400:
            try:
                err_json = resp.json()
            except ValueError:
                err_json = None
            raise GeminiAPIError(resp.status_code, resp.text, err_json)
        try:
            return resp.json()
        except ValueError as exc:
            raise UnexpectedResponseError("Gemini returned a non-JSON body") from exc


# ------------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------------

def _inline_part(asset: ImageAsset) -> dict[str, Any]:
    return {"inline_data": {"mime_type": asset.mime_type, "data": asset.to_base64()}}


def parse_generated_image(data: dict[str, Any]) -> GeneratedImage:
    """Pick the first inline image out of a ``generateContent`` reply.

    Both ``inlineData``/``mimeType`` and ``inline_data``/``mime_type`` spellings
    occur in the wild. Falls back to the first text part as a refusal reason.
    """

    text_reason: str | None = None
    for candidate in data.get("candidates") or []:
        for part in (candidate.get("content") or {}).get("parts") or []:
            inline = part.get("inlineData") or part.get("inline_data")
            if inline and inline.get("data"):
                mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/jpeg"
                return GeneratedImage(data=inline["data"], mime_type=mime_type)
            if text_reason is None and part.get("text"):
                text_reason = part["text"]

    if text_reason:
        raise GenerationRefusedError(text_reason)
    raise UnexpectedResponseError("Unexpected API response format (no image in reply)")


@lru_cache()
def get_gemini_client() -> GeminiClient:
    """Return the process-wide client built from settings."""

    settings = get_settings()
    return GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.gemini_timeout,
        generation_config={
            "temperature": settings.gemini_temperature,
            "topK": settings.gemini_top_k,
            "topP": settings.gemini_top_p,
            "maxOutputTokens": settings.gemini_max_output_tokens,
        },
    )
