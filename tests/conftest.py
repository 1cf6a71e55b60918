"""Shared fixtures.

Environment variables must be set before anything under ``hairstudio`` is
imported because settings are parsed once and cached.
"""
from __future__ import annotations

import io
import os

os.environ["GEMINI_API_KEY"] = "test-key-123"
os.environ.pop("NEXT_PUBLIC_GEMINI_API_KEY", None)
os.environ["LOG_LEVEL"] = "DEBUG"

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from hairstudio.models import GeneratedImage, ImageAsset


def make_image_bytes(width: int, height: int, color=(200, 30, 30), fmt: str = "JPEG", **save_kwargs) -> bytes:
    mode = "RGBA" if fmt == "PNG" and len(color) == 4 else "RGB"
    img = Image.new(mode, (width, height), color=color)
    buf = io.BytesIO()
    img.save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


def image_size(data: bytes) -> tuple[int, int]:
    with Image.open(io.BytesIO(data)) as img:
        return img.size


class FakeGeminiClient:
    """Stands in for :class:`GeminiClient`; records every call."""

    model = "fake-model"

    def __init__(self, results=None, error: Exception | None = None):
        self.calls: list[dict] = []
        self._results = list(results or [])
        self._error = error

    async def generate_image(self, prompt, image, references=(), *, temperature=None):
        self.calls.append(
            {"prompt": prompt, "image": image, "references": list(references), "temperature": temperature}
        )
        if self._error is not None:
            raise self._error
        if self._results:
            return self._results.pop(0)
        return GeneratedImage(data=ImageAsset(data=make_image_bytes(8, 8)).to_base64(), mime_type="image/png")


@pytest.fixture
def jpeg_factory():
    def _make(width: int, height: int, color=(200, 30, 30), filename: str = "photo.jpg") -> ImageAsset:
        return ImageAsset(data=make_image_bytes(width, height, color), mime_type="image/jpeg", filename=filename)

    return _make


@pytest.fixture
def fake_client():
    return FakeGeminiClient()


@pytest.fixture
def app():
    from hairstudio.main import app as fastapi_app

    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app, fake_client):
    from hairstudio.handlers import generate_handler

    app.dependency_overrides[generate_handler.get_client] = lambda: fake_client
    with TestClient(app) as test_client:
        yield test_client
