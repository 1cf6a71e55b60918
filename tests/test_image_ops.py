from __future__ import annotations

import io

import pytest
from PIL import Image

from conftest import image_size, make_image_bytes
from hairstudio.models import AspectRatio, Dimensions, ImageAsset, InvalidAspectRatioError
from hairstudio.utils.image_ops import (
    ImageDecodeError,
    ImageEncodeError,
    center_crop_box,
    crop_image,
    fit_within,
    prepare_image,
    read_dimensions,
    resize_image,
)


# ---------------------------------------------------------------------------
# fit_within / center_crop_box
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "source, bounds, expected",
    [
        ((4000, 3000), (800, 800), (800, 600)),
        ((3000, 4000), (800, 800), (600, 800)),
        ((640, 480), (800, 800), (640, 480)),
        ((800, 800), (800, 800), (800, 800)),
        ((1000, 333), (500, 500), (500, 167)),
        # Wide image with a short height bound: the height bound binds.
        ((1000, 800), (1000, 400), (500, 400)),
        ((10000, 1), (100, 100), (100, 1)),
    ],
)
def test_fit_within(source, bounds, expected):
    result = fit_within(Dimensions(width=source[0], height=source[1]), *bounds)
    assert (result.width, result.height) == expected


@pytest.mark.parametrize("width, height", [(4000, 3000), (1234, 987), (333, 2000), (1600, 900), (5001, 4999)])
@pytest.mark.parametrize("max_width, max_height", [(800, 800), (1536, 1536), (640, 480)])
def test_fit_within_hits_a_bound_and_keeps_ratio(width, height, max_width, max_height):
    source = Dimensions(width=width, height=height)
    result = fit_within(source, max_width, max_height)

    assert result.width <= max_width and result.height <= max_height
    if width > max_width or height > max_height:
        assert max(result.width / max_width, result.height / max_height) == pytest.approx(1, abs=0.01)
        # The side that was not pinned to a bound is off by rounding only.
        assert min(
            abs(result.width - result.height * source.ratio),
            abs(result.height - result.width / source.ratio),
        ) <= 1
    else:
        assert result == source


def test_fit_within_rejects_empty_box():
    with pytest.raises(ValueError):
        fit_within(Dimensions(width=10, height=10), 0, 10)


def test_center_crop_box_wide_source():
    box = center_crop_box(Dimensions(width=3000, height=1000), AspectRatio.parse("3:4"))
    assert box == (1125, 0, 1875, 1000)


def test_center_crop_box_tall_source():
    box = center_crop_box(Dimensions(width=1000, height=3000), AspectRatio.parse("4:3"))
    assert box == (0, 1125, 1000, 1875)


@pytest.mark.parametrize("source", [(4000, 3000), (3000, 4000), (1000, 1000), (1920, 1080), (7, 5)])
@pytest.mark.parametrize("ratio", ["1:1", "3:4", "4:3", "16:9", "9:16", "2:3"])
def test_center_crop_box_matches_ratio_and_is_centered(source, ratio):
    src = Dimensions(width=source[0], height=source[1])
    target = AspectRatio.parse(ratio)
    left, top, right, bottom = center_crop_box(src, target)
    width, height = right - left, bottom - top

    assert 0 < width <= src.width and 0 < height <= src.height
    # Only one axis is shortened; the other keeps the full extent.
    assert (left == 0 and width == src.width) or (top == 0 and height == src.height)
    assert left == (src.width - width) // 2
    assert top == (src.height - height) // 2
    if min(width, height) > 100:
        assert width / height == pytest.approx(target.value, rel=0.01)


# ---------------------------------------------------------------------------
# resize_image
# ---------------------------------------------------------------------------


def test_resize_large_image_to_bounding_box(jpeg_factory):
    asset = jpeg_factory(4000, 3000, filename="big.png")

    resized = resize_image(asset, 800, 800)

    assert image_size(resized.data) == (800, 600)
    assert resized.mime_type == "image/jpeg"
    assert resized.filename == "big.png"
    assert resized is not asset


def test_resize_does_not_upscale(jpeg_factory):
    asset = jpeg_factory(320, 200)
    assert image_size(resize_image(asset, 800, 800).data) == (320, 200)


def test_resize_is_idempotent(jpeg_factory):
    once = resize_image(jpeg_factory(2500, 1200), 800, 800)
    twice = resize_image(once, 800, 800)
    assert image_size(once.data) == image_size(twice.data) == (800, 384)


def test_resize_converts_png_with_alpha_to_jpeg():
    data = make_image_bytes(50, 40, color=(0, 0, 255, 128), fmt="PNG")
    asset = ImageAsset(data=data, mime_type="image/png", filename="logo.png")

    resized = resize_image(asset)

    assert resized.mime_type == "image/jpeg"
    with Image.open(io.BytesIO(resized.data)) as img:
        assert img.format == "JPEG"
        assert img.size == (50, 40)


def test_resize_returns_original_for_corrupt_file(caplog):
    corrupt = ImageAsset(data=b"definitely not an image", mime_type="image/jpeg", filename="broken.jpg")

    result = resize_image(corrupt, 800, 800)

    assert result is corrupt
    assert "keeping original" in caplog.text


def test_resize_returns_original_for_truncated_jpeg():
    data = make_image_bytes(400, 400)
    truncated = ImageAsset(data=data[: len(data) // 3], filename="cut.jpg")
    assert resize_image(truncated) is truncated


def test_resize_rejects_bad_quality(jpeg_factory):
    with pytest.raises(ValueError):
        resize_image(jpeg_factory(10, 10), quality=1.5)


def test_resize_accepts_zero_quality(jpeg_factory):
    asset = jpeg_factory(1000, 500)

    resized = resize_image(asset, 800, 800, 0)

    assert resized is not asset
    assert resized.mime_type == "image/jpeg"
    assert image_size(resized.data) == (800, 400)


def test_resize_returns_original_when_encoding_fails(jpeg_factory, monkeypatch, caplog):
    asset = jpeg_factory(1000, 500)

    def failing_save(self, *args, **kwargs):
        raise OSError("disk on fire")

    monkeypatch.setattr(Image.Image, "save", failing_save)

    assert resize_image(asset, 800, 800) is asset
    assert "disk on fire" in caplog.text


def test_resize_quality_changes_payload_size():
    noisy = Image.effect_noise((600, 600), 80).convert("RGB")
    buf = io.BytesIO()
    noisy.save(buf, format="PNG")
    asset = ImageAsset(data=buf.getvalue(), mime_type="image/png", filename="noise.png")

    low = resize_image(asset, quality=0.3)
    high = resize_image(asset, quality=0.95)

    assert len(low.data) < len(high.data)


def test_resize_applies_exif_orientation():
    exif = Image.Exif()
    exif[0x0112] = 6  # rotate 90 CW on display
    data = make_image_bytes(200, 100, exif=exif)
    asset = ImageAsset(data=data, filename="rotated.jpg")

    assert read_dimensions(asset) == Dimensions(width=100, height=200)
    assert image_size(resize_image(asset, 50, 50).data) == (25, 50)


# ---------------------------------------------------------------------------
# crop_image
# ---------------------------------------------------------------------------


def _striped(width: int, height: int) -> ImageAsset:
    img = Image.new("RGB", (width, height), (255, 0, 0))
    third = width // 3
    img.paste((0, 255, 0), (third, 0, 2 * third, height))
    img.paste((0, 0, 255), (2 * third, 0, width, height))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return ImageAsset(data=buf.getvalue(), mime_type="image/png", filename="stripes.png")


def test_crop_wide_image_to_portrait():
    cropped = crop_image(_striped(3000, 1000), "3:4")

    assert cropped.mime_type == "image/jpeg"
    assert cropped.filename == "stripes.png"
    with Image.open(io.BytesIO(cropped.data)) as img:
        assert img.size == (750, 1000)
        # The whole crop falls inside the green middle stripe.
        for x in (5, 375, 744):
            r, g, b = img.getpixel((x, 500))
            assert g > 200 and r < 60 and b < 60


def test_crop_tall_image_keeps_full_width(jpeg_factory):
    cropped = crop_image(jpeg_factory(900, 1600), "1:1")
    assert image_size(cropped.data) == (900, 900)


def test_crop_accepts_parsed_ratio(jpeg_factory):
    cropped = crop_image(jpeg_factory(1600, 900), AspectRatio(width=4, height=3))
    assert image_size(cropped.data) == (1200, 900)


def test_crop_with_matching_ratio_keeps_size(jpeg_factory):
    assert image_size(crop_image(jpeg_factory(300, 400), "3:4").data) == (300, 400)


@pytest.mark.parametrize("ratio", ["0:1", "1:0", "abc", "3-4", "", "3:4:5", "-3:4"])
def test_crop_rejects_malformed_ratio(jpeg_factory, ratio):
    with pytest.raises(InvalidAspectRatioError):
        crop_image(jpeg_factory(100, 100), ratio)


def test_crop_raises_on_corrupt_file():
    corrupt = ImageAsset(data=b"\x00\x01garbage", filename="broken.jpg")
    with pytest.raises(ImageDecodeError):
        crop_image(corrupt, "3:4")


def test_crop_raises_when_encoding_fails(jpeg_factory, monkeypatch):
    asset = jpeg_factory(400, 300)

    def failing_save(self, *args, **kwargs):
        raise OSError("disk on fire")

    monkeypatch.setattr(Image.Image, "save", failing_save)

    with pytest.raises(ImageEncodeError):
        crop_image(asset, "3:4")


def test_crop_accepts_zero_quality(jpeg_factory):
    assert image_size(crop_image(jpeg_factory(400, 300), "1:1", quality=0).data) == (300, 300)


def test_prepare_image_crops_then_resizes():
    prepared = prepare_image(_striped(3000, 1000), aspect_ratio="3:4", max_dim=400)
    assert image_size(prepared.data) == (300, 400)


def test_prepare_image_without_ratio_only_resizes(jpeg_factory):
    assert image_size(prepare_image(jpeg_factory(1000, 500), max_dim=100).data) == (100, 50)
