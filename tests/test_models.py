from __future__ import annotations

import base64

import pytest
from pydantic import ValidationError

from hairstudio.models import (
    AspectRatio,
    GeneratedImage,
    HairOptions,
    ImageAsset,
    InvalidAspectRatioError,
    extract_aspect_ratio,
)


@pytest.mark.parametrize(
    "text, expected",
    [("3:4", (3, 4)), ("16:9", (16, 9)), (" 1 : 1 ", (1, 1)), ("21:9", (21, 9))],
)
def test_aspect_ratio_parse(text, expected):
    ratio = AspectRatio.parse(text)
    assert (ratio.width, ratio.height) == expected
    assert ratio.value == pytest.approx(expected[0] / expected[1])
    assert str(ratio) == f"{expected[0]}:{expected[1]}"


@pytest.mark.parametrize("text", ["0:1", "1:0", "x:y", "4", "4:3:2", "", "1.5:1", "-1:2"])
def test_aspect_ratio_parse_rejects(text):
    with pytest.raises(InvalidAspectRatioError):
        AspectRatio.parse(text)


def test_invalid_aspect_ratio_is_value_error():
    assert issubclass(InvalidAspectRatioError, ValueError)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Portrait (3:4)", "3:4"),
        ("Wide screen (16:9)", "16:9"),
        ("9:16", "9:16"),
        ("Square", "3:4"),
        ("", "3:4"),
        (None, "3:4"),
    ],
)
def test_extract_aspect_ratio(label, expected):
    assert extract_aspect_ratio(label) == expected


def test_extract_aspect_ratio_custom_default():
    assert extract_aspect_ratio(None, default="1:1") == "1:1"


def test_image_asset_is_frozen():
    asset = ImageAsset(data=b"abc", mime_type="image/png", filename="a.png")
    with pytest.raises(ValidationError):
        asset.filename = "b.png"


def test_image_asset_replace_keeps_filename():
    asset = ImageAsset(data=b"abc", mime_type="image/png", filename="a.png")
    new = asset.replace(b"xyz")
    assert (new.data, new.mime_type, new.filename) == (b"xyz", "image/jpeg", "a.png")
    assert asset.data == b"abc"


def test_data_urls():
    asset = ImageAsset(data=b"\x01\x02", mime_type="image/png")
    encoded = base64.b64encode(b"\x01\x02").decode()
    assert asset.to_data_url() == f"data:image/png;base64,{encoded}"
    assert GeneratedImage(data=encoded).to_data_url() == f"data:image/jpeg;base64,{encoded}"


def test_hair_options_blank_strings_become_none():
    options = HairOptions(hair_style="  ", hair_color="")
    assert options.hair_style is None and options.hair_color is None


def test_hair_options_rejects_unknown_gender():
    with pytest.raises(ValidationError):
        HairOptions(gender="other")
