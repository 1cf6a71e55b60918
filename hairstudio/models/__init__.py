from .dimensions import AspectRatio, Dimensions, InvalidAspectRatioError, extract_aspect_ratio
from .generation import (
    EnvCheckResponse,
    ErrorResponse,
    GeneratedImage,
    GenerationResponse,
    KeyReport,
    OptionsCatalog,
)
from .image_asset import JPEG_MIME_TYPE, ImageAsset
from .options import CatalogEntry, HairOptions, TryOnOptions

__all__ = [
    "AspectRatio",
    "CatalogEntry",
    "Dimensions",
    "EnvCheckResponse",
    "ErrorResponse",
    "GeneratedImage",
    "GenerationResponse",
    "HairOptions",
    "ImageAsset",
    "InvalidAspectRatioError",
    "JPEG_MIME_TYPE",
    "KeyReport",
    "OptionsCatalog",
    "TryOnOptions",
    "extract_aspect_ratio",
]
