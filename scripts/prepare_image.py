#!/usr/bin/env python
"""Script to crop and resize a local photo the way uploads are prepared."""
from __future__ import annotations

import argparse
import mimetypes
from pathlib import Path

from hairstudio.models import ImageAsset
from hairstudio.utils.image_ops import ImageProcessingError, crop_image, read_dimensions, resize_image


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Crop and resize an image for HairStudio")
    parser.add_argument("source", type=Path)
    parser.add_argument("output", type=Path)
    parser.add_argument("--aspect_ratio", default=None, help="Center-crop to W:H first, e.g. 3:4")
    parser.add_argument("--max_width", type=int, default=1536)
    parser.add_argument("--max_height", type=int, default=1536)
    parser.add_argument("--quality", type=float, default=0.6)
    args = parser.parse_args(argv)

    mime_type = mimetypes.guess_type(args.source.name)[0] or "application/octet-stream"
    asset = ImageAsset(data=args.source.read_bytes(), mime_type=mime_type, filename=args.source.name)

    if args.aspect_ratio:
        asset = crop_image(asset, args.aspect_ratio)
    asset = resize_image(asset, args.max_width, args.max_height, args.quality)

    args.output.write_bytes(asset.data)
    try:
        size = str(read_dimensions(asset))
    except ImageProcessingError:
        # resize_image hands back undecodable input unchanged
        size = "unreadable image, copied as is"
    print(f"Wrote {args.output} ({size}, {asset.size} bytes)")


if __name__ == "__main__":
    main()
