"""Pillow helpers for turning pixel buffers into image files."""

from __future__ import annotations

import io
from pathlib import Path

import PIL.Image

from .engine import PixelBuffer


def pil_format_name(ext: str) -> str:
    upper = ext.upper().lstrip(".")
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def to_image(buffer: PixelBuffer) -> PIL.Image.Image:
    return PIL.Image.fromarray(buffer.rgba)


def encode_image(buffer: PixelBuffer, image_format: str = "png") -> bytes:
    """Encode ``buffer`` into an in-memory image container."""

    pil_format = pil_format_name(image_format)
    image = to_image(buffer)
    if pil_format == "JPEG":
        # JPEG has no alpha channel
        image = image.convert("RGB")
    out = io.BytesIO()
    image.save(out, format=pil_format)
    return out.getvalue()


def save_image(buffer: PixelBuffer, output_path: Path, image_format: str = "png") -> None:
    """Write ``buffer`` to ``output_path`` using the provided format."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(encode_image(buffer, image_format))
