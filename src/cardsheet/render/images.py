#!/usr/bin/env python3
from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

RASTER_UNSUPPORTED = (".svg",)


def pt_to_px(value_pt: float, dpi: int) -> int:
    return max(1, round(value_pt / 72.0 * dpi))


def open_image(path: str | Path) -> Image.Image:
    """Open and fully decode a raster image.

    Raises ``OSError`` for missing, unreadable or undecodable files.
    """
    resolved = Path(path).expanduser()
    if resolved.suffix.lower() in RASTER_UNSUPPORTED:
        raise OSError(f"vector images are not supported ({resolved.suffix.lower()})")
    if not resolved.is_file():
        raise FileNotFoundError(f"image not found: {resolved}")
    try:
        with Image.open(resolved) as handle:
            handle.load()
            image = ImageOps.exif_transpose(handle)
            return image.convert("RGBA")
    except UnidentifiedImageError as exc:
        raise OSError(f"cannot decode image: {resolved}") from exc


def resize_cover(image: Image.Image, width_px: int, height_px: int) -> Image.Image:
    return ImageOps.fit(
        image,
        (width_px, height_px),
        method=Image.Resampling.LANCZOS,
        centering=(0.5, 0.5),
    )


def resize_contain(
    image: Image.Image,
    width_px: int,
    height_px: int,
    *,
    fill: str = "#ffffff",
) -> Image.Image:
    fitted = ImageOps.contain(image, (width_px, height_px), method=Image.Resampling.LANCZOS)
    canvas = Image.new("RGBA", (width_px, height_px), fill)
    offset = ((width_px - fitted.width) // 2, (height_px - fitted.height) // 2)
    canvas.paste(fitted, offset, fitted if fitted.mode == "RGBA" else None)
    return canvas


def composite_over(image: Image.Image, color: str, opacity: float) -> Image.Image:
    """Flatten ``image`` onto a solid color at the given opacity."""
    opacity = max(0.0, min(1.0, float(opacity)))
    overlay = image.convert("RGBA")
    alpha = overlay.getchannel("A").point(lambda value: int(value * opacity))
    overlay.putalpha(alpha)
    base = Image.new("RGB", overlay.size, color)
    base.paste(overlay, (0, 0), overlay)
    return base


def png_bytes(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()
