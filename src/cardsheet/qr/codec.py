#!/usr/bin/env python3
from __future__ import annotations

import io
from typing import Any

import segno
from PIL import Image, ImageColor, ImageDraw

from ..render.spec import ERROR_LEVELS, CodedImageSpec

MODULE_SHAPES = ("square", "rounded")
_ROUNDED_RATIO = 0.2


def qr_bytes(
    data: str,
    *,
    error: str = "H",
    scale: int = 16,
    border: int = 0,
    dark: str = "#000000",
    light: str = "#ffffff",
    module_shape: str = "square",
) -> bytes:
    """Encode ``data`` as a PNG QR symbol."""
    if not data:
        raise ValueError("QR payload must not be empty")
    level = error.strip().upper()
    if level not in ERROR_LEVELS:
        raise ValueError(f"unsupported QR error level: {error}")
    shape = module_shape.strip().lower()
    if shape not in MODULE_SHAPES:
        raise ValueError(f"unsupported module_shape: {module_shape}")
    if scale <= 0:
        raise ValueError("QR scale must be a positive integer")

    qr = segno.make(data, error=level, micro=False, boost_error=False)
    if shape == "rounded":
        return _render_rounded(qr, scale=scale, border=border, dark=dark, light=light)
    buf = io.BytesIO()
    qr.save(buf, kind="png", scale=scale, border=border, dark=dark, light=light)
    return buf.getvalue()


def coded_image_png(url: str, spec: CodedImageSpec) -> bytes:
    return qr_bytes(
        url,
        error=spec.error,
        scale=spec.scale,
        border=0,
        dark=spec.color,
        light=spec.background_color,
        module_shape=spec.module_shape,
    )


def _color_to_rgba(value: str, fallback: tuple[int, int, int, int]) -> tuple[int, int, int, int]:
    normalized = value.strip()
    if not normalized or normalized.lower() in ("none", "transparent"):
        return fallback
    rgba = ImageColor.getcolor(normalized, "RGBA")
    if isinstance(rgba, int):
        return (rgba, rgba, rgba, 255)
    return (int(rgba[0]), int(rgba[1]), int(rgba[2]), int(rgba[3]))


def _render_rounded(qr: Any, *, scale: int, border: int, dark: str, light: str) -> bytes:
    light_rgba = _color_to_rgba(light, (255, 255, 255, 255))
    dark_rgba = _color_to_rgba(dark, (0, 0, 0, 255))

    width, height = qr.symbol_size(scale=scale, border=border)
    image = Image.new("RGBA", (width, height), light_rgba)
    draw = ImageDraw.Draw(image)
    radius = _ROUNDED_RATIO * scale

    for row_idx, row in enumerate(qr.matrix_iter(scale=1, border=border)):
        for col_idx, is_dark in enumerate(row):
            if not is_dark:
                continue
            x = col_idx * scale
            y = row_idx * scale
            draw.rounded_rectangle(
                (x, y, x + scale - 1, y + scale - 1),
                radius=radius,
                fill=dark_rgba,
            )

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()
