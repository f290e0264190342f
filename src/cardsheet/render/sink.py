#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import io
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from fpdf import FPDF
from fpdf.errors import FPDFException
from PIL import ImageColor

from .types import Align, CardRect

GRADIENT_STEPS = 24
# Overlap between gradient strips to avoid hairline seams in viewers.
_STRIP_OVERLAP = 0.2


class DocumentSink(Protocol):
    """Single-writer drawing surface, driven strictly in page and card order."""

    def fill_rect(
        self,
        rect: CardRect,
        color: str,
        *,
        radius: float = 0.0,
        opacity: float = 1.0,
    ) -> None: ...

    def fill_gradient(
        self,
        rect: CardRect,
        top_color: str,
        bottom_color: str,
        *,
        radius: float = 0.0,
    ) -> None: ...

    def stroke_rect(
        self,
        rect: CardRect,
        color: str,
        width: float,
        *,
        radius: float = 0.0,
        dash: tuple[float, float] | None = None,
    ) -> None: ...

    def draw_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: str,
        width: float,
        *,
        dash: tuple[float, float] | None = None,
    ) -> None: ...

    def draw_text(
        self,
        lines: Sequence[str],
        x: float,
        y: float,
        *,
        width: float,
        font_family: str,
        font_size: float,
        color: str,
        line_height: float,
        style: str = "",
        align: Align = "L",
    ) -> None: ...

    def draw_image(self, data: bytes, rect: CardRect) -> None: ...

    def new_page(self) -> None: ...

    def finalize(self) -> Path | None: ...


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    rgb = ImageColor.getrgb(color)
    return (int(rgb[0]), int(rgb[1]), int(rgb[2]))


def latin1_text(text: str) -> str:
    """Core PDF fonts only cover latin-1; unsupported characters become '?'."""
    return text.encode("latin-1", "replace").decode("latin-1")


class FpdfSink:
    """fpdf2-backed sink; the first page exists as soon as the sink does."""

    def __init__(self, output_path: str | Path, page_width: float, page_height: float) -> None:
        self.output_path = Path(output_path)
        self._pdf = FPDF(orientation="P", unit="pt", format=(page_width, page_height))
        self._pdf.set_auto_page_break(False)
        self._pdf.set_margin(0)
        self._pdf.add_page()
        self._finalized = False

    @property
    def page_count(self) -> int:
        return self._pdf.page_no()

    def fill_rect(
        self,
        rect: CardRect,
        color: str,
        *,
        radius: float = 0.0,
        opacity: float = 1.0,
    ) -> None:
        self._pdf.set_fill_color(*hex_to_rgb(color))
        if opacity < 1.0:
            with self._pdf.local_context(fill_opacity=max(0.0, opacity)):
                self._rect(rect, style="F", radius=radius)
            return
        self._rect(rect, style="F", radius=radius)

    def fill_gradient(
        self,
        rect: CardRect,
        top_color: str,
        bottom_color: str,
        *,
        radius: float = 0.0,
    ) -> None:
        top_rgb = hex_to_rgb(top_color)
        bottom_rgb = hex_to_rgb(bottom_color)
        band_y = rect.y
        band_h = rect.height
        cap = min(max(radius, 0.0), rect.height / 2)
        if cap > 0:
            # Rounded caps in the end colors; straight strips fill the band between.
            self._pdf.set_fill_color(*top_rgb)
            self._rect(CardRect(rect.x, rect.y, rect.width, 2 * cap), style="F", radius=cap)
            self._pdf.set_fill_color(*bottom_rgb)
            bottom_cap = CardRect(rect.x, rect.bottom - 2 * cap, rect.width, 2 * cap)
            self._rect(bottom_cap, style="F", radius=cap)
            band_y += cap
            band_h -= 2 * cap
        if band_h <= 0:
            return
        strip_h = band_h / GRADIENT_STEPS
        for step in range(GRADIENT_STEPS):
            ratio = step / (GRADIENT_STEPS - 1)
            color = tuple(
                round(start + (end - start) * ratio) for start, end in zip(top_rgb, bottom_rgb)
            )
            self._pdf.set_fill_color(*color)
            height = strip_h if step == GRADIENT_STEPS - 1 else strip_h + _STRIP_OVERLAP
            self._pdf.rect(rect.x, band_y + step * strip_h, rect.width, height, style="F")

    def stroke_rect(
        self,
        rect: CardRect,
        color: str,
        width: float,
        *,
        radius: float = 0.0,
        dash: tuple[float, float] | None = None,
    ) -> None:
        self._pdf.set_draw_color(*hex_to_rgb(color))
        self._pdf.set_line_width(width)
        self._set_dash(dash)
        self._rect(rect, style="D", radius=radius)
        self._set_dash(None)

    def draw_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: str,
        width: float,
        *,
        dash: tuple[float, float] | None = None,
    ) -> None:
        self._pdf.set_draw_color(*hex_to_rgb(color))
        self._pdf.set_line_width(width)
        self._set_dash(dash)
        self._pdf.line(x1, y1, x2, y2)
        self._set_dash(None)

    def draw_text(
        self,
        lines: Sequence[str],
        x: float,
        y: float,
        *,
        width: float,
        font_family: str,
        font_size: float,
        color: str,
        line_height: float,
        style: str = "",
        align: Align = "L",
    ) -> None:
        pdf = self._pdf
        pdf.set_font(font_family, style=style, size=font_size)
        pdf.set_text_color(*hex_to_rgb(color))
        cell_height = font_size * 1.2
        for idx, line in enumerate(lines):
            pdf.set_xy(x, y + idx * line_height)
            pdf.cell(max(width, 1.0), cell_height, latin1_text(line), align=align)

    def draw_image(self, data: bytes, rect: CardRect) -> None:
        self._pdf.image(io.BytesIO(data), x=rect.x, y=rect.y, w=rect.width, h=rect.height)

    def new_page(self) -> None:
        self._pdf.add_page()

    def finalize(self) -> Path:
        if self._finalized:
            raise RuntimeError("document already finalized")
        self._finalized = True
        try:
            payload = bytes(self._pdf.output())
        except FPDFException as exc:
            raise OSError(f"cannot serialize PDF: {exc}") from exc
        write_atomic(self.output_path, payload)
        return self.output_path

    def _rect(self, rect: CardRect, *, style: str, radius: float) -> None:
        if radius > 0:
            self._pdf.rect(
                rect.x,
                rect.y,
                rect.width,
                rect.height,
                style=style,
                round_corners=True,
                corner_radius=radius,
            )
            return
        self._pdf.rect(rect.x, rect.y, rect.width, rect.height, style=style)

    def _set_dash(self, dash: tuple[float, float] | None) -> None:
        if dash is None:
            self._pdf.set_dash_pattern()
            return
        self._pdf.set_dash_pattern(dash=dash[0], gap=dash[1])


def write_atomic(path: Path, payload: bytes) -> None:
    """Write to a sibling temp file and rename, so no partial file is left behind."""
    directory = path.parent if str(path.parent) else Path(".")
    directory.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, path)
    except OSError:
        Path(temp_name).unlink(missing_ok=True)
        raise
