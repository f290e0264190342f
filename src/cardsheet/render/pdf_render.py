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

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import AssetWarning
from .assets import AssetLoader
from .compose import compose_card
from .geometry import compute_grid
from .pages import Page
from .sink import DocumentSink
from .spec import PageTemplate
from .types import (
    DrawCodedImage,
    DrawImage,
    DrawLine,
    DrawOp,
    DrawText,
    FillGradient,
    FillRect,
    StrokeRect,
)

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class RenderResult:
    page_count: int
    card_count: int
    warnings: tuple[AssetWarning, ...] = ()
    overflow_cards: tuple[int, ...] = ()
    output_path: Path | None = None


def render_document(
    pages: Sequence[Page],
    template: PageTemplate,
    sink: DocumentSink,
    *,
    loader: AssetLoader | None = None,
    on_page: ProgressCallback | None = None,
) -> RenderResult:
    """Replay every card of every page onto ``sink`` and finalize it once.

    Page 0 draws on the sink's initial page; each later page starts with an
    explicit ``new_page``. Assets may be prefetched concurrently but draw calls
    stay in row-major card order.
    """
    loader = loader or AssetLoader(template)
    grid = compute_grid(template)
    records = [record for page in pages for record in page.records]
    prefetched = loader.prefetch(records)

    warnings: list[AssetWarning] = []
    overflow: list[int] = []
    card_index = 0
    for page_idx, page in enumerate(pages):
        if page_idx > 0:
            sink.new_page()
        for rect, record in page.slots(grid):
            composition = compose_card(rect, record, template, assets=prefetched[card_index])
            for op in composition.ops:
                replay(op, sink)
            warnings.extend(composition.warnings)
            if composition.overflow:
                overflow.append(card_index + 1)
            card_index += 1
        if on_page is not None:
            on_page(page_idx + 1, len(pages))

    output_path = sink.finalize()
    return RenderResult(
        page_count=len(pages),
        card_count=card_index,
        warnings=tuple(warnings),
        overflow_cards=tuple(overflow),
        output_path=output_path,
    )


def replay(op: DrawOp, sink: DocumentSink) -> None:
    if isinstance(op, FillRect):
        sink.fill_rect(op.rect, op.color, radius=op.radius, opacity=op.opacity)
    elif isinstance(op, FillGradient):
        sink.fill_gradient(op.rect, op.top_color, op.bottom_color, radius=op.radius)
    elif isinstance(op, StrokeRect):
        sink.stroke_rect(op.rect, op.color, op.width, radius=op.radius, dash=op.dash)
    elif isinstance(op, DrawLine):
        sink.draw_line(op.x1, op.y1, op.x2, op.y2, op.color, op.width, dash=op.dash)
    elif isinstance(op, DrawText):
        sink.draw_text(
            op.lines,
            op.x,
            op.y,
            width=op.width,
            font_family=op.font_family,
            font_size=op.font_size,
            color=op.color,
            line_height=op.line_height,
            style=op.style,
            align=op.align,
        )
    elif isinstance(op, (DrawImage, DrawCodedImage)):
        sink.draw_image(op.data, op.rect)
    else:
        raise TypeError(f"unsupported draw operation: {type(op).__name__}")
