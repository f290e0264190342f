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

"""Card composition: one card rectangle and record in, ordered draw ops out.

Layers are emitted back to front:

1. shadow
2. card background, background image or gradient
3. top rule
4. name
5. secondary identity (professional, else title)
6. credential chip (CRM, else company)
7. contact lines
8. coded image
9. border
10. crop marks

Text sections stack downward from the top padding. A section that is not
emitted consumes no vertical space.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..core.models import CardRecord
from .assets import AssetLoader, CardAssets
from .geometry import grid_gaps
from .spec import PageTemplate
from .text import (
    clamp_lines,
    estimate_text_width,
    fit_line,
    font_line_height,
    wrap_segments,
    wrap_text,
)
from .types import (
    CardComposition,
    CardRect,
    DrawCodedImage,
    DrawImage,
    DrawLine,
    DrawOp,
    DrawText,
    FillGradient,
    FillRect,
    Section,
    StrokeRect,
)

SECTION_NAME = "name"
SECTION_SECONDARY = "secondary"
SECTION_CREDENTIAL = "credential"
SECTION_CONTACT = "contact"

BORDER_WIDTH = 0.5
# Fraction of the content width covered by the highlight rule.
HIGHLIGHT_RULE_RATIO = 0.35
_EPSILON = 1e-6


@dataclass(frozen=True)
class _Palette:
    name: str
    secondary: str
    contact: str


def compose_card(
    rect: CardRect,
    record: CardRecord,
    template: PageTemplate,
    *,
    assets: CardAssets | None = None,
    loader: AssetLoader | None = None,
) -> CardComposition:
    """Build the draw operations for one card.

    Assets are resolved through ``loader`` (or a fresh one) unless already
    given. Asset failures become warnings on the result and never fail the
    card.
    """
    if assets is None:
        assets = (loader or AssetLoader(template)).resolve(record)
    return _CardComposer(rect, record, template, assets).compose()


class _CardComposer:
    def __init__(
        self,
        rect: CardRect,
        record: CardRecord,
        template: PageTemplate,
        assets: CardAssets,
    ) -> None:
        self.rect = rect
        self.record = record
        self.template = template
        self.assets = assets
        self.layout = template.layout
        self.content = rect.inset(template.layout.padding)
        # full-bleed background images are square, so the card outline is too
        rounded = template.effects.rounded_corners and assets.background is None
        self.radius = template.layout.corner_radius if rounded else 0.0
        self.ops: list[DrawOp] = []
        self.sections: dict[str, Section] = {}
        self.overflow = False
        self.cursor = self.content.y
        self.qr_box = self._coded_image_box()
        self.palette = self._text_palette()

    def compose(self) -> CardComposition:
        self._draw_shadow()
        self._draw_background()
        self._draw_top_rule()
        self._draw_name()
        self._draw_secondary()
        self._draw_credential()
        self._draw_contact()
        self._draw_coded_image()
        self._draw_border()
        self._draw_crop_marks()
        return CardComposition(
            ops=tuple(self.ops),
            warnings=self.assets.warnings,
            sections=dict(self.sections),
            overflow=self.overflow,
        )

    # Background layers

    def _draw_shadow(self) -> None:
        if not self.template.effects.shadow:
            return
        offset = self.layout.shadow_offset
        self.ops.append(
            FillRect(
                rect=self.rect.offset(offset, offset),
                color=self.template.colors.shadow,
                radius=self.radius,
                opacity=self.layout.shadow_opacity,
                layer="shadow",
            )
        )

    def _draw_background(self) -> None:
        colors = self.template.colors
        self.ops.append(FillRect(rect=self.rect, color=colors.card_background, radius=self.radius))
        background = self.assets.background
        if background is not None:
            self.ops.append(
                DrawImage(data=background.data, rect=self.rect, source=background.source)
            )
            return
        if self.template.effects.gradient:
            self.ops.append(
                FillGradient(
                    rect=self.rect,
                    top_color=colors.gradient_top,
                    bottom_color=colors.gradient_bottom,
                    radius=self.radius,
                )
            )

    def _draw_top_rule(self) -> None:
        if not self.template.effects.top_rule:
            return
        colors = self.template.colors
        width = self.layout.rule_width
        y = self.rect.y + self.layout.padding / 2
        x1 = self.content.x
        self.ops.append(
            DrawLine(x1, y, self.content.right, y, color=colors.accent, width=width)
        )
        highlight_y = y + width + 1.0
        highlight_x2 = x1 + self.content.width * HIGHLIGHT_RULE_RATIO
        self.ops.append(
            DrawLine(
                x1,
                highlight_y,
                highlight_x2,
                highlight_y,
                color=colors.highlight,
                width=width,
            )
        )

    # Text flow

    def _draw_name(self) -> None:
        fonts = self.template.fonts
        size = fonts.name

        def build(width: float) -> list[str]:
            lines = wrap_text(self.record.name, size, width)
            return clamp_lines(lines, self.layout.name_max_lines, size, width)

        self._place_text(SECTION_NAME, build, size=size, color=self.palette.name, style="B")

    def _draw_secondary(self) -> None:
        text = self.record.secondary
        if not text:
            return
        size = self.template.fonts.secondary
        self._place_text(
            SECTION_SECONDARY,
            lambda width: wrap_segments(text, size, width),
            size=size,
            color=self.palette.secondary,
        )

    def _draw_credential(self) -> None:
        record = self.record
        colors = self.template.colors
        if record.has_credential:
            label = self.layout.credential_label
            text = f"{label}: {record.crm_number}/{record.crm_region}"
            self._place_chip(text, chip_color=colors.chip_highlight, text_color=colors.medical)
        elif record.company:
            self._place_chip(
                record.company,
                chip_color=colors.chip_light,
                text_color=colors.secondary,
            )

    def _draw_contact(self) -> None:
        record = self.record
        tags = self.layout.contact_tags
        entries = [
            f"{tag} {value}"
            for tag, value in zip(tags, (record.phone, record.email, record.website))
            if value
        ]
        if not entries:
            return
        size = self.template.fonts.contact
        self._place_text(
            SECTION_CONTACT,
            lambda width: [fit_line(entry, size, width) for entry in entries],
            size=size,
            color=self.palette.contact,
            gap=self.layout.line_spacing,
        )

    def _place_text(
        self,
        section: str,
        build: Callable[[float], list[str]],
        *,
        size: float,
        color: str,
        style: str = "",
        gap: float = 0.0,
    ) -> None:
        top = self._section_top(section)
        line_height = font_line_height(size, self.layout.line_height_ratio)
        pitch = line_height + gap
        x, width = self._text_frame(top, line_height)
        lines = build(width)
        height = _block_height(len(lines), line_height, gap)
        narrow_x, narrow_width = self._text_frame(top, height)
        if narrow_width < width:
            x, width = narrow_x, narrow_width
            lines = build(width)
            height = _block_height(len(lines), line_height, gap)

        limit = self.content.bottom + _EPSILON
        fitting = 0
        for idx in range(len(lines)):
            if top + idx * pitch + line_height > limit:
                break
            fitting += 1
        if fitting < len(lines):
            self.overflow = True
            lines = lines[:fitting]
        if not lines:
            return
        height = _block_height(len(lines), line_height, gap)
        self.ops.append(
            DrawText(
                lines=tuple(lines),
                x=x,
                y=top,
                width=width,
                font_family=self.template.fonts.family,
                font_size=size,
                color=color,
                line_height=pitch,
                style=style,
                layer=section,
            )
        )
        self._close_section(section, top, top + height)

    def _place_chip(self, text: str, *, chip_color: str, text_color: str) -> None:
        size = self.template.fonts.credential
        pad = self.layout.chip_padding
        top = self._section_top(SECTION_CREDENTIAL)
        line_height = font_line_height(size, self.layout.line_height_ratio)
        chip_height = line_height + 2 * pad
        if top + chip_height > self.content.bottom + _EPSILON:
            self.overflow = True
            return
        x, width = self._text_frame(top, chip_height)
        line = fit_line(text, size, max(0.0, width - 2 * pad))
        text_width = estimate_text_width(line, size)
        chip = CardRect(x=x, y=top, width=min(width, text_width + 2 * pad), height=chip_height)
        self.ops.append(FillRect(rect=chip, color=chip_color, radius=pad, layer=SECTION_CREDENTIAL))
        self.ops.append(
            DrawText(
                lines=(line,),
                x=x + pad,
                y=top + pad,
                width=max(0.0, width - 2 * pad),
                font_family=self.template.fonts.family,
                font_size=size,
                color=text_color,
                line_height=line_height,
                style="B",
                layer=SECTION_CREDENTIAL,
            )
        )
        self._close_section(SECTION_CREDENTIAL, top, top + chip_height)

    def _section_top(self, section: str) -> float:
        if not self.sections:
            return self.cursor
        if section == SECTION_SECONDARY:
            return self.cursor + self.layout.line_spacing
        return self.cursor + self.layout.section_spacing

    def _close_section(self, section: str, top: float, bottom: float) -> None:
        self.sections[section] = Section(top=top, bottom=bottom)
        self.cursor = bottom

    def _text_frame(self, top: float, height: float) -> tuple[float, float]:
        """Left edge and width available to a block spanning ``top``..``top+height``."""
        x = self.content.x
        width = self.content.width
        box = self.qr_box
        if box is None:
            return x, width
        pad = self.layout.chip_padding
        if top < box.bottom + pad and top + height > box.y - pad:
            reserve = box.width + self.template.qr.margin
            width -= reserve
            if self.template.qr.position.endswith("left"):
                x += reserve
        return x, max(1.0, width)

    def _text_palette(self) -> _Palette:
        colors = self.template.colors
        if self.assets.background is not None:
            return _Palette(
                name=colors.text_primary,
                secondary=colors.text_secondary,
                contact=colors.text_muted,
            )
        return _Palette(name=colors.primary, secondary=colors.secondary, contact=colors.contact)

    # Decorations

    def _coded_image_box(self) -> CardRect | None:
        qr = self.template.qr
        if not qr.enabled or not self.record.website or self.assets.coded_image is None:
            return None
        content = self.content
        size = max(0.0, min(qr.size, content.width, content.height))
        if size <= 0:
            return None
        x = content.x if qr.position.endswith("left") else content.right - size
        y = content.y if qr.position.startswith("top") else content.bottom - size
        return CardRect(x=x, y=y, width=size, height=size)

    def _draw_coded_image(self) -> None:
        box = self.qr_box
        image = self.assets.coded_image
        if box is None or image is None:
            return
        qr = self.template.qr
        if qr.border:
            frame = box.inset(-self.layout.chip_padding)
            self.ops.append(
                FillRect(rect=frame, color=qr.background_color, radius=qr.corner_radius, layer="qr")
            )
            self.ops.append(
                StrokeRect(
                    rect=frame,
                    color=qr.border_color,
                    width=qr.border_width,
                    radius=qr.corner_radius,
                    layer="qr",
                )
            )
        self.ops.append(DrawCodedImage(data=image.data, rect=box, url=image.source))

    def _draw_border(self) -> None:
        if not self.template.effects.border:
            return
        self.ops.append(
            StrokeRect(
                rect=self.rect,
                color=self.template.colors.border,
                width=BORDER_WIDTH,
                radius=self.radius,
            )
        )

    def _draw_crop_marks(self) -> None:
        marks = self.template.crop_marks
        if not marks.enabled:
            return
        reach = self._crop_mark_reach()
        for x1, y1, x2, y2 in crop_mark_segments(
            self.rect, marks.length, marks.offset, reach=reach
        ):
            self.ops.append(
                DrawLine(
                    x1,
                    y1,
                    x2,
                    y2,
                    color=marks.color,
                    width=marks.width,
                    dash=marks.dash,
                    layer="crop",
                )
            )

    def _crop_mark_reach(self) -> tuple[float, float, float, float]:
        """Room outside each card side: half the gap to a neighbour, else the page edge."""
        template = self.template
        rect = self.rect
        margins = template.margins
        h_gap, v_gap = grid_gaps(template)
        col = _grid_index(rect.x - margins.left, rect.width + h_gap, template.grid.columns)
        row = _grid_index(rect.y - margins.top, rect.height + v_gap, template.grid.rows)
        page = template.page
        left = h_gap / 2 if col > 0 else rect.x
        right = h_gap / 2 if col < template.grid.columns - 1 else page.width - rect.right
        top = v_gap / 2 if row > 0 else rect.y
        bottom = v_gap / 2 if row < template.grid.rows - 1 else page.height - rect.bottom
        return left, top, right, bottom


def crop_mark_segments(
    rect: CardRect,
    length: float,
    offset: float,
    *,
    reach: tuple[float, float, float, float] | None = None,
) -> list[tuple[float, float, float, float]]:
    """Two outward segments per corner, along the card edges.

    ``reach`` caps how far marks may extend past the left, top, right and
    bottom sides; a mark with no room left after ``offset`` is dropped.
    """
    left, top, right, bottom = reach if reach is not None else (float("inf"),) * 4
    segments: list[tuple[float, float, float, float]] = []
    corners = (
        (rect.x, rect.y, -1.0, -1.0),
        (rect.right, rect.y, 1.0, -1.0),
        (rect.x, rect.bottom, -1.0, 1.0),
        (rect.right, rect.bottom, 1.0, 1.0),
    )
    for cx, cy, dx, dy in corners:
        span_x = min(offset + length, left if dx < 0 else right) - offset
        if span_x > 0:
            start_x = cx + dx * offset
            segments.append((start_x, cy, start_x + dx * span_x, cy))
        span_y = min(offset + length, top if dy < 0 else bottom) - offset
        if span_y > 0:
            start_y = cy + dy * offset
            segments.append((cx, start_y, cx, start_y + dy * span_y))
    return segments


def _grid_index(distance: float, pitch: float, count: int) -> int:
    if pitch <= 0 or count <= 1:
        return 0
    return min(max(round(distance / pitch), 0), count - 1)


def _block_height(count: int, line_height: float, gap: float) -> float:
    if count <= 0:
        return 0.0
    return count * line_height + (count - 1) * gap
