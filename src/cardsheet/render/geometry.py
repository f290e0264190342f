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

from functools import lru_cache

from ..core.errors import ConfigurationError
from .spec import PageTemplate
from .types import CardRect

# Tolerance for fit checks (rounded template values)
COORDINATE_EPSILON = 0.01


def usable_area(template: PageTemplate) -> tuple[float, float]:
    margins = template.margins
    usable_w = template.page.width - margins.left - margins.right
    usable_h = template.page.height - margins.top - margins.bottom
    return usable_w, usable_h


def distributed_gap(usable: float, cell: float, count: int) -> float:
    if count <= 1:
        return 0.0
    return (usable - count * cell) / (count - 1)


def grid_gaps(template: PageTemplate) -> tuple[float, float]:
    grid = template.grid
    if grid.spacing == "fixed":
        return grid.gap_x, grid.gap_y
    usable_w, usable_h = usable_area(template)
    return (
        distributed_gap(usable_w, template.card.width, grid.columns),
        distributed_gap(usable_h, template.card.height, grid.rows),
    )


@lru_cache(maxsize=32)
def compute_grid(template: PageTemplate) -> tuple[CardRect, ...]:
    """Card rectangles of one page in row-major order.

    Pure arithmetic: templates whose cards do not fit produce overlapping
    rectangles. Callers guard with ``check_grid_fits``.
    """
    card_w = template.card.width
    card_h = template.card.height
    h_gap, v_gap = grid_gaps(template)
    left = template.margins.left
    top = template.margins.top
    rects: list[CardRect] = []
    for row in range(template.grid.rows):
        for col in range(template.grid.columns):
            rects.append(
                CardRect(
                    x=left + col * (card_w + h_gap),
                    y=top + row * (card_h + v_gap),
                    width=card_w,
                    height=card_h,
                )
            )
    return tuple(rects)


def check_grid_fits(template: PageTemplate) -> None:
    grid = template.grid
    if grid.columns < 1 or grid.rows < 1:
        raise ConfigurationError(
            f"grid must have at least one column and one row (got {grid.columns}x{grid.rows})"
        )
    if template.card.width <= 0 or template.card.height <= 0:
        raise ConfigurationError("card width and height must be positive")
    usable_w, usable_h = usable_area(template)
    if usable_w <= 0 or usable_h <= 0:
        raise ConfigurationError("page margins leave no usable area")
    h_gap, v_gap = grid_gaps(template)
    if grid.spacing == "fixed" and (h_gap < 0 or v_gap < 0):
        raise ConfigurationError("card spacing must not be negative")
    # distributed gaps go negative exactly when the cards alone overflow
    needed_w = grid.columns * template.card.width + (grid.columns - 1) * max(h_gap, 0.0)
    needed_h = grid.rows * template.card.height + (grid.rows - 1) * max(v_gap, 0.0)
    if needed_w > usable_w + COORDINATE_EPSILON:
        raise ConfigurationError(
            f"{grid.columns} card columns need {needed_w:.2f}pt but only "
            f"{usable_w:.2f}pt fit between the margins"
        )
    if needed_h > usable_h + COORDINATE_EPSILON:
        raise ConfigurationError(
            f"{grid.rows} card rows need {needed_h:.2f}pt but only "
            f"{usable_h:.2f}pt fit between the margins"
        )
