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

from collections.abc import Sequence
from dataclasses import dataclass

from ..core.errors import ConfigurationError
from ..core.models import CardRecord
from .types import CardRect


@dataclass(frozen=True)
class Page:
    index: int
    records: tuple[CardRecord, ...]

    def slots(self, grid: Sequence[CardRect]) -> list[tuple[CardRect, CardRecord]]:
        if len(self.records) > len(grid):
            raise ConfigurationError(
                f"page {self.index + 1} holds {len(self.records)} cards "
                f"but the grid has {len(grid)} slots"
            )
        return list(zip(grid, self.records))


def page_count(total: int, capacity: int) -> int:
    _require_capacity(capacity)
    if total <= 0:
        return 0
    return (total + capacity - 1) // capacity


def paginate(records: Sequence[CardRecord], capacity: int) -> list[Page]:
    _require_capacity(capacity)
    pages: list[Page] = []
    for start in range(0, len(records), capacity):
        chunk = tuple(records[start : start + capacity])
        pages.append(Page(index=len(pages), records=chunk))
    return pages


def _require_capacity(capacity: int) -> None:
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise ConfigurationError(f"page capacity must be a positive integer (got {capacity!r})")
