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
from pathlib import Path

from ..core.errors import ValidationError
from ..core.models import CardRecord
from ..core.validation import validate_cards
from .assets import AssetLoader
from .geometry import check_grid_fits, grid_gaps
from .pages import page_count, paginate
from .pdf_render import ProgressCallback, RenderResult, render_document
from .sink import FpdfSink
from .spec import PageTemplate, pt_to_mm

SAMPLE_CARDS: tuple[dict[str, str], ...] = (
    {
        "name": "João Silva",
        "title": "Desenvolvedor Full Stack",
        "company": "Tech Solutions",
        "phone": "(11) 99999-9999",
        "email": "joao@techsolutions.com",
        "website": "www.techsolutions.com",
    },
    {
        "name": "Maria Oliveira",
        "title": "Designer Gráfico",
        "company": "Creative Studio",
        "phone": "(11) 98888-8888",
        "email": "maria@creativestudio.com",
        "website": "www.creativestudio.com",
    },
    {
        "name": "Dra. Ana Costa",
        "professional": "Cardiologista\nEcocardiografia",
        "crmNumber": "123456",
        "crmRegion": "SP",
        "phone": "(11) 97777-7777",
        "email": "ana@clinicacosta.com.br",
        "website": "clinicacosta.com.br",
    },
)


@dataclass(frozen=True)
class SheetInfo:
    page_width: float
    page_height: float
    card_width: float
    card_height: float
    columns: int
    rows: int
    capacity: int
    gap_x: float
    gap_y: float
    card_count: int | None = None
    page_count: int | None = None

    @property
    def card_size_mm(self) -> tuple[float, float]:
        return pt_to_mm(self.card_width), pt_to_mm(self.card_height)

    @property
    def page_size_mm(self) -> tuple[float, float]:
        return pt_to_mm(self.page_width), pt_to_mm(self.page_height)


@dataclass(frozen=True)
class CardSheetService:
    template: PageTemplate
    jobs: int | str | None = None

    def prepare(self, raw_cards: object, *, copies: int = 1) -> list[CardRecord]:
        """Validate the batch and expand it to ``copies`` prints of each card."""
        if isinstance(copies, bool) or not isinstance(copies, int) or copies < 1:
            raise ValueError("copies must be a positive integer")
        records = validate_cards(raw_cards)
        if not records:
            raise ValidationError("no cards to render")
        return [record for record in records for _ in range(copies)]

    def render(
        self,
        records: Sequence[CardRecord],
        output_path: str | Path,
        *,
        base_dir: str | Path | None = None,
        on_page: ProgressCallback | None = None,
    ) -> RenderResult:
        check_grid_fits(self.template)
        pages = paginate(records, self.template.capacity)
        page = self.template.page
        sink = FpdfSink(output_path, page.width, page.height)
        loader = AssetLoader(self.template, jobs=self.jobs, base_dir=base_dir)
        return render_document(pages, self.template, sink, loader=loader, on_page=on_page)

    def render_cards(
        self,
        raw_cards: object,
        output_path: str | Path,
        *,
        copies: int = 1,
        base_dir: str | Path | None = None,
        on_page: ProgressCallback | None = None,
    ) -> RenderResult:
        records = self.prepare(raw_cards, copies=copies)
        return self.render(records, output_path, base_dir=base_dir, on_page=on_page)

    def info(self, card_count: int | None = None) -> SheetInfo:
        return sheet_info(self.template, card_count)


def render_cards_to_pdf(
    raw_cards: object,
    output_path: str | Path,
    template: PageTemplate,
    *,
    copies: int = 1,
    jobs: int | str | None = None,
) -> RenderResult:
    service = CardSheetService(template=template, jobs=jobs)
    return service.render_cards(raw_cards, output_path, copies=copies)


def sheet_info(template: PageTemplate, card_count: int | None = None) -> SheetInfo:
    gap_x, gap_y = grid_gaps(template)
    pages = None
    if card_count is not None:
        pages = page_count(card_count, template.capacity)
    return SheetInfo(
        page_width=template.page.width,
        page_height=template.page.height,
        card_width=template.card.width,
        card_height=template.card.height,
        columns=template.grid.columns,
        rows=template.grid.rows,
        capacity=template.capacity,
        gap_x=gap_x,
        gap_y=gap_y,
        card_count=card_count,
        page_count=pages,
    )
