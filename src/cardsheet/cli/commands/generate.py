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

from pathlib import Path

import typer
from rich.progress import Progress

from ...config import apply_overrides
from ...render.pdf_render import ProgressCallback
from ...render.service import CardSheetService
from ..core.common import _ctx_value, _load_config, _run_cli
from ..core.log import _warn_assets
from ..io.inputs import input_base_dir, load_cards_json
from ..ui import progress
from ..ui.summary import print_render_summary

DEFAULT_OUTPUT = "business-cards.pdf"

_GENERATE_HELP = (
    "Render a JSON list of cards onto printable sheets (PDF).\n\n"
    "Examples:\n"
    "  cardsheet generate cards.json\n"
    "  cardsheet generate cards.json -o team.pdf --margin 8 --spacing 4\n"
    "  cardsheet --paper letter generate cards.json --no-crop-marks\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_GENERATE_HELP)(generate)


def generate(
    ctx: typer.Context,
    input_file: str = typer.Argument(
        ...,
        metavar="INPUT",
        help="JSON file with the card list (use - for stdin).",
    ),
    output: Path = typer.Option(
        Path(DEFAULT_OUTPUT),
        "--output",
        "-o",
        help="Output PDF path.",
        rich_help_panel="Outputs",
    ),
    margin: float | None = typer.Option(
        None,
        "--margin",
        help="Page margin on every side, in mm (overrides the config).",
        rich_help_panel="Layout",
    ),
    spacing: float | None = typer.Option(
        None,
        "--spacing",
        help="Fixed gap between cards, in mm (default: spread leftover space).",
        rich_help_panel="Layout",
    ),
    no_crop_marks: bool = typer.Option(
        False,
        "--no-crop-marks",
        help="Do not draw crop marks around the cards.",
        rich_help_panel="Layout",
    ),
    no_qr: bool = typer.Option(
        False,
        "--no-qr",
        help="Do not place a QR code for the card website.",
        rich_help_panel="Layout",
    ),
    copies: int = typer.Option(
        1,
        "--copies",
        min=1,
        help="Print every card this many times.",
        rich_help_panel="Layout",
    ),
    jobs: str | None = typer.Option(
        None,
        "--jobs",
        help="Worker threads for image and QR preparation ('auto' or a number).",
        rich_help_panel="Performance",
    ),
) -> None:
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        app_config, quiet = _load_config(ctx)
        template = apply_overrides(
            app_config.template,
            margin_mm=margin,
            spacing_mm=spacing,
            crop_marks=False if no_crop_marks else None,
            qr=False if no_qr else None,
        )
        jobs_value = jobs if jobs is not None else app_config.runtime.render_jobs
        raw_cards = load_cards_json(input_file)
        service = CardSheetService(template=template, jobs=jobs_value)
        records = service.prepare(raw_cards, copies=copies)
        with progress(quiet=quiet) as progress_bar:
            result = service.render(
                records,
                output,
                base_dir=input_base_dir(input_file),
                on_page=_page_reporter(progress_bar),
            )
        _warn_assets(result.warnings, quiet=quiet)
        print_render_summary(result, quiet=quiet)

    _run_cli(_run, debug=debug_value)


def _page_reporter(progress_bar: Progress | None) -> ProgressCallback | None:
    if progress_bar is None:
        return None
    task_id = progress_bar.add_task("Rendering pages...", total=None)

    def _on_page(done: int, total: int) -> None:
        progress_bar.update(task_id, completed=done, total=total)

    return _on_page
