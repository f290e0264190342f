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

from ...render.service import SAMPLE_CARDS, CardSheetService
from ..core.common import _ctx_value, _load_config, _run_cli
from ..core.log import _warn_assets
from ..ui.summary import print_render_summary

DEFAULT_SAMPLE_OUTPUT = "sample-business-cards.pdf"

_SAMPLE_HELP = (
    "Render the built-in example cards, to preview the active config.\n\n"
    "Examples:\n"
    "  cardsheet sample\n"
    "  cardsheet --paper letter sample -o letter-preview.pdf\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_SAMPLE_HELP)(sample)


def sample(
    ctx: typer.Context,
    output: Path = typer.Option(
        Path(DEFAULT_SAMPLE_OUTPUT),
        "--output",
        "-o",
        help="Output PDF path.",
        rich_help_panel="Outputs",
    ),
) -> None:
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        app_config, quiet = _load_config(ctx)
        service = CardSheetService(
            template=app_config.template,
            jobs=app_config.runtime.render_jobs,
        )
        result = service.render_cards(list(SAMPLE_CARDS), output)
        _warn_assets(result.warnings, quiet=quiet)
        print_render_summary(result, quiet=quiet)

    _run_cli(_run, debug=debug_value)
