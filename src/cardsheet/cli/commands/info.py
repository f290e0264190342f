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

import typer

from ...core.validation import validate_cards
from ...render.geometry import check_grid_fits
from ...render.service import sheet_info
from ..core.common import _ctx_value, _load_config, _run_cli
from ..io.inputs import load_cards_json
from ..ui import console
from ..ui.summary import print_sheet_info

_INFO_HELP = (
    "Show the sheet layout of the active config.\n\n"
    "With INPUT, also report how many pages the card list needs.\n\n"
    "Examples:\n"
    "  cardsheet info\n"
    "  cardsheet --paper letter info cards.json\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_INFO_HELP)(info)


def info(
    ctx: typer.Context,
    input_file: str | None = typer.Argument(
        None,
        metavar="[INPUT]",
        help="Optional JSON card list to count pages for.",
    ),
) -> None:
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        app_config, quiet = _load_config(ctx)
        check_grid_fits(app_config.template)
        card_count = None
        if input_file is not None:
            card_count = len(validate_cards(load_cards_json(input_file)))
        print_sheet_info(sheet_info(app_config.template, card_count), quiet=quiet)
        if not quiet:
            console.print(f"[muted]Config: {app_config.config_path}[/muted]")

    _run_cli(_run, debug=debug_value)
