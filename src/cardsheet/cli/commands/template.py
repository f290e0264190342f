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

from ...render.service import SAMPLE_CARDS
from ..core.common import _ctx_value, _run_cli
from ..io.outputs import write_cards_json
from ..ui import console

DEFAULT_TEMPLATE_OUTPUT = "cards-template.json"

_TEMPLATE_HELP = (
    "Write an example JSON card list to start from.\n\n"
    "Examples:\n"
    "  cardsheet template\n"
    "  cardsheet template -o my-cards.json\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_TEMPLATE_HELP)(template)


def template(
    ctx: typer.Context,
    output: Path = typer.Option(
        Path(DEFAULT_TEMPLATE_OUTPUT),
        "--output",
        "-o",
        help="Output JSON path.",
        rich_help_panel="Outputs",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing file.",
        rich_help_panel="Behavior",
    ),
) -> None:
    quiet_value = bool(_ctx_value(ctx, "quiet"))
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        if output.exists() and not force:
            raise FileExistsError(f"{output} already exists (use --force to overwrite)")
        path = write_cards_json(output, SAMPLE_CARDS)
        if not quiet_value:
            console.print(f"Template written to {path}")
            console.print("[muted]Edit the cards, then run `cardsheet generate`.[/muted]")

    _run_cli(_run, debug=debug_value)
