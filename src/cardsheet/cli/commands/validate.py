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

from ...core.validation import check_cards
from ..core.common import _ctx_value, _run_cli
from ..io.inputs import load_cards_json
from ..ui.summary import print_validation_report

_VALIDATE_HELP = (
    "Check a JSON card list without rendering it.\n\n"
    "Exits with status 1 when at least one card is invalid.\n\n"
    "Examples:\n"
    "  cardsheet validate cards.json\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_VALIDATE_HELP)(validate)


def validate(
    ctx: typer.Context,
    input_file: str = typer.Argument(
        ...,
        metavar="INPUT",
        help="JSON file with the card list (use - for stdin).",
    ),
) -> None:
    quiet_value = bool(_ctx_value(ctx, "quiet"))
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> int:
        checks = check_cards(load_cards_json(input_file))
        print_validation_report(checks, quiet=quiet_value)
        return 0 if all(check.ok for check in checks) else 1

    _run_cli(_run, debug=debug_value)
