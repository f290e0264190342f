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

import json
import sys
from pathlib import Path
from typing import Any


def load_cards_json(path: str | Path, *, allow_stdin: bool = True) -> Any:
    """Read a JSON card list from ``path`` (``-`` reads stdin)."""
    if allow_stdin and str(path) == "-":
        return _parse_json(sys.stdin.read(), source="stdin")
    resolved = Path(path).expanduser()
    if not resolved.exists():
        raise FileNotFoundError(f"input file not found: {resolved}")
    if resolved.is_dir():
        raise IsADirectoryError(f"input path is a directory: {resolved}")
    return _parse_json(resolved.read_text(encoding="utf-8"), source=str(resolved))


def input_base_dir(path: str | Path) -> Path | None:
    """Directory that relative logo paths of an input file resolve against."""
    if str(path) == "-":
        return None
    return Path(path).expanduser().resolve().parent


def _parse_json(text: str, *, source: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"invalid JSON in {source}: {exc.msg} (line {exc.lineno}, column {exc.colno})"
        ) from exc
