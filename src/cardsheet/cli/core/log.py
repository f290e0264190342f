#!/usr/bin/env python3
from __future__ import annotations

from collections.abc import Iterable

from ...core.errors import AssetWarning
from ..ui import console_err


def _warn(message: str, *, quiet: bool) -> None:
    if quiet:
        return
    console_err.print(f"[yellow]Warning:[/yellow] {message}")


def _warn_assets(warnings: Iterable[AssetWarning], *, quiet: bool) -> None:
    for warning in warnings:
        _warn(str(warning), quiet=quiet)
