#!/usr/bin/env python3
from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.table import Table

from ...core.models import CardCheck
from ...render.pdf_render import RenderResult
from ...render.service import SheetInfo
from . import build_kv_table, console, panel


def _format_size(width: float, height: float, width_mm: float, height_mm: float) -> str:
    return f"{width_mm:.1f} x {height_mm:.1f} mm ({width:.2f} x {height:.2f} pt)"


def print_render_summary(result: RenderResult, *, quiet: bool) -> None:
    if quiet:
        return
    rows = [
        ("Pages", str(result.page_count)),
        ("Cards", str(result.card_count)),
        ("Output", str(result.output_path) if result.output_path else "-"),
    ]
    if result.warnings:
        rows.append(("Warnings", str(len(result.warnings))))
    if result.overflow_cards:
        rows.append(("Truncated text", ", ".join(f"card {idx}" for idx in result.overflow_cards)))
    console.print(panel("Business cards", build_kv_table(rows), style="success"))


def print_sheet_info(info: SheetInfo, *, quiet: bool) -> None:
    if quiet:
        return
    page_mm = info.page_size_mm
    card_mm = info.card_size_mm
    rows = [
        ("Page", _format_size(info.page_width, info.page_height, *page_mm)),
        ("Card", _format_size(info.card_width, info.card_height, *card_mm)),
        ("Grid", f"{info.columns} x {info.rows} ({info.capacity} cards per page)"),
        ("Gaps", f"{info.gap_x:.2f} x {info.gap_y:.2f} pt"),
    ]
    if info.card_count is not None:
        rows.append(("Cards", str(info.card_count)))
        rows.append(("Pages needed", str(info.page_count)))
    console.print(panel("Sheet", build_kv_table(rows)))


def build_validation_table(checks: Sequence[CardCheck]) -> Table:
    table = Table(box=box.SIMPLE, show_lines=False)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Name")
    table.add_column("Status", no_wrap=True)
    table.add_column("Reason", style="muted")
    for check in checks:
        status = "[success]ok[/success]" if check.ok else "[error]invalid[/error]"
        table.add_row(str(check.index), check.name or "-", status, check.reason)
    return table


def print_validation_report(checks: Sequence[CardCheck], *, quiet: bool) -> None:
    if quiet:
        return
    valid = sum(1 for check in checks if check.ok)
    console.print(build_validation_table(checks))
    style = "success" if valid == len(checks) else "warning"
    console.print(f"[{style}]{valid}/{len(checks)} card(s) valid[/{style}]")
