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

AVG_CHAR_WIDTH_RATIO = 0.6
ELLIPSIS = "..."


def avg_char_width(font_size: float) -> float:
    return float(font_size) * AVG_CHAR_WIDTH_RATIO


def estimate_text_width(text: str, font_size: float) -> float:
    return len(text) * avg_char_width(font_size)


def font_line_height(size_pt: float, multiplier: float = 1.2) -> float:
    return float(size_pt) * multiplier


def fits(text: str, font_size: float, max_width: float) -> bool:
    return estimate_text_width(text, font_size) <= max_width


def split_segments(text: str) -> list[str]:
    """Split on explicit line breaks, dropping blank segments."""
    normalized = text.replace("\r\n", "\n")
    return [segment.strip() for segment in normalized.split("\n") if segment.strip()]


def wrap_text(text: str, font_size: float, max_width: float) -> list[str]:
    """Greedy word wrap using the average-character-width estimate.

    Words wider than the line on their own are split by characters.
    """
    wrapped: list[str] = []
    words = text.split()
    current = ""
    for word in words:
        candidate = word if not current else f"{current} {word}"
        if fits(candidate, font_size, max_width):
            current = candidate
            continue
        if current:
            wrapped.append(current)
            current = ""
        if fits(word, font_size, max_width):
            current = word
            continue
        parts = _split_word(word, font_size, max_width)
        wrapped.extend(parts[:-1])
        current = parts[-1] if parts else ""
    if current:
        wrapped.append(current)
    return wrapped


def wrap_segments(text: str, font_size: float, max_width: float) -> list[str]:
    lines: list[str] = []
    for segment in split_segments(text):
        lines.extend(wrap_text(segment, font_size, max_width))
    return lines


def fit_line(text: str, font_size: float, max_width: float) -> str:
    """Return ``text`` or its longest prefix that fits with a trailing ellipsis."""
    if fits(text, font_size, max_width):
        return text
    max_chars = int(max_width // avg_char_width(font_size)) if font_size > 0 else len(text)
    keep = max_chars - len(ELLIPSIS)
    if keep <= 0:
        return text[: max(0, max_chars)]
    return text[:keep].rstrip() + ELLIPSIS


def clamp_lines(
    lines: Sequence[str],
    max_lines: int,
    font_size: float,
    max_width: float,
) -> list[str]:
    if max_lines <= 0 or len(lines) <= max_lines:
        return list(lines)
    kept = list(lines[:max_lines])
    last = kept[-1]
    keep = max(0, int(max_width // avg_char_width(font_size)) - len(ELLIPSIS))
    kept[-1] = last[:keep].rstrip() + ELLIPSIS
    return kept


def _split_word(word: str, font_size: float, max_width: float) -> list[str]:
    parts: list[str] = []
    chunk = ""
    for ch in word:
        next_chunk = f"{chunk}{ch}"
        if chunk and not fits(next_chunk, font_size, max_width):
            parts.append(chunk)
            chunk = ch
        else:
            chunk = next_chunk
    if chunk:
        parts.append(chunk)
    return parts
