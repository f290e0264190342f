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


@dataclass(frozen=True)
class RecordError:
    index: int
    reason: str

    def __str__(self) -> str:
        return f"Card {self.index}: {self.reason}"


class ValidationError(ValueError):
    """Raised when one or more card records are invalid.

    ``errors`` keeps one entry per failing record (1-based index) so callers can
    report every problem of a batch at once.
    """

    def __init__(self, message: str, errors: Sequence[RecordError] = ()) -> None:
        super().__init__(message)
        self.errors: tuple[RecordError, ...] = tuple(errors)

    @classmethod
    def from_errors(cls, errors: Sequence[RecordError]) -> ValidationError:
        lines = [str(error) for error in errors]
        count = len(lines)
        suffix = "record" if count == 1 else "records"
        message = "\n".join([f"{count} invalid card {suffix}:", *lines])
        return cls(message, errors)


class ConfigurationError(ValueError):
    """Raised for templates that cannot produce a usable page grid."""


@dataclass(frozen=True)
class AssetWarning:
    """A visual layer that was skipped because its asset could not be produced."""

    layer: str
    source: str
    reason: str

    def __str__(self) -> str:
        return f"{self.layer} skipped for {self.source}: {self.reason}"
