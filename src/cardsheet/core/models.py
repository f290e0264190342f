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

from dataclasses import dataclass

URL_SCHEMES = ("http://", "https://")


@dataclass(frozen=True)
class CardRecord:
    """One person's printable card data.

    Optional fields are always strings; an absent value is the empty string.
    """

    name: str
    title: str = ""
    company: str = ""
    professional: str = ""
    crm_number: str = ""
    crm_region: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    logo_path: str = ""

    @property
    def has_credential(self) -> bool:
        return bool(self.crm_number and self.crm_region)

    @property
    def secondary(self) -> str:
        return self.professional or self.title

    def website_url(self) -> str:
        return with_url_scheme(self.website)


@dataclass(frozen=True)
class CardCheck:
    index: int
    name: str
    ok: bool
    reason: str = ""


def with_url_scheme(value: str) -> str:
    if not value:
        return ""
    if value.lower().startswith(URL_SCHEMES):
        return value
    return f"https://{value}"
