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

import re
from typing import Any
from urllib.parse import urlsplit

from .errors import RecordError, ValidationError
from .models import URL_SCHEMES, CardCheck, CardRecord, with_url_scheme

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\(\d{2}\)\s\d{4,5}-\d{4}$")
CRM_NUMBER_RE = re.compile(r"^\d+$")
CRM_REGION_RE = re.compile(r"^[A-Z]{2}$")
LOGO_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg")

# Canonical input key first; the rest are accepted aliases.
FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "name": ("name",),
    "title": ("title",),
    "company": ("company",),
    "professional": ("professional",),
    "crm_number": ("crmNumber", "crm_number", "crm"),
    "crm_region": ("crmRegion", "crm_region", "crm_uf"),
    "phone": ("phone",),
    "email": ("email",),
    "website": ("website",),
    "logo_path": ("logoPath", "logo_path", "logo"),
}

# registry numbers often arrive as JSON numbers
NUMERIC_FIELDS = frozenset({"crm_number"})


def validate_card(raw: object, *, index: int | None = None) -> CardRecord:
    """Normalize one raw record into a CardRecord.

    Stops at the first violated rule. When ``index`` (0-based) is given the
    error message names the card by its 1-based position.
    """
    try:
        return _validate_record(raw)
    except ValidationError as exc:
        if index is None:
            raise
        error = RecordError(index + 1, str(exc))
        raise ValidationError(str(error), (error,)) from exc


def validate_cards(raw_cards: object) -> list[CardRecord]:
    """Validate a whole batch, reporting every failing record at once."""
    items = _require_sequence(raw_cards)
    records: list[CardRecord] = []
    errors: list[RecordError] = []
    for idx, raw in enumerate(items):
        try:
            records.append(_validate_record(raw))
        except ValidationError as exc:
            errors.append(RecordError(idx + 1, str(exc)))
    if errors:
        raise ValidationError.from_errors(errors)
    return records


def check_cards(raw_cards: object) -> list[CardCheck]:
    items = _require_sequence(raw_cards)
    checks: list[CardCheck] = []
    for idx, raw in enumerate(items):
        name = _display_name(raw)
        try:
            record = _validate_record(raw)
        except ValidationError as exc:
            checks.append(CardCheck(index=idx + 1, name=name, ok=False, reason=str(exc)))
            continue
        checks.append(CardCheck(index=idx + 1, name=record.name, ok=True))
    return checks


def _require_sequence(value: object) -> list[Any] | tuple[Any, ...]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError("cards must be a list of card objects")
    return value


def _validate_record(raw: object) -> CardRecord:
    if not isinstance(raw, dict):
        raise ValidationError("card must be an object")
    values = {field: _field_value(raw, field) for field in FIELD_KEYS}
    if not values["name"]:
        raise ValidationError("name is a required field")

    crm_number = values["crm_number"]
    crm_region = values["crm_region"]
    if bool(crm_number) != bool(crm_region):
        raise ValidationError("crmNumber and crmRegion must be provided together")
    if crm_number and not CRM_NUMBER_RE.match(crm_number):
        raise ValidationError(f"invalid crmNumber: {crm_number} (digits only)")
    if crm_region and not CRM_REGION_RE.match(crm_region):
        raise ValidationError(f"invalid crmRegion: {crm_region} (two uppercase letters)")

    email = values["email"]
    if email and not EMAIL_RE.match(email):
        raise ValidationError(f"invalid email: {email}")
    phone = values["phone"]
    if phone and not PHONE_RE.match(phone):
        raise ValidationError(
            f"invalid phone: {phone} (expected (DD) DDDD-DDDD or (DD) DDDDD-DDDD)"
        )
    website = values["website"]
    if website and not is_valid_website(website):
        raise ValidationError(f"invalid website: {website}")
    logo_path = values["logo_path"]
    if logo_path and not logo_path.lower().endswith(LOGO_EXTENSIONS):
        allowed = " ".join(LOGO_EXTENSIONS)
        raise ValidationError(f"invalid logo extension: {logo_path} (allowed: {allowed})")

    return CardRecord(**values)


def _field_value(raw: dict[Any, Any], field: str) -> str:
    keys = FIELD_KEYS[field]
    found: dict[str, str] = {}
    for key in keys:
        if key not in raw:
            continue
        found[key] = _coerce_text(
            raw[key], label=keys[0], numeric=field in NUMERIC_FIELDS
        )
    distinct = {value for value in found.values() if value}
    if len(distinct) > 1:
        names = ", ".join(found)
        raise ValidationError(f"conflicting values for {keys[0]} ({names})")
    return distinct.pop() if distinct else ""


def _coerce_text(value: object, *, label: str, numeric: bool = False) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a string")
    if numeric and isinstance(value, int):
        return str(value)
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string")
    return value.strip()


def is_valid_website(value: str) -> bool:
    if any(char.isspace() for char in value):
        return False
    if "://" in value and not value.lower().startswith(URL_SCHEMES):
        return False
    try:
        parts = urlsplit(with_url_scheme(value))
        _ = parts.port
    except ValueError:
        return False
    if parts.scheme.lower() not in ("http", "https"):
        return False
    host = parts.hostname or ""
    if not host or host.startswith(".") or ".." in host:
        return False
    return True


def _display_name(raw: object) -> str:
    if isinstance(raw, dict):
        value = raw.get("name")
        if isinstance(value, str):
            return value.strip()
    return ""
