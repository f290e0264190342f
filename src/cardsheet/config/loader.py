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

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Literal, cast

from PIL import ImageColor

from ..core.errors import ConfigurationError
from ..render.spec import (
    ANCHORS,
    ERROR_LEVELS,
    MM_TO_PT,
    BackgroundSpec,
    CardLayoutSpec,
    CardSpec,
    CodedImageSpec,
    CropMarkSpec,
    EffectsSpec,
    FontSpec,
    GridSpec,
    MarginSpec,
    PageSpec,
    PageTemplate,
    PaletteSpec,
    mm_to_pt,
)
from .installer import DEFAULT_PAPER_SIZE, resolve_config_path

CORE_FONTS = ("helvetica", "times", "courier")
MODULE_SHAPES = ("square", "rounded")

_SECTIONS = (
    "page",
    "card",
    "margins",
    "grid",
    "fonts",
    "colors",
    "layout",
    "effects",
    "background",
    "crop_marks",
    "qr",
    "runtime",
    "ui",
)


@dataclass(frozen=True)
class UiDefaults:
    quiet: bool = False
    no_color: bool = False


@dataclass(frozen=True)
class RuntimeDefaults:
    render_jobs: int | Literal["auto"] | None = None


@dataclass(frozen=True)
class AppConfig:
    config_path: Path
    paper_size: str
    template: PageTemplate
    ui: UiDefaults = field(default_factory=UiDefaults)
    runtime: RuntimeDefaults = field(default_factory=RuntimeDefaults)


def load_app_config(path: str | Path | None = None, *, paper_size: str | None = None) -> AppConfig:
    config_path = resolve_config_path(path, paper_size=paper_size)
    data = _load_toml(config_path)
    page_cfg = _get_dict(data, "page")
    resolved_paper = paper_size or _parse_optional_str(page_cfg.get("size"), field="page.size")
    return AppConfig(
        config_path=config_path,
        paper_size=(resolved_paper or DEFAULT_PAPER_SIZE).upper(),
        template=build_page_template(data),
        ui=_parse_ui_defaults(_get_dict(data, "ui")),
        runtime=_parse_runtime_defaults(_get_dict(data, "runtime")),
    )


def build_page_template(data: dict[str, object]) -> PageTemplate:
    """Build a template from parsed TOML; missing keys keep their defaults."""
    unknown = sorted(key for key in data if key not in _SECTIONS)
    if unknown:
        raise ConfigurationError(f"unknown config section(s): {', '.join(unknown)}")
    return PageTemplate(
        page=_parse_page(_get_dict(data, "page")),
        card=_parse_card(_get_dict(data, "card")),
        margins=_parse_margins(_get_dict(data, "margins")),
        grid=_parse_grid(_get_dict(data, "grid")),
        fonts=_parse_fonts(_get_dict(data, "fonts")),
        colors=_parse_colors(_get_dict(data, "colors")),
        layout=_parse_layout(_get_dict(data, "layout")),
        effects=_parse_effects(_get_dict(data, "effects")),
        background=_parse_background(_get_dict(data, "background")),
        crop_marks=_parse_crop_marks(_get_dict(data, "crop_marks")),
        qr=_parse_qr(_get_dict(data, "qr")),
    )


def apply_overrides(
    template: PageTemplate,
    *,
    margin_mm: float | None = None,
    spacing_mm: float | None = None,
    crop_marks: bool | None = None,
    qr: bool | None = None,
) -> PageTemplate:
    if margin_mm is not None:
        if margin_mm < 0:
            raise ConfigurationError("margin must not be negative")
        template = template.with_margin(mm_to_pt(margin_mm))
    if spacing_mm is not None:
        if spacing_mm < 0:
            raise ConfigurationError("spacing must not be negative")
        template = template.with_spacing(mm_to_pt(spacing_mm))
    if crop_marks is False:
        template = template.without_crop_marks()
    if qr is False:
        template = template.without_qr()
    return template


def _parse_page(cfg: dict[str, object]) -> PageSpec:
    _reject_unknown(cfg, "page", ("size",), lengths=("width", "height"))
    default = PageSpec()
    return PageSpec(
        width=_parse_length(cfg, "width", section="page", default=default.width, positive=True),
        height=_parse_length(cfg, "height", section="page", default=default.height, positive=True),
    )


def _parse_card(cfg: dict[str, object]) -> CardSpec:
    _reject_unknown(cfg, "card", (), lengths=("width", "height"))
    default = CardSpec()
    return CardSpec(
        width=_parse_length(cfg, "width", section="card", default=default.width, positive=True),
        height=_parse_length(cfg, "height", section="card", default=default.height, positive=True),
    )


def _parse_margins(cfg: dict[str, object]) -> MarginSpec:
    sides = ("top", "left", "right", "bottom")
    _reject_unknown(cfg, "margins", (), lengths=(*sides, "all"))
    base = MarginSpec()
    all_value = _parse_length(cfg, "all", section="margins", default=None)
    if all_value is not None:
        base = MarginSpec.uniform(all_value)
    values = {
        side: _parse_length(cfg, side, section="margins", default=getattr(base, side))
        for side in sides
    }
    return MarginSpec(**values)


def _parse_grid(cfg: dict[str, object]) -> GridSpec:
    _reject_unknown(cfg, "grid", ("columns", "rows", "spacing"), lengths=("gap_x", "gap_y"))
    default = GridSpec()
    spacing = _parse_choice(
        cfg.get("spacing"),
        field="grid.spacing",
        choices=("distribute", "fixed"),
        default=default.spacing,
    )
    return GridSpec(
        columns=_parse_positive_int(
            cfg.get("columns"), field="grid.columns", default=default.columns
        ),
        rows=_parse_positive_int(cfg.get("rows"), field="grid.rows", default=default.rows),
        spacing=cast(Literal["distribute", "fixed"], spacing),
        gap_x=_parse_length(cfg, "gap_x", section="grid", default=default.gap_x),
        gap_y=_parse_length(cfg, "gap_y", section="grid", default=default.gap_y),
    )


def _parse_fonts(cfg: dict[str, object]) -> FontSpec:
    roles = ("name", "secondary", "credential", "contact")
    _reject_unknown(cfg, "fonts", ("family", *(f"{role}_pt" for role in roles)))
    default = FontSpec()
    family = _parse_optional_str(cfg.get("family"), field="fonts.family") or default.family
    if family.lower() not in CORE_FONTS:
        raise ConfigurationError("fonts.family must be one of: Helvetica, Times, Courier")
    sizes = {
        role: _parse_float(
            cfg.get(f"{role}_pt"),
            field=f"fonts.{role}_pt",
            default=getattr(default, role),
            positive=True,
        )
        for role in roles
    }
    return FontSpec(family=family, **sizes)


def _parse_colors(cfg: dict[str, object]) -> PaletteSpec:
    names = tuple(item.name for item in fields(PaletteSpec))
    _reject_unknown(cfg, "colors", names)
    default = PaletteSpec()
    values = {
        name: _parse_color(cfg.get(name), field=f"colors.{name}", default=getattr(default, name))
        for name in names
    }
    return PaletteSpec(**values)


def _parse_layout(cfg: dict[str, object]) -> CardLayoutSpec:
    lengths = (
        "padding",
        "line_spacing",
        "section_spacing",
        "corner_radius",
        "shadow_offset",
        "chip_padding",
        "rule_width",
    )
    plain = (
        "line_height_ratio",
        "shadow_opacity",
        "name_max_lines",
        "contact_tags",
        "credential_label",
    )
    _reject_unknown(cfg, "layout", plain, lengths=lengths)
    default = CardLayoutSpec()
    values: dict[str, object] = {
        name: _parse_length(cfg, name, section="layout", default=getattr(default, name))
        for name in lengths
    }
    values["line_height_ratio"] = _parse_float(
        cfg.get("line_height_ratio"),
        field="layout.line_height_ratio",
        default=default.line_height_ratio,
        positive=True,
    )
    values["shadow_opacity"] = _parse_fraction(
        cfg.get("shadow_opacity"), field="layout.shadow_opacity", default=default.shadow_opacity
    )
    values["name_max_lines"] = _parse_positive_int(
        cfg.get("name_max_lines"), field="layout.name_max_lines", default=default.name_max_lines
    )
    values["contact_tags"] = _parse_contact_tags(cfg.get("contact_tags"), default.contact_tags)
    values["credential_label"] = (
        _parse_optional_str(cfg.get("credential_label"), field="layout.credential_label")
        or default.credential_label
    )
    return CardLayoutSpec(**values)  # type: ignore[arg-type]


def _parse_effects(cfg: dict[str, object]) -> EffectsSpec:
    names = tuple(item.name for item in fields(EffectsSpec))
    _reject_unknown(cfg, "effects", names)
    default = EffectsSpec()
    values = {
        name: _parse_bool(cfg.get(name), field=f"effects.{name}", default=getattr(default, name))
        for name in names
    }
    return EffectsSpec(**values)


def _parse_background(cfg: dict[str, object]) -> BackgroundSpec:
    _reject_unknown(cfg, "background", ("fit", "opacity", "dpi"))
    default = BackgroundSpec()
    fit = _parse_choice(
        cfg.get("fit"), field="background.fit", choices=("cover", "contain"), default=default.fit
    )
    return BackgroundSpec(
        fit=cast(Literal["cover", "contain"], fit),
        opacity=_parse_fraction(
            cfg.get("opacity"), field="background.opacity", default=default.opacity
        ),
        dpi=_parse_positive_int(cfg.get("dpi"), field="background.dpi", default=default.dpi),
    )


def _parse_crop_marks(cfg: dict[str, object]) -> CropMarkSpec:
    _reject_unknown(
        cfg,
        "crop_marks",
        ("enabled", "color", "dash"),
        lengths=("width", "length", "offset"),
    )
    default = CropMarkSpec()
    section = "crop_marks"
    return CropMarkSpec(
        enabled=_parse_bool(
            cfg.get("enabled"), field=f"{section}.enabled", default=default.enabled
        ),
        color=_parse_color(cfg.get("color"), field=f"{section}.color", default=default.color),
        width=_parse_length(cfg, "width", section=section, default=default.width, positive=True),
        dash=_parse_dash(cfg.get("dash"), field=f"{section}.dash", default=default.dash),
        length=_parse_length(
            cfg, "length", section=section, default=default.length, positive=True
        ),
        offset=_parse_length(cfg, "offset", section=section, default=default.offset),
    )


def _parse_qr(cfg: dict[str, object]) -> CodedImageSpec:
    plain = (
        "enabled",
        "position",
        "error",
        "color",
        "background_color",
        "border",
        "border_color",
        "module_shape",
        "scale",
    )
    lengths = ("size", "margin", "border_width", "corner_radius")
    _reject_unknown(cfg, "qr", plain, lengths=lengths)
    default = CodedImageSpec()
    position = _parse_choice(
        cfg.get("position"), field="qr.position", choices=ANCHORS, default=default.position
    )
    error = _parse_choice(
        cfg.get("error"), field="qr.error", choices=ERROR_LEVELS, default=default.error
    )
    module_shape = _parse_choice(
        cfg.get("module_shape"),
        field="qr.module_shape",
        choices=MODULE_SHAPES,
        default=default.module_shape,
    )
    return CodedImageSpec(
        enabled=_parse_bool(cfg.get("enabled"), field="qr.enabled", default=default.enabled),
        size=_parse_length(cfg, "size", section="qr", default=default.size, positive=True),
        margin=_parse_length(cfg, "margin", section="qr", default=default.margin),
        position=cast(Literal["top-left", "top-right", "bottom-left", "bottom-right"], position),
        error=error,
        color=_parse_color(cfg.get("color"), field="qr.color", default=default.color),
        background_color=_parse_color(
            cfg.get("background_color"),
            field="qr.background_color",
            default=default.background_color,
        ),
        border=_parse_bool(cfg.get("border"), field="qr.border", default=default.border),
        border_color=_parse_color(
            cfg.get("border_color"), field="qr.border_color", default=default.border_color
        ),
        border_width=_parse_length(cfg, "border_width", section="qr", default=default.border_width),
        corner_radius=_parse_length(
            cfg, "corner_radius", section="qr", default=default.corner_radius
        ),
        module_shape=module_shape,
        scale=_parse_positive_int(cfg.get("scale"), field="qr.scale", default=default.scale),
    )


def _parse_ui_defaults(cfg: dict[str, object]) -> UiDefaults:
    return UiDefaults(
        quiet=_parse_bool(cfg.get("quiet"), field="ui.quiet", default=False),
        no_color=_parse_bool(cfg.get("no_color"), field="ui.no_color", default=False),
    )


def _parse_runtime_defaults(cfg: dict[str, object]) -> RuntimeDefaults:
    return RuntimeDefaults(
        render_jobs=_parse_optional_render_jobs(
            cfg.get("render_jobs"), field="runtime.render_jobs"
        ),
    )


def _load_toml(path: Path) -> dict[str, object]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"invalid TOML in {path}: {exc}") from exc


def _get_dict(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"[{key}] must be a table")
    return value


def _reject_unknown(
    cfg: dict[str, object],
    section: str,
    plain: tuple[str, ...],
    *,
    lengths: tuple[str, ...] = (),
) -> None:
    allowed = set(plain)
    for name in lengths:
        allowed.update({f"{name}_pt", f"{name}_mm"})
    unknown = sorted(key for key in cfg if key not in allowed)
    if unknown:
        raise ConfigurationError(f"unknown key(s) in [{section}]: {', '.join(unknown)}")


def _parse_length(
    cfg: dict[str, object],
    name: str,
    *,
    section: str,
    default: float | None,
    positive: bool = False,
) -> float:
    """Read ``<name>_pt`` or ``<name>_mm`` and return points."""
    pt_key = f"{name}_pt"
    mm_key = f"{name}_mm"
    if pt_key in cfg and mm_key in cfg:
        raise ConfigurationError(
            f"{section}.{pt_key} and {section}.{mm_key} are mutually exclusive"
        )
    for key, scale in ((pt_key, 1.0), (mm_key, MM_TO_PT)):
        if key in cfg:
            field = f"{section}.{key}"
            value = _parse_float(cfg[key], field=field, default=None, positive=positive)
            return cast(float, value) * scale
    return cast(float, default)


def _parse_float(
    value: object,
    *,
    field: str,
    default: float | None,
    positive: bool = False,
) -> float | None:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{field} must be a number")
    number = float(value)
    if positive and number <= 0:
        raise ConfigurationError(f"{field} must be positive")
    if not positive and number < 0:
        raise ConfigurationError(f"{field} must not be negative")
    return number


def _parse_fraction(value: object, *, field: str, default: float) -> float:
    number = cast(float, _parse_float(value, field=field, default=default))
    if number > 1.0:
        raise ConfigurationError(f"{field} must be between 0 and 1")
    return number


def _parse_positive_int(value: object, *, field: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field} must be an integer")
    if value <= 0:
        raise ConfigurationError(f"{field} must be a positive integer")
    return value


def _parse_bool(value: object, *, field: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ConfigurationError(f"{field} must be a boolean")


def _parse_optional_str(value: object, *, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field} must be a string")
    return value.strip() or None


def _parse_choice(value: object, *, field: str, choices: tuple[str, ...], default: str) -> str:
    text = _parse_optional_str(value, field=field)
    if text is None:
        return default
    for choice in choices:
        if text.lower() == choice.lower():
            return choice
    raise ConfigurationError(f"{field} must be one of: {', '.join(choices)}")


def _parse_color(value: object, *, field: str, default: str) -> str:
    text = _parse_optional_str(value, field=field)
    if text is None:
        return default
    try:
        ImageColor.getrgb(text)
    except ValueError as exc:
        raise ConfigurationError(f"{field} is not a valid color: {text}") from exc
    return text


def _parse_dash(
    value: object,
    *,
    field: str,
    default: tuple[float, float],
) -> tuple[float, float]:
    if value is None:
        return default
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigurationError(f"{field} must be a [dash, gap] pair")
    dash = cast(float, _parse_float(value[0], field=field, default=None, positive=True))
    gap = cast(float, _parse_float(value[1], field=field, default=None, positive=True))
    return (dash, gap)


def _parse_contact_tags(value: object, default: tuple[str, str, str]) -> tuple[str, str, str]:
    if value is None:
        return default
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 3
        or not all(isinstance(item, str) for item in value)
    ):
        raise ConfigurationError("layout.contact_tags must be a list of three strings")
    return (value[0], value[1], value[2])


def _parse_optional_render_jobs(value: object, *, field: str) -> int | Literal["auto"] | None:
    if value is None:
        return None
    if isinstance(value, str):
        normalized = value.strip().lower()
        if not normalized:
            return None
        if normalized == "auto":
            return "auto"
        try:
            parsed = int(normalized)
        except ValueError as exc:
            raise ConfigurationError(f"{field} must be 'auto' or a positive integer") from exc
        value = parsed
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{field} must be 'auto' or a positive integer")
    return value
