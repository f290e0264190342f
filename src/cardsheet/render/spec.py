#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal

MM_TO_PT = 72.0 / 25.4

Color = str
SpacingPolicy = Literal["distribute", "fixed"]
Anchor = Literal["top-left", "top-right", "bottom-left", "bottom-right"]
ImageFit = Literal["cover", "contain"]

ANCHORS: tuple[Anchor, ...] = ("top-left", "top-right", "bottom-left", "bottom-right")
ERROR_LEVELS = ("L", "M", "Q", "H")


def mm_to_pt(value: float) -> float:
    return value * MM_TO_PT


def pt_to_mm(value: float) -> float:
    return value / MM_TO_PT


@dataclass(frozen=True)
class PageSpec:
    width: float = 595.28
    height: float = 841.89


@dataclass(frozen=True)
class CardSpec:
    width: float = 241.0
    height: float = 156.0


@dataclass(frozen=True)
class MarginSpec:
    top: float = 28.3465
    left: float = 28.3465
    right: float = 28.3465
    bottom: float = 28.3465

    @classmethod
    def uniform(cls, value: float) -> MarginSpec:
        return cls(top=value, left=value, right=value, bottom=value)


@dataclass(frozen=True)
class GridSpec:
    columns: int = 2
    rows: int = 5
    spacing: SpacingPolicy = "distribute"
    gap_x: float = 0.0
    gap_y: float = 0.0

    @property
    def capacity(self) -> int:
        return self.columns * self.rows


@dataclass(frozen=True)
class FontSpec:
    family: str = "Helvetica"
    name: float = 16.0
    secondary: float = 7.0
    credential: float = 10.0
    contact: float = 9.0


@dataclass(frozen=True)
class PaletteSpec:
    primary: Color = "#0f172a"
    secondary: Color = "#1e293b"
    accent: Color = "#3b82f6"
    highlight: Color = "#f59e0b"
    medical: Color = "#1e40af"
    background: Color = "#ffffff"
    card_background: Color = "#f8fafc"
    border: Color = "#e2e8f0"
    contact: Color = "#334155"
    text_primary: Color = "#ffffff"
    text_secondary: Color = "#f8fafc"
    text_muted: Color = "#cbd5e1"
    chip_highlight: Color = "#fef3c7"
    chip_light: Color = "#dbeafe"
    image_base: Color = "#0f172a"
    gradient_top: Color = "#f8fafc"
    gradient_bottom: Color = "#f1f5f9"
    shadow: Color = "#000000"


@dataclass(frozen=True)
class CardLayoutSpec:
    padding: float = 12.0
    line_spacing: float = 2.0
    section_spacing: float = 6.0
    line_height_ratio: float = 1.2
    corner_radius: float = 8.0
    shadow_offset: float = 2.0
    shadow_opacity: float = 0.08
    name_max_lines: int = 2
    chip_padding: float = 3.0
    rule_width: float = 1.5
    contact_tags: tuple[str, str, str] = ("T:", "E:", "W:")
    credential_label: str = "CRM"


@dataclass(frozen=True)
class EffectsSpec:
    shadow: bool = True
    gradient: bool = True
    border: bool = True
    rounded_corners: bool = True
    top_rule: bool = True


@dataclass(frozen=True)
class BackgroundSpec:
    fit: ImageFit = "cover"
    opacity: float = 0.45
    dpi: int = 150


@dataclass(frozen=True)
class CropMarkSpec:
    enabled: bool = True
    color: Color = "#d1d5db"
    width: float = 0.3
    dash: tuple[float, float] = (3.0, 3.0)
    length: float = 8.0
    offset: float = 2.0


@dataclass(frozen=True)
class CodedImageSpec:
    enabled: bool = True
    size: float = 50.0
    margin: float = 8.0
    position: Anchor = "bottom-right"
    error: str = "H"
    color: Color = "#0f172a"
    background_color: Color = "#ffffff"
    border: bool = True
    border_color: Color = "#e2e8f0"
    border_width: float = 1.0
    corner_radius: float = 6.0
    module_shape: str = "square"
    scale: int = 16


@dataclass(frozen=True)
class PageTemplate:
    """Every layout and style constant of one rendering run.

    Built once, shared read-only; derive variants with ``replace`` or the
    ``with_*`` helpers below.
    """

    page: PageSpec = field(default_factory=PageSpec)
    card: CardSpec = field(default_factory=CardSpec)
    margins: MarginSpec = field(default_factory=MarginSpec)
    grid: GridSpec = field(default_factory=GridSpec)
    fonts: FontSpec = field(default_factory=FontSpec)
    colors: PaletteSpec = field(default_factory=PaletteSpec)
    layout: CardLayoutSpec = field(default_factory=CardLayoutSpec)
    effects: EffectsSpec = field(default_factory=EffectsSpec)
    background: BackgroundSpec = field(default_factory=BackgroundSpec)
    crop_marks: CropMarkSpec = field(default_factory=CropMarkSpec)
    qr: CodedImageSpec = field(default_factory=CodedImageSpec)

    @property
    def capacity(self) -> int:
        return self.grid.capacity

    def with_margin(self, margin: float) -> PageTemplate:
        return replace(self, margins=MarginSpec.uniform(margin))

    def with_spacing(self, gap: float) -> PageTemplate:
        return replace(self, grid=replace(self.grid, spacing="fixed", gap_x=gap, gap_y=gap))

    def without_crop_marks(self) -> PageTemplate:
        return replace(self, crop_marks=replace(self.crop_marks, enabled=False))

    def without_qr(self) -> PageTemplate:
        return replace(self, qr=replace(self.qr, enabled=False))


DEFAULT_TEMPLATE = PageTemplate()
