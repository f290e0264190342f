#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..core.errors import AssetWarning

Align = Literal["L", "C", "R"]


@dataclass(frozen=True)
class CardRect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def inset(self, amount: float) -> CardRect:
        return CardRect(
            x=self.x + amount,
            y=self.y + amount,
            width=max(0.0, self.width - 2 * amount),
            height=max(0.0, self.height - 2 * amount),
        )

    def offset(self, dx: float, dy: float) -> CardRect:
        return CardRect(x=self.x + dx, y=self.y + dy, width=self.width, height=self.height)

    def overlaps(self, other: CardRect) -> bool:
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def contains(self, other: CardRect, *, tolerance: float = 1e-6) -> bool:
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )


@dataclass(frozen=True)
class FillRect:
    rect: CardRect
    color: str
    radius: float = 0.0
    opacity: float = 1.0
    layer: str = "background"


@dataclass(frozen=True)
class FillGradient:
    rect: CardRect
    top_color: str
    bottom_color: str
    radius: float = 0.0
    layer: str = "background"


@dataclass(frozen=True)
class StrokeRect:
    rect: CardRect
    color: str
    width: float
    radius: float = 0.0
    dash: tuple[float, float] | None = None
    layer: str = "border"


@dataclass(frozen=True)
class DrawLine:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float
    dash: tuple[float, float] | None = None
    layer: str = "rule"


@dataclass(frozen=True)
class DrawText:
    lines: tuple[str, ...]
    x: float
    y: float
    width: float
    font_family: str
    font_size: float
    color: str
    line_height: float
    style: str = ""
    align: Align = "L"
    layer: str = "text"

    @property
    def height(self) -> float:
        return len(self.lines) * self.line_height


@dataclass(frozen=True)
class DrawImage:
    data: bytes
    rect: CardRect
    source: str = ""
    layer: str = "background-image"


@dataclass(frozen=True)
class DrawCodedImage:
    data: bytes
    rect: CardRect
    url: str
    layer: str = "qr"


DrawOp = FillRect | FillGradient | StrokeRect | DrawLine | DrawText | DrawImage | DrawCodedImage


@dataclass(frozen=True)
class Section:
    top: float
    bottom: float


@dataclass(frozen=True)
class CardComposition:
    ops: tuple[DrawOp, ...]
    warnings: tuple[AssetWarning, ...] = ()
    sections: dict[str, Section] = field(default_factory=dict)
    overflow: bool = False

    def ops_for(self, layer: str) -> list[DrawOp]:
        return [op for op in self.ops if op.layer == layer]
