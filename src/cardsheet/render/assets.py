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

import concurrent.futures
import os
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from ..core.errors import AssetWarning
from ..core.models import CardRecord
from ..qr.codec import coded_image_png
from .images import composite_over, open_image, png_bytes, pt_to_px, resize_contain, resize_cover
from .spec import PageTemplate

RENDER_JOBS_ENV = "CARDSHEET_RENDER_JOBS"
_DEFAULT_WORKERS_CAP = 8

LAYER_BACKGROUND = "background-image"
LAYER_QR = "qr"


@dataclass(frozen=True)
class LoadedImage:
    data: bytes
    source: str


@dataclass(frozen=True)
class CardAssets:
    background: LoadedImage | None = None
    coded_image: LoadedImage | None = None
    warnings: tuple[AssetWarning, ...] = ()


class AssetLoader:
    """Loads per-card images and reports failures as warnings.

    Results are cached per source, so a card repeated across a sheet is
    decoded once. Safe to call from worker threads.
    """

    def __init__(
        self,
        template: PageTemplate,
        *,
        jobs: int | str | None = None,
        base_dir: str | Path | None = None,
    ) -> None:
        self._template = template
        self._jobs = jobs
        self._base_dir = Path(base_dir) if base_dir is not None else None
        self._lock = threading.Lock()
        self._backgrounds: dict[str, LoadedImage | AssetWarning] = {}
        self._coded_images: dict[str, LoadedImage | AssetWarning] = {}

    def background(self, path: str) -> LoadedImage | AssetWarning:
        with self._lock:
            cached = self._backgrounds.get(path)
        if cached is not None:
            return cached
        result = self._load_background(path)
        with self._lock:
            self._backgrounds.setdefault(path, result)
        return result

    def coded_image(self, url: str) -> LoadedImage | AssetWarning:
        with self._lock:
            cached = self._coded_images.get(url)
        if cached is not None:
            return cached
        try:
            result: LoadedImage | AssetWarning = LoadedImage(
                data=coded_image_png(url, self._template.qr),
                source=url,
            )
        except ValueError as exc:
            result = AssetWarning(layer=LAYER_QR, source=url, reason=str(exc))
        with self._lock:
            self._coded_images.setdefault(url, result)
        return result

    def resolve(self, record: CardRecord) -> CardAssets:
        background: LoadedImage | None = None
        coded: LoadedImage | None = None
        warnings: list[AssetWarning] = []
        if record.logo_path:
            loaded = self.background(record.logo_path)
            if isinstance(loaded, AssetWarning):
                warnings.append(loaded)
            else:
                background = loaded
        if self._template.qr.enabled and record.website:
            image = self.coded_image(record.website_url())
            if isinstance(image, AssetWarning):
                warnings.append(image)
            else:
                coded = image
        return CardAssets(background=background, coded_image=coded, warnings=tuple(warnings))

    def prefetch(self, records: Sequence[CardRecord]) -> list[CardAssets]:
        """Resolve assets for many cards, in input order."""
        if not records:
            return []
        workers = resolve_render_workers(len(records), jobs=self._jobs)
        if workers <= 1:
            return [self.resolve(record) for record in records]
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.resolve, records))

    def _load_background(self, path: str) -> LoadedImage | AssetWarning:
        source = self._resolve_path(path)
        spec = self._template.background
        card = self._template.card
        width_px = pt_to_px(card.width, spec.dpi)
        height_px = pt_to_px(card.height, spec.dpi)
        background_color = self._template.colors.image_base
        try:
            image = open_image(source)
            if spec.fit == "contain":
                fitted = resize_contain(image, width_px, height_px, fill=background_color)
            else:
                fitted = resize_cover(image, width_px, height_px)
            blended = composite_over(fitted, background_color, spec.opacity)
            data = png_bytes(blended)
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            return AssetWarning(layer=LAYER_BACKGROUND, source=path, reason=str(exc))
        return LoadedImage(data=data, source=str(source))

    def _resolve_path(self, path: str) -> Path:
        candidate = Path(path).expanduser()
        if candidate.is_absolute() or self._base_dir is None:
            return candidate
        return self._base_dir / candidate


def resolve_render_workers(task_count: int, *, jobs: int | str | None = None) -> int:
    raw = jobs if jobs is not None else os.environ.get(RENDER_JOBS_ENV, "")
    requested: int | None = None
    if isinstance(raw, int):
        if raw <= 0:
            raise ValueError("render jobs must be a positive integer or 'auto'")
        requested = raw
    else:
        text = str(raw).strip().lower()
        if text and text != "auto":
            try:
                parsed = int(text)
            except ValueError:
                raise ValueError(
                    f"{RENDER_JOBS_ENV} must be a positive integer or 'auto'"
                ) from None
            if parsed <= 0:
                raise ValueError(f"{RENDER_JOBS_ENV} must be a positive integer or 'auto'")
            requested = parsed

    cpu = os.cpu_count() or 1
    if requested is None:
        requested = min(cpu, _DEFAULT_WORKERS_CAP)
    return max(1, min(requested, task_count))
