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

import unittest
from dataclasses import replace

from cardsheet.core.models import CardRecord
from cardsheet.core.validation import validate_card
from cardsheet.render.assets import AssetLoader, CardAssets, LoadedImage
from cardsheet.render.compose import (
    SECTION_CONTACT,
    SECTION_CREDENTIAL,
    SECTION_NAME,
    SECTION_SECONDARY,
    compose_card,
    crop_mark_segments,
)
from cardsheet.render.geometry import compute_grid
from cardsheet.render.spec import DEFAULT_TEMPLATE, CropMarkSpec, EffectsSpec
from cardsheet.render.types import (
    CardRect,
    DrawCodedImage,
    DrawImage,
    DrawLine,
    DrawText,
    FillGradient,
)
from tests.test_support import FULL_CARD, temp_directory, write_image

RECT = CardRect(x=28.35, y=28.35, width=241.0, height=156.0)
LAYER_ORDER = (
    "shadow",
    "background",
    "background-image",
    "rule",
    "name",
    "secondary",
    "credential",
    "contact",
    "qr",
    "border",
    "crop",
)


def _compose(record: CardRecord, template=DEFAULT_TEMPLATE, assets: CardAssets | None = None):
    return compose_card(RECT, record, template, assets=assets or CardAssets())


def _compose_loaded(record: CardRecord, template=DEFAULT_TEMPLATE):
    return compose_card(RECT, record, template, loader=AssetLoader(template))


def _touches(segment: CardRect, rect: CardRect) -> bool:
    return (
        segment.x <= rect.right
        and segment.right >= rect.x
        and segment.y <= rect.bottom
        and segment.bottom >= rect.y
    )


def _outline_radii(composition) -> list[float]:
    layers = ("shadow", "background", "border")
    return [op.radius for op in composition.ops if op.layer in layers and hasattr(op, "radius")]


def _texts(composition, layer: str) -> list[str]:
    ops = composition.ops_for(layer)
    return [line for op in ops if isinstance(op, DrawText) for line in op.lines]


class TestTextFlow(unittest.TestCase):
    def test_name_starts_at_top_padding(self) -> None:
        composition = _compose(CardRecord(name="Ana"))
        padding = DEFAULT_TEMPLATE.layout.padding
        self.assertAlmostEqual(composition.sections[SECTION_NAME].top, RECT.y + padding)
        self.assertEqual(list(composition.sections), [SECTION_NAME])

    def test_missing_chip_collapses(self) -> None:
        layout = DEFAULT_TEMPLATE.layout
        record = CardRecord(name="Ana", title="Engineer", phone="(11) 99999-9999")
        composition = _compose(record)
        sections = composition.sections
        self.assertNotIn(SECTION_CREDENTIAL, sections)
        self.assertEqual(composition.ops_for(SECTION_CREDENTIAL), [])
        self.assertAlmostEqual(
            sections[SECTION_SECONDARY].top,
            sections[SECTION_NAME].bottom + layout.line_spacing,
        )
        self.assertAlmostEqual(
            sections[SECTION_CONTACT].top,
            sections[SECTION_SECONDARY].bottom + layout.section_spacing,
        )

        with_company = _compose(replace(record, company="ACME"))
        chip = with_company.sections[SECTION_CREDENTIAL]
        self.assertAlmostEqual(chip.top, sections[SECTION_CONTACT].top)
        self.assertAlmostEqual(
            with_company.sections[SECTION_CONTACT].top,
            chip.bottom + layout.section_spacing,
        )

    def test_contact_follows_name_without_secondary(self) -> None:
        composition = _compose(CardRecord(name="Ana", email="ana@example.com"))
        sections = composition.sections
        self.assertAlmostEqual(
            sections[SECTION_CONTACT].top,
            sections[SECTION_NAME].bottom + DEFAULT_TEMPLATE.layout.section_spacing,
        )

    def test_professional_wins_over_title(self) -> None:
        record = CardRecord(name="Ana", title="Manager", professional="Cardiologista")
        composition = _compose(record)
        self.assertEqual(_texts(composition, SECTION_SECONDARY), ["Cardiologista"])

    def test_credential_wins_over_company(self) -> None:
        record = CardRecord(name="Ana", company="ACME", crm_number="123456", crm_region="SP")
        composition = _compose(record)
        self.assertEqual(_texts(composition, SECTION_CREDENTIAL), ["CRM: 123456/SP"])
        for layer in LAYER_ORDER:
            self.assertNotIn("ACME", _texts(composition, layer))

    def test_company_chip(self) -> None:
        composition = _compose(CardRecord(name="Ana", company="ACME"))
        self.assertEqual(_texts(composition, SECTION_CREDENTIAL), ["ACME"])
        colors = DEFAULT_TEMPLATE.colors
        chip_fill = composition.ops_for(SECTION_CREDENTIAL)[0]
        self.assertEqual(chip_fill.color, colors.chip_light)

    def test_contact_lines_are_tagged(self) -> None:
        record = CardRecord(name="Ana", phone="(11) 99999-9999", email="a@b.com", website="ab.com")
        composition = _compose(record, DEFAULT_TEMPLATE.without_qr())
        self.assertEqual(
            _texts(composition, SECTION_CONTACT),
            ["T: (11) 99999-9999", "E: a@b.com", "W: ab.com"],
        )

    def test_overflow_drops_lines_inside_card(self) -> None:
        professional = "\n".join(f"Line {idx}" for idx in range(40))
        composition = _compose(CardRecord(name="Ana", professional=professional))
        self.assertTrue(composition.overflow)
        content_bottom = RECT.bottom - DEFAULT_TEMPLATE.layout.padding
        for op in composition.ops:
            if isinstance(op, DrawText):
                last_top = op.y + (len(op.lines) - 1) * op.line_height
                self.assertLessEqual(last_top + op.font_size * 1.2, content_bottom + 1e-6)

    def test_long_name_is_clamped(self) -> None:
        composition = _compose(CardRecord(name="Maximiliano " * 12))
        lines = _texts(composition, SECTION_NAME)
        self.assertEqual(len(lines), DEFAULT_TEMPLATE.layout.name_max_lines)
        self.assertTrue(lines[-1].endswith("..."))


class TestLayers(unittest.TestCase):
    def test_layers_are_emitted_back_to_front(self) -> None:
        record = validate_card(FULL_CARD)
        composition = _compose_loaded(record)
        ranks = [LAYER_ORDER.index(op.layer) for op in composition.ops]
        self.assertEqual(ranks, sorted(ranks))
        self.assertEqual(composition.ops[0].layer, "shadow")
        self.assertEqual(composition.ops[-1].layer, "crop")

    def test_ops_stay_inside_card_except_decorations(self) -> None:
        record = validate_card(FULL_CARD)
        composition = _compose_loaded(record)
        for op in composition.ops:
            if op.layer in ("shadow", "crop"):
                continue
            rect = getattr(op, "rect", None)
            if rect is not None:
                self.assertTrue(RECT.contains(rect, tolerance=1e-6), op)

    def test_crop_marks(self) -> None:
        composition = _compose(CardRecord(name="Ana"))
        marks = composition.ops_for("crop")
        # the 1.3pt row gap below the first card leaves no room for its bottom marks
        self.assertEqual(len(marks), 6)
        for mark in marks:
            self.assertIsInstance(mark, DrawLine)
            self.assertEqual(mark.dash, DEFAULT_TEMPLATE.crop_marks.dash)

        disabled = _compose(CardRecord(name="Ana"), DEFAULT_TEMPLATE.without_crop_marks())
        self.assertEqual(disabled.ops_for("crop"), [])

    def test_crop_mark_segments_start_outside_corners(self) -> None:
        rect = CardRect(10.0, 10.0, 100.0, 50.0)
        segments = crop_mark_segments(rect, 8.0, 2.0)
        self.assertEqual(len(segments), 8)
        self.assertEqual(segments[0], (8.0, 10.0, 0.0, 10.0))
        self.assertEqual(segments[1], (10.0, 8.0, 10.0, 0.0))
        self.assertEqual(segments[-1], (110.0, 62.0, 110.0, 70.0))

    def test_crop_mark_segments_respect_reach(self) -> None:
        rect = CardRect(10.0, 10.0, 100.0, 50.0)
        segments = crop_mark_segments(rect, 8.0, 2.0, reach=(20.0, 5.0, 1.0, 20.0))
        self.assertEqual(len(segments), 6)
        self.assertIn((10.0, 8.0, 10.0, 5.0), segments)
        self.assertNotIn((112.0, 10.0, 120.0, 10.0), segments)
        self.assertIn((110.0, 62.0, 110.0, 70.0), segments)

    def test_crop_marks_stay_off_neighbouring_cards(self) -> None:
        rects = compute_grid(DEFAULT_TEMPLATE)
        for index, rect in enumerate(rects):
            composition = compose_card(rect, CardRecord(name="Ana"), DEFAULT_TEMPLATE)
            marks = composition.ops_for("crop")
            self.assertGreater(len(marks), 0)
            for mark in marks:
                mark_box = CardRect(
                    min(mark.x1, mark.x2),
                    min(mark.y1, mark.y2),
                    abs(mark.x2 - mark.x1),
                    abs(mark.y2 - mark.y1),
                )
                for other_index, other in enumerate(rects):
                    if other_index == index:
                        continue
                    with self.subTest(card=index, other=other_index):
                        self.assertFalse(_touches(mark_box, other), mark)

    def test_effects_can_be_disabled(self) -> None:
        effects = EffectsSpec(shadow=False, gradient=False, border=False, top_rule=False)
        template = replace(
            DEFAULT_TEMPLATE,
            effects=effects,
            crop_marks=CropMarkSpec(enabled=False),
        )
        composition = _compose(CardRecord(name="Ana"), template)
        layers = [op.layer for op in composition.ops]
        self.assertEqual(layers, ["background", "name"])

    def test_gradient_when_no_background_image(self) -> None:
        composition = _compose(CardRecord(name="Ana"))
        self.assertTrue(any(isinstance(op, FillGradient) for op in composition.ops))


class TestAssetsInComposition(unittest.TestCase):
    def test_missing_logo_yields_warning_and_no_image(self) -> None:
        record = CardRecord(name="Ana", logo_path="does-not-exist.png")
        composition = _compose_loaded(record)
        self.assertEqual(len(composition.warnings), 1)
        self.assertEqual(composition.warnings[0].layer, "background-image")
        self.assertFalse(any(isinstance(op, DrawImage) for op in composition.ops))
        self.assertEqual(_texts(composition, SECTION_NAME), ["Ana"])

    def test_background_image_switches_text_palette(self) -> None:
        with temp_directory() as tmp:
            write_image(tmp / "logo.png")
            loader = AssetLoader(DEFAULT_TEMPLATE, base_dir=tmp)
            record = CardRecord(name="Ana", logo_path="logo.png")
            composition = compose_card(RECT, record, DEFAULT_TEMPLATE, loader=loader)
        images = [op for op in composition.ops if isinstance(op, DrawImage)]
        self.assertEqual(len(images), 1)
        self.assertEqual(images[0].rect, RECT)
        self.assertFalse(any(isinstance(op, FillGradient) for op in composition.ops))
        name_op = composition.ops_for(SECTION_NAME)[0]
        self.assertEqual(name_op.color, DEFAULT_TEMPLATE.colors.text_primary)

    def test_background_image_squares_the_card_outline(self) -> None:
        self.assertTrue(DEFAULT_TEMPLATE.effects.rounded_corners)
        plain = _compose(CardRecord(name="Ana"))
        self.assertTrue(all(radius > 0 for radius in _outline_radii(plain)))
        assets = CardAssets(background=LoadedImage(data=b"image", source="logo.png"))
        composition = _compose(CardRecord(name="Ana"), assets=assets)
        radii = _outline_radii(composition)
        self.assertGreaterEqual(len(radii), 2)
        self.assertEqual(set(radii), {0.0})

    def test_coded_image_keeps_clear_of_text(self) -> None:
        record = validate_card(FULL_CARD)
        composition = _compose_loaded(record)
        coded = [op for op in composition.ops if isinstance(op, DrawCodedImage)]
        self.assertEqual(len(coded), 1)
        box = coded[0].rect
        self.assertEqual(coded[0].url, "https://clinicacosta.com.br")
        self.assertAlmostEqual(box.right, RECT.right - DEFAULT_TEMPLATE.layout.padding)
        self.assertAlmostEqual(box.bottom, RECT.bottom - DEFAULT_TEMPLATE.layout.padding)
        for op in composition.ops:
            if not isinstance(op, DrawText):
                continue
            if op.y < box.bottom and op.y + op.height > box.y:
                self.assertLessEqual(op.x + op.width, box.x + 1e-6, op.lines)

    def test_no_coded_image_without_website_or_when_disabled(self) -> None:
        composition = _compose(CardRecord(name="Ana"))
        self.assertEqual(composition.ops_for("qr"), [])
        record = validate_card(FULL_CARD)
        template = DEFAULT_TEMPLATE.without_qr()
        disabled = _compose_loaded(record, template)
        self.assertEqual(disabled.ops_for("qr"), [])


if __name__ == "__main__":
    unittest.main()
