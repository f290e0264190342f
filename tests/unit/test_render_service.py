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

from cardsheet.core.errors import ConfigurationError, ValidationError
from cardsheet.render.service import (
    SAMPLE_CARDS,
    CardSheetService,
    render_cards_to_pdf,
    sheet_info,
)
from cardsheet.render.spec import DEFAULT_TEMPLATE, GridSpec
from tests.test_support import is_valid_pdf, pdf_page_count, pdf_text, temp_directory


class TestPrepare(unittest.TestCase):
    def test_copies_repeat_each_card(self) -> None:
        service = CardSheetService(template=DEFAULT_TEMPLATE)
        records = service.prepare([{"name": "A"}, {"name": "B"}], copies=3)
        self.assertEqual([record.name for record in records], ["A", "A", "A", "B", "B", "B"])

    def test_invalid_copies(self) -> None:
        service = CardSheetService(template=DEFAULT_TEMPLATE)
        for copies in (0, -1, True):
            with self.subTest(copies=copies):
                with self.assertRaises(ValueError):
                    service.prepare([{"name": "A"}], copies=copies)

    def test_empty_list_rejected(self) -> None:
        service = CardSheetService(template=DEFAULT_TEMPLATE)
        with self.assertRaisesRegex(ValidationError, "no cards to render"):
            service.prepare([])

    def test_samples_are_valid(self) -> None:
        service = CardSheetService(template=DEFAULT_TEMPLATE)
        records = service.prepare(list(SAMPLE_CARDS))
        self.assertEqual(len(records), len(SAMPLE_CARDS))
        self.assertTrue(any(record.has_credential for record in records))


class TestRenderCardsToPdf(unittest.TestCase):
    def test_end_to_end_page_count(self) -> None:
        cards = [{"name": f"Person {idx + 1}", "company": "ACME"} for idx in range(23)]
        with temp_directory() as tmp:
            output = tmp / "cards.pdf"
            result = render_cards_to_pdf(cards, output, DEFAULT_TEMPLATE.without_qr(), jobs=1)
            data = output.read_bytes()
        self.assertTrue(is_valid_pdf(data))
        self.assertEqual(result.page_count, 3)
        self.assertEqual(result.card_count, 23)
        self.assertEqual(pdf_page_count(data), 3)
        text = pdf_text(data)
        self.assertIn("Person 1", text)
        self.assertIn("Person 23", text)

    def test_samples_render_with_qr(self) -> None:
        with temp_directory() as tmp:
            output = tmp / "sample.pdf"
            result = render_cards_to_pdf(list(SAMPLE_CARDS), output, DEFAULT_TEMPLATE, copies=4)
            data = output.read_bytes()
        self.assertEqual(result.card_count, 12)
        self.assertEqual(pdf_page_count(data), 2)
        self.assertEqual(result.warnings, ())

    def test_invalid_batch_writes_nothing(self) -> None:
        with temp_directory() as tmp:
            output = tmp / "cards.pdf"
            with self.assertRaises(ValidationError):
                render_cards_to_pdf([{"name": "A"}, {"name": ""}], output, DEFAULT_TEMPLATE)
            self.assertFalse(output.exists())

    def test_degenerate_grid_rejected_before_rendering(self) -> None:
        template = replace(DEFAULT_TEMPLATE, grid=GridSpec(columns=3, rows=5))
        with temp_directory() as tmp:
            output = tmp / "cards.pdf"
            with self.assertRaises(ConfigurationError):
                render_cards_to_pdf([{"name": "A"}], output, template)
            self.assertFalse(output.exists())


class TestSheetInfo(unittest.TestCase):
    def test_default_sheet(self) -> None:
        info = sheet_info(DEFAULT_TEMPLATE, 21)
        self.assertEqual(info.capacity, 10)
        self.assertEqual((info.columns, info.rows), (2, 5))
        self.assertEqual(info.page_count, 3)
        page_w, page_h = info.page_size_mm
        self.assertAlmostEqual(page_w, 210.0, places=1)
        self.assertAlmostEqual(page_h, 297.0, places=1)
        card_w, card_h = info.card_size_mm
        self.assertAlmostEqual(card_w, 85.0, delta=0.1)
        self.assertAlmostEqual(card_h, 55.0, delta=0.1)

    def test_without_card_count(self) -> None:
        info = sheet_info(DEFAULT_TEMPLATE)
        self.assertIsNone(info.card_count)
        self.assertIsNone(info.page_count)


if __name__ == "__main__":
    unittest.main()
