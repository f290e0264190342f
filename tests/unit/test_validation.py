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

from cardsheet.core.errors import ValidationError
from cardsheet.core.models import CardRecord
from cardsheet.core.validation import (
    check_cards,
    is_valid_website,
    validate_card,
    validate_cards,
)
from tests.test_support import FULL_CARD


class TestValidateCard(unittest.TestCase):
    def test_name_only_normalizes_optional_fields(self) -> None:
        record = validate_card({"name": "Ana"})
        self.assertEqual(record, CardRecord(name="Ana"))
        for value in (
            record.title,
            record.company,
            record.professional,
            record.crm_number,
            record.crm_region,
            record.phone,
            record.email,
            record.website,
            record.logo_path,
        ):
            self.assertEqual(value, "")

    def test_null_optional_fields_become_empty(self) -> None:
        record = validate_card({"name": "Ana", "title": None, "company": None})
        self.assertEqual(record.title, "")
        self.assertEqual(record.company, "")

    def test_whitespace_is_trimmed(self) -> None:
        record = validate_card({"name": "  Ana  ", "company": " ACME "})
        self.assertEqual(record.name, "Ana")
        self.assertEqual(record.company, "ACME")

    def test_required_name(self) -> None:
        for raw in ({"name": ""}, {"name": "   "}, {}, {"name": None}):
            with self.subTest(raw=raw):
                with self.assertRaisesRegex(ValidationError, "required field"):
                    validate_card(raw)

    def test_non_object_record(self) -> None:
        with self.assertRaisesRegex(ValidationError, "must be an object"):
            validate_card(["Ana"])

    def test_email(self) -> None:
        with self.assertRaisesRegex(ValidationError, "invalid email"):
            validate_card({"name": "Ana", "email": "not-an-email"})
        self.assertEqual(validate_card({"name": "Ana", "email": "a@b.com"}).email, "a@b.com")

    def test_crm_requires_both_parts(self) -> None:
        with self.assertRaisesRegex(ValidationError, "must be provided together"):
            validate_card({"name": "Ana", "crmNumber": "123"})
        with self.assertRaisesRegex(ValidationError, "must be provided together"):
            validate_card({"name": "Ana", "crmRegion": "SP"})

    def test_crm_formats(self) -> None:
        with self.assertRaisesRegex(ValidationError, "invalid crmNumber"):
            validate_card({"name": "Ana", "crmNumber": "12a", "crmRegion": "SP"})
        with self.assertRaisesRegex(ValidationError, "invalid crmRegion"):
            validate_card({"name": "Ana", "crmNumber": "123", "crmRegion": "sp"})

    def test_crm_accepts_numbers_and_aliases(self) -> None:
        record = validate_card({"name": "Ana", "crm": 123456, "crm_uf": "RJ"})
        self.assertEqual(record.crm_number, "123456")
        self.assertEqual(record.crm_region, "RJ")
        self.assertTrue(record.has_credential)

    def test_conflicting_aliases(self) -> None:
        with self.assertRaisesRegex(ValidationError, "conflicting values for crmNumber"):
            validate_card({"name": "Ana", "crmNumber": "1", "crm": "2", "crmRegion": "SP"})

    def test_non_string_field(self) -> None:
        with self.assertRaisesRegex(ValidationError, "title must be a string"):
            validate_card({"name": "Ana", "title": ["x"]})
        with self.assertRaisesRegex(ValidationError, "phone must be a string"):
            validate_card({"name": "Ana", "phone": True})

    def test_numbers_are_only_accepted_for_crm_number(self) -> None:
        with self.assertRaisesRegex(ValidationError, "name must be a string"):
            validate_card({"name": 42})
        with self.assertRaisesRegex(ValidationError, "phone must be a string"):
            validate_card({"name": "Ana", "phone": 11999999999})
        with self.assertRaisesRegex(ValidationError, "crmRegion must be a string"):
            validate_card({"name": "Ana", "crm": 1, "crmRegion": 12})

    def test_phone(self) -> None:
        for phone in ("(11) 99999-9999", "(11) 3333-4444"):
            with self.subTest(phone=phone):
                self.assertEqual(validate_card({"name": "Ana", "phone": phone}).phone, phone)
        with self.assertRaisesRegex(ValidationError, "invalid phone"):
            validate_card({"name": "Ana", "phone": "11 99999 9999"})

    def test_logo_extension(self) -> None:
        record = validate_card({"name": "Ana", "logo": "assets/Logo.PNG"})
        self.assertEqual(record.logo_path, "assets/Logo.PNG")
        with self.assertRaisesRegex(ValidationError, "invalid logo extension"):
            validate_card({"name": "Ana", "logoPath": "logo.tiff"})

    def test_index_prefixes_message(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_card({"name": ""}, index=2)
        self.assertTrue(str(ctx.exception).startswith("Card 3: "))
        self.assertEqual(ctx.exception.errors[0].index, 3)

    def test_full_record(self) -> None:
        record = validate_card(FULL_CARD)
        self.assertEqual(record.secondary, "Cardiologista\nEcocardiografia")
        self.assertEqual(record.website_url(), "https://clinicacosta.com.br")


class TestWebsite(unittest.TestCase):
    def test_accepts_hosts_with_or_without_scheme(self) -> None:
        for value in ("www.example.com", "https://example.com/path", "http://example.com:8080"):
            with self.subTest(value=value):
                self.assertTrue(is_valid_website(value))

    def test_rejects_malformed(self) -> None:
        malformed = (
            "exa mple.com",
            "ftp://example.com",
            "http://",
            "https://a..b",
            "http://x:99999",
        )
        for value in malformed:
            with self.subTest(value=value):
                self.assertFalse(is_valid_website(value))

    def test_invalid_website_message(self) -> None:
        with self.assertRaisesRegex(ValidationError, "invalid website"):
            validate_card({"name": "Ana", "website": "ftp://example.com"})


class TestValidateCards(unittest.TestCase):
    def test_reports_every_failure_with_index(self) -> None:
        raw = [{"name": ""}, {"name": "Ana"}, {"name": "Bia", "email": "nope"}]
        with self.assertRaises(ValidationError) as ctx:
            validate_cards(raw)
        errors = ctx.exception.errors
        self.assertEqual([error.index for error in errors], [1, 3])
        message = str(ctx.exception)
        self.assertIn("2 invalid card records", message)
        self.assertIn("Card 1: name is a required field", message)
        self.assertIn("Card 3: invalid email: nope", message)

    def test_valid_batch_keeps_order(self) -> None:
        records = validate_cards([{"name": "A"}, {"name": "B"}, {"name": "C"}])
        self.assertEqual([record.name for record in records], ["A", "B", "C"])

    def test_empty_batch(self) -> None:
        self.assertEqual(validate_cards([]), [])

    def test_requires_list(self) -> None:
        with self.assertRaisesRegex(ValidationError, "must be a list"):
            validate_cards({"name": "Ana"})


class TestCheckCards(unittest.TestCase):
    def test_per_record_report(self) -> None:
        checks = check_cards([{"name": "Ana"}, {"name": "Bia", "phone": "123"}, "oops"])
        self.assertEqual([check.ok for check in checks], [True, False, False])
        self.assertEqual([check.index for check in checks], [1, 2, 3])
        self.assertEqual(checks[1].name, "Bia")
        self.assertIn("invalid phone", checks[1].reason)
        self.assertEqual(checks[2].name, "")


if __name__ == "__main__":
    unittest.main()
