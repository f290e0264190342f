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

import io
import sys
import unittest
from unittest import mock

from rich.console import Console
from rich.panel import Panel

from cardsheet.cli import ui as ui_module
from cardsheet.cli.ui.state import THEME, UIContext, create_default_context, get_context, isatty


def _context() -> UIContext:
    return UIContext(
        theme=THEME,
        console=Console(file=io.StringIO(), theme=THEME),
        console_err=Console(file=io.StringIO(), theme=THEME),
    )


class TestIsatty(unittest.TestCase):
    def test_stream_isatty_passthrough(self) -> None:
        for expected in (True, False):
            with self.subTest(expected=expected):
                stream = mock.MagicMock()
                stream.isatty.return_value = expected
                self.assertEqual(isatty(stream, fallback=sys.stdout), expected)

    def test_stream_isatty_errors_return_false(self) -> None:
        for side_effect in (OSError("not available"), ValueError("closed"), AttributeError("x")):
            with self.subTest(side_effect=type(side_effect).__name__):
                stream = mock.MagicMock()
                stream.isatty.side_effect = side_effect
                self.assertFalse(isatty(stream, fallback=sys.stdout))

    def test_none_stream_uses_fallback_isatty(self) -> None:
        fallback = mock.MagicMock()
        fallback.isatty.return_value = True
        self.assertTrue(isatty(None, fallback=fallback))
        self.assertFalse(isatty(None, fallback=object()))

    def test_stringio_is_not_tty(self) -> None:
        self.assertFalse(isatty(io.StringIO(), fallback=sys.stdout))


class TestContextState(unittest.TestCase):
    def test_create_default_context(self) -> None:
        context = create_default_context()
        self.assertEqual(context.theme, THEME)
        self.assertIsNotNone(context.console)
        self.assertTrue(context.console_err.stderr)

    def test_get_context_returns_singleton_instance(self) -> None:
        self.assertIs(get_context(), get_context())
        self.assertIs(ui_module.console, get_context().console)


class TestUiHelpers(unittest.TestCase):
    def test_configure_ui_toggles_color_on_both_consoles(self) -> None:
        context = _context()
        ui_module.configure_ui(no_color=True, context=context)
        self.assertTrue(context.console.no_color)
        self.assertTrue(context.console_err.no_color)
        ui_module.configure_ui(no_color=False, context=context)
        self.assertFalse(context.console.no_color)

    def test_progress_quiet_yields_none(self) -> None:
        with ui_module.progress(quiet=True, context=_context()) as progress_bar:
            self.assertIsNone(progress_bar)

    def test_progress_tracks_tasks(self) -> None:
        with ui_module.progress(quiet=False, context=_context()) as progress_bar:
            self.assertIsNotNone(progress_bar)
            task_id = progress_bar.add_task("Rendering pages...", total=3)
            progress_bar.update(task_id, completed=2)
            self.assertEqual(progress_bar.tasks[0].completed, 2)

    def test_kv_table_and_panel(self) -> None:
        table = ui_module.build_kv_table([("Pages", "2"), ("Cards", 12)], title="Result")
        self.assertEqual(table.row_count, 2)
        self.assertEqual(table.title, "Result")
        boxed = ui_module.panel("Sheet", table)
        self.assertIsInstance(boxed, Panel)
        self.assertEqual(boxed.border_style, "panel")


if __name__ == "__main__":
    unittest.main()
