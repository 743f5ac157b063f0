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

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sealmail.cli.startup import run_startup


class TestCliStartup(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        patcher = mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": self.tmpdir.name})
        patcher.start()
        self.addCleanup(patcher.stop)
        self.user_config = Path(self.tmpdir.name) / "sealmail" / "config.toml"

    def test_init_config_exits(self) -> None:
        with mock.patch("sealmail.cli.startup.console") as console:
            should_exit = run_startup(quiet=False, no_color=True, debug=False, init_config=True)
        self.assertTrue(should_exit)
        self.assertTrue(self.user_config.exists())
        console.print.assert_called_once()

    def test_first_run_initializes_quietly(self) -> None:
        with mock.patch("sealmail.cli.startup.console") as console:
            should_exit = run_startup(quiet=True, no_color=False, debug=False, init_config=False)
        self.assertFalse(should_exit)
        self.assertTrue(self.user_config.exists())
        console.print.assert_not_called()

    def test_debug_installs_tracebacks_and_logging(self) -> None:
        with (
            mock.patch("sealmail.cli.startup.install_rich_traceback") as install,
            mock.patch("sealmail.cli.startup.configure_logging") as configure_logging,
            mock.patch("sealmail.cli.startup.console"),
        ):
            run_startup(quiet=True, no_color=False, debug=True, init_config=False)
        install.assert_called_once_with(show_locals=True)
        configure_logging.assert_called_once_with(debug=True)


if __name__ == "__main__":
    unittest.main()
