"""Integration tests for --log-level CLI flag."""

import os
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from typer.testing import CliRunner

from helpers.io import normalize_output
from ppbuild.cli import app


class TestLogLevelCLIFlag(unittest.TestCase):
    """
    Test that --log-level controls how much ppbuild prints.
    """

    def setUp(self):
        self.runner = CliRunner()
        self.tmpdir = TemporaryDirectory()
        self.project_root = Path(self.tmpdir.name).resolve()
        self.env = {
            "NO_COLOR": "1",
            "COLUMNS": "200",
            "XDG_CONFIG_HOME": str(self.project_root / ".config"),
            "XDG_CONFIG_DIRS": str(self.project_root / ".site-config"),
        }
        (self.project_root / "build.ppb").write_text(
            'Task("prepare", run="true")\n'
            'Task("simple", "prepare", run="true")\n'
        )
        self.original_cwd = os.getcwd()
        os.chdir(self.project_root)

    def tearDown(self):
        os.chdir(self.original_cwd)
        self.tmpdir.cleanup()

    def _run(self, *args):
        result = self.runner.invoke(app, list(args), env=self.env)
        return result, normalize_output(result.output)

    def test_log_level_flag_accepts_all_levels(self):
        for level in ["fatal", "error", "warn", "info", "debug", "trace"]:
            with self.subTest(level=level):
                result, output = self._run("--log-level", level, "simple")
                self.assertEqual(result.exit_code, 0, output)

    def test_log_level_is_case_insensitive(self):
        result, output = self._run("-L", "DEBUG", "simple")
        self.assertEqual(result.exit_code, 0, output)

    def test_invalid_log_level(self):
        result, output = self._run("--log-level", "loud", "simple")

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Invalid log level 'loud'", output)

    def test_info_shows_progress(self):
        result, output = self._run("simple")

        self.assertIn("Running: prepare", output)
        self.assertIn("Task 'simple' completed successfully", output)
        self.assertNotIn("Loading build file", output)

    def test_error_level_hides_progress(self):
        result, output = self._run("--log-level", "error", "simple")

        self.assertEqual(result.exit_code, 0, output)
        self.assertNotIn("Running:", output)
        self.assertNotIn("completed successfully", output)

    def test_error_level_still_shows_failures(self):
        (self.project_root / "build.ppb").write_text('Task("broken", run="exit 5")\n')

        result, output = self._run("--log-level", "error", "broken")

        self.assertEqual(result.exit_code, 5)
        self.assertIn("Task 'broken' failed with exit code 5", output)

    def test_debug_shows_build_file_loading(self):
        result, output = self._run("--log-level", "debug", "simple")

        self.assertIn("Loading build file", output)
        self.assertNotIn("depends on", output)

    def test_trace_shows_dependency_traversal(self):
        result, output = self._run("--log-level", "trace", "simple")

        self.assertIn("'simple' depends on 'prepare'", output)
        self.assertIn("Executing: true", output)

    def test_log_level_from_project_config(self):
        (self.project_root / ".ppbuild-config.yml").write_text("log_level: error\n")

        result, output = self._run("simple")

        self.assertEqual(result.exit_code, 0, output)
        self.assertNotIn("Running:", output)

    def test_flag_overrides_project_config(self):
        (self.project_root / ".ppbuild-config.yml").write_text("log_level: error\n")

        result, output = self._run("--log-level", "info", "simple")

        self.assertIn("Running: simple", output)


if __name__ == "__main__":
    unittest.main()
