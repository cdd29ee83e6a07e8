"""
Tests for the command line interface.
"""

import os
import tempfile
import unittest
from unittest.mock import patch

from curl_bench.cli import SpeedTestCLI


class TestSpeedTestCLI(unittest.TestCase):
    """Test argument handling and exit statuses."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        env = patch.dict(os.environ, {"LOG_SERVER_ENDPOINT": ""}, clear=True)
        env.start()
        self.addCleanup(env.stop)
        self.cli = SpeedTestCLI()

    def write_targets(self, text):
        path = os.path.join(self.tmp.name, "urls.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_missing_target_list(self):
        status = self.cli.run(["run", "--targets", os.path.join(self.tmp.name, "missing.txt")])
        self.assertEqual(status, 1)

    def test_empty_target_list(self):
        log_dir = os.path.join(self.tmp.name, "curl_logs")
        targets = self.write_targets("\n\n")

        status = self.cli.run(["run", "--targets", targets, "--log-dir", log_dir])

        self.assertEqual(status, 0)
        self.assertTrue(os.path.isdir(log_dir))

    def test_failed_targets_still_exit_zero(self):
        """Per-target failures are logged, not reflected in the exit status."""
        log_dir = os.path.join(self.tmp.name, "curl_logs")
        targets = self.write_targets("https://example.invalid/a.bin\n")

        with patch.dict(os.environ, {"CURL_BINARY": "/nonexistent/bin/curl"}):
            status = self.cli.run(["run", "--targets", targets, "--log-dir", log_dir])

        self.assertEqual(status, 0)
        self.assertEqual(os.listdir(log_dir), [])

    def test_log_directory_failure(self):
        blocker = os.path.join(self.tmp.name, "blocker")
        open(blocker, "w").close()
        targets = self.write_targets("https://example.com/a.bin\n")

        status = self.cli.run(["run", "--targets", targets, "--log-dir", os.path.join(blocker, "logs")])

        self.assertEqual(status, 1)

    def test_default_command_is_run(self):
        with patch.object(SpeedTestCLI, "run_speed_test") as run_speed_test, \
             patch("curl_bench.cli.uvloop.run", return_value=0) as loop_run:
            status = self.cli.run([])

        self.assertEqual(status, 0)
        loop_run.assert_called_once()
        settings = run_speed_test.call_args[0][0]
        self.assertEqual(settings.targets_file, "urlsToTest.txt")

    def test_overrides(self):
        args = self.cli.parser.parse_args(
            ["run", "--targets", "u.txt", "--log-dir", "logs", "--summary-dir", "results",
             "--prometheus-port", "9100"]
        )
        settings = self.cli._settings_for(args)

        self.assertEqual(settings.targets_file, "u.txt")
        self.assertEqual(settings.log_directory, "logs")
        self.assertEqual(settings.summary_directory, "results")
        self.assertEqual(settings.prometheus_port, 9100)

    def test_verify_without_storage(self):
        """verify fails when object storage is not configured."""
        self.assertEqual(self.cli.run(["verify", "--key", "a.log"]), 1)


if __name__ == '__main__':
    unittest.main()
