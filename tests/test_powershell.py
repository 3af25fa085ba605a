"""Tests for PowerShell execution helpers."""
import subprocess
import unittest
from unittest.mock import MagicMock, patch

from optdl.core.errors import CollaboratorError
from optdl.services.windows.powershell import PowerShellRunner, parse_json_output, quote


class TestParseJsonOutput(unittest.TestCase):
    """ConvertTo-Json output shapes."""

    def test_empty_output(self):
        self.assertEqual(parse_json_output(""), [])
        self.assertEqual(parse_json_output("  \r\n"), [])
        self.assertEqual(parse_json_output("null"), [])

    def test_single_object(self):
        self.assertEqual(parse_json_output('{"Drive":"D:"}'), [{"Drive": "D:"}])

    def test_array(self):
        self.assertEqual(
            parse_json_output('[{"Drive":"D:"},{"Drive":"E:"}]'),
            [{"Drive": "D:"}, {"Drive": "E:"}],
        )

    def test_scalar_is_rejected(self):
        with self.assertRaises(ValueError):
            parse_json_output('"D:"')


class TestPowerShellRunner(unittest.TestCase):
    """Subprocess handling."""

    def setUp(self):
        self.runner = PowerShellRunner(executable="pwsh", timeout=7)

    @patch("optdl.services.windows.powershell.subprocess.run")
    def test_run_passes_script_and_timeout(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout='{"a":1}', stderr="")

        self.assertEqual(self.runner.run_json("Get-Thing"), [{"a": 1}])

        args, kwargs = mock_run.call_args
        cmd = args[0]
        self.assertEqual(cmd[0], "pwsh")
        self.assertIn("-NoProfile", cmd)
        self.assertEqual(cmd[-2:], ["-Command", "Get-Thing"])
        self.assertEqual(kwargs["timeout"], 7)

    @patch("optdl.services.windows.powershell.subprocess.run")
    def test_nonzero_exit_raises(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="Access denied")

        with self.assertRaises(CollaboratorError) as ctx:
            self.runner.run("Set-Thing")

        self.assertIn("Access denied", str(ctx.exception))
        self.assertEqual(ctx.exception.stderr, "Access denied")
        self.assertEqual(ctx.exception.command, "Set-Thing")

    @patch("optdl.services.windows.powershell.subprocess.run")
    def test_timeout_raises(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="pwsh", timeout=7)

        with self.assertRaises(CollaboratorError) as ctx:
            self.runner.run("Get-Thing")

        self.assertIn("timed out after 7s", str(ctx.exception))

    @patch("optdl.services.windows.powershell.subprocess.run")
    def test_missing_executable_raises(self, mock_run):
        mock_run.side_effect = FileNotFoundError("pwsh")

        with self.assertRaises(CollaboratorError):
            self.runner.run("Get-Thing")

    @patch("optdl.services.windows.powershell.subprocess.run")
    def test_bad_json_raises(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="not json", stderr="")

        with self.assertRaises(CollaboratorError):
            self.runner.run_json("Get-Thing")


def test_quote_doubles_single_quotes():
    assert quote("it's") == "'it''s'"
