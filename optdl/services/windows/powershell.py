"""PowerShell command execution."""
import json
import subprocess
from typing import Any, Dict, List

from optdl.core.errors import CollaboratorError
from optdl.core.logger import get_logger

logger = get_logger(__name__)


def quote(value: str) -> str:
    """Quote value as a PowerShell single-quoted string literal."""
    return "'" + value.replace("'", "''") + "'"


def parse_json_output(output: str) -> List[Dict[str, Any]]:
    """Parse ConvertTo-Json output into a list of objects.

    ConvertTo-Json emits nothing for an empty pipeline, a bare object for a
    single result and an array otherwise.
    """
    text = (output or "").strip()
    if not text:
        return []

    data = json.loads(text)
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    raise ValueError(f"Unexpected JSON payload type: {type(data).__name__}")


class PowerShellRunner:
    """Runs PowerShell scripts and captures their output."""

    def __init__(self, executable: str = "powershell.exe", timeout: int = 60):
        self.executable = executable
        self.timeout = timeout

    def run(self, script: str) -> str:
        """Run script and return stdout.

        Raises:
            CollaboratorError: If PowerShell is missing, times out or exits non-zero
        """
        cmd = [
            self.executable,
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy", "Bypass",
            "-Command", script,
        ]
        logger.debug(f"Running PowerShell: {script.strip()}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise CollaboratorError(
                f"PowerShell executable not found: {self.executable}", command=script
            ) from e
        except subprocess.TimeoutExpired as e:
            raise CollaboratorError(
                f"PowerShell command timed out after {self.timeout}s", command=script
            ) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise CollaboratorError(
                f"PowerShell command failed (exit {result.returncode}): {stderr or result.stdout.strip()}",
                command=script,
                stderr=stderr,
            )

        return result.stdout

    def run_json(self, script: str) -> List[Dict[str, Any]]:
        """Run a script ending in ConvertTo-Json and parse its output."""
        output = self.run(script)
        try:
            return parse_json_output(output)
        except ValueError as e:
            raise CollaboratorError(f"Unparseable PowerShell output: {e}", command=script) from e
