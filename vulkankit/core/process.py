"""
Shell execution capability.

Installers are launched through a CommandRunner so tests can substitute
a fake and inspect the issued commands.
"""

import logging
import shlex
import subprocess
from typing import Optional, Sequence

from vulkankit.core.exceptions import InstallerProcessError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run external commands and report failures as InstallerProcessError."""

    def __init__(self, timeout: Optional[int] = 3600):
        """
        Initialize runner.

        Args:
            timeout: Per-command timeout in seconds (None waits forever)
        """
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        """
        Run a command and wait for it to finish.

        Args:
            args: Program and arguments

        Returns:
            Completed process with captured text output

        Raises:
            InstallerProcessError: If the command cannot be launched, times
                out or exits with a non-zero status
        """
        command = shlex.join(str(a) for a in args)
        logger.debug(f"Command: {command}")

        try:
            result = subprocess.run(
                [str(a) for a in args],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise InstallerProcessError(command, output=str(e)) from e

        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
            raise InstallerProcessError(command, result.returncode, output)

        return result
