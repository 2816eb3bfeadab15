"""External command execution."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Mapping, Sequence

from couchbase_installer.errors import CommandError, PrerequisiteMissing, PrivilegedCommandFailure

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs external commands and turns failures into typed errors.

    Privileged commands are prefixed with sudo unless the process already
    runs as root. Environment variables are passed through `env` so they
    survive sudo's environment reset.
    """

    def __init__(self, escalate: bool = True) -> None:
        """Initialize the runner.

        Args:
            escalate: Prefix privileged commands with sudo.

        Note:
            Prefer `create()` which decides escalation from the effective uid.
        """
        self.escalate = escalate

    @classmethod
    def create(cls) -> CommandRunner:
        """Create a runner that escalates only when not running as root.

        Returns:
            Configured CommandRunner.
        """
        return cls(escalate=os.geteuid() != 0)

    def which(self, tool: str) -> str | None:
        """Locate a tool on PATH."""
        return shutil.which(tool)

    def require(self, tool: str) -> None:
        """Assert that a tool is installed.

        Raises:
            PrerequisiteMissing: If the tool is not on PATH.
        """
        if self.which(tool) is None:
            raise PrerequisiteMissing(tool)
        logger.debug("Found required tool '%s'", tool)

    def build_argv(
        self,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        privileged: bool = False,
    ) -> list[str]:
        """Build the final argument vector for a command.

        Args:
            args: Command and arguments.
            env: Extra environment variables for the command.
            privileged: Whether the command needs root.

        Returns:
            Argument vector ready for execution.
        """
        argv = list(args)
        if env:
            argv = ["env", *(f"{key}={value}" for key, value in env.items()), *argv]
        if privileged and self.escalate:
            argv = ["sudo", *argv]
        return argv

    def run(
        self,
        args: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        privileged: bool = False,
        error: type[CommandError] = PrivilegedCommandFailure,
    ) -> subprocess.CompletedProcess[str]:
        """Run a command to completion.

        Args:
            args: Command and arguments.
            env: Extra environment variables for the command.
            privileged: Run with privilege escalation.
            error: CommandError subclass raised on failure.

        Returns:
            The completed process with captured output.

        Raises:
            CommandError: Of type `error`, if the command cannot be started
                or exits non-zero.
        """
        argv = self.build_argv(args, env=env, privileged=privileged)
        logger.debug("Executing command: %s", " ".join(argv))

        try:
            result = subprocess.run(argv, capture_output=True, text=True, check=False)
        except OSError as e:
            raise error(argv, 127, str(e)) from e

        if result.stdout:
            logger.debug("stdout: %s", result.stdout.strip())
        if result.stderr:
            logger.debug("stderr: %s", result.stderr.strip())
        if result.returncode != 0:
            raise error(argv, result.returncode, result.stderr or "")
        return result
