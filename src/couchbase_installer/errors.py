"""Error types raised by the installer pipeline.

Every failure the operator can hit derives from `InstallerError`. Components
raise; the CLI layer is the only place that turns these into exit codes.
"""

from __future__ import annotations

from collections.abc import Sequence


class InstallerError(Exception):
    """Base class for all installer failures."""

    pass


class UsageError(InstallerError):
    """Invalid, missing, or inconsistent command-line parameters."""

    pass


class ConfigError(InstallerError):
    """Configuration file could not be read or failed validation."""

    pass


class PrerequisiteMissing(InstallerError):
    """A tool the installer depends on is not installed."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"The binary '{tool}' is required by this script but is not installed or in the system's PATH.")


class UnsupportedPlatform(InstallerError):
    """The host operating system is not one of the supported platforms."""

    def __init__(self, description: str, supported: Sequence[str]) -> None:
        self.description = description
        self.supported = list(supported)
        super().__init__(
            f"This script only supports {', '.join(self.supported)}. Detected: {description}"
        )


class IntegrityError(InstallerError):
    """A downloaded artifact did not match its expected checksum."""

    def __init__(self, path: str, expected: str, actual: str, checksum_type: str) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        self.checksum_type = checksum_type
        super().__init__(
            f"{checksum_type} checksum of {path} is {actual}, expected {expected}"
        )


class CommandError(InstallerError):
    """An external command exited with a non-zero status.

    Attributes:
        command: The argument vector that was executed.
        returncode: Exit status of the command.
        stderr: Captured standard error, stripped.
    """

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = f"Command '{' '.join(self.command)}' exited with status {returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class TransportError(CommandError):
    """Downloading an artifact failed."""

    pass


class PrivilegedCommandFailure(CommandError):
    """A package manager, service, or system file operation failed."""

    pass


class ChecksumUnavailable(InstallerError):
    """The digest published next to an artifact could not be read."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Could not read the published checksum at {url}: {reason}")
