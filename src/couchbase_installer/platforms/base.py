"""Base platform implementation with shared behavior.

Every supported OS installs Couchbase Server the same way: refresh the package
index, install dependencies, install the package without starting it, and
turn off its autostart registration. Platforms vary only in the commands and
package file names they use.

Pattern: Template Method - base class runs the commands, subclasses
provide them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from couchbase_installer.protocols import CommandExecutor
from couchbase_installer.types import Edition, OsInfo

logger = logging.getLogger(__name__)

# Honored by the Couchbase Server package scripts: install but do not start
NO_START_ENV = {"INSTALL_DONT_START_SERVER": "1"}


class BasePlatform(ABC):
    """Base class for platform implementations.

    Subclasses declare the commands for their package manager and service
    manager; this class runs them with privilege escalation.
    """

    name: str
    display_name: str

    @abstractmethod
    def detect(self, os_info: OsInfo) -> bool:
        """Check whether the host runs this platform."""
        ...

    @abstractmethod
    def dependencies(self) -> list[str]:
        """Get the packages Couchbase Server needs on this platform."""
        ...

    @abstractmethod
    def dependency_commands(self) -> list[list[str]]:
        """Get the commands that refresh the package index and install dependencies."""
        ...

    @abstractmethod
    def artifact_name(self, edition: Edition, version: str) -> str:
        """Get the upstream package file name for an edition and version."""
        ...

    @abstractmethod
    def install_command(self, path: Path) -> list[str]:
        """Get the command installing a local package file."""
        ...

    @abstractmethod
    def disable_autostart_command(self, service: str) -> list[str]:
        """Get the command removing a service's boot-time autostart."""
        ...

    @abstractmethod
    def register_boot_script_command(self, script_name: str) -> list[str]:
        """Get the command enabling an init script at boot."""
        ...

    def artifact_url(self, base_url: str, edition: Edition, version: str) -> str:
        """Build the download URL for an edition and version.

        Args:
            base_url: Release repository root.
            edition: Product edition.
            version: Exact version.

        Returns:
            Fully qualified artifact URL.
        """
        return f"{base_url.rstrip('/')}/{version}/{self.artifact_name(edition, version)}"

    def install_dependencies(self, runner: CommandExecutor) -> None:
        """Refresh the package index and install dependencies."""
        logger.info("Installing dependencies on %s: %s", self.display_name, ", ".join(self.dependencies()))
        for command in self.dependency_commands():
            runner.run(command, privileged=True)

    def install_package(self, runner: CommandExecutor, path: Path) -> None:
        """Install a package file without starting the service."""
        logger.info("Installing %s", path.name)
        runner.run(self.install_command(path), env=NO_START_ENV, privileged=True)

    def disable_autostart(self, runner: CommandExecutor, service: str) -> None:
        """Stop the service manager from starting the service at boot."""
        logger.info("Disabling autostart for %s", service)
        runner.run(self.disable_autostart_command(service), privileged=True)

    def register_boot_script(self, runner: CommandExecutor, script_name: str) -> None:
        """Register an init script to run at boot."""
        runner.run(self.register_boot_script_command(script_name), privileged=True)
