"""Staging of companion scripts used by the runtime component."""

from __future__ import annotations

import logging
from pathlib import Path

from couchbase_installer.config import InstallerConfig
from couchbase_installer.errors import ConfigError
from couchbase_installer.protocols import FileSystem

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


class CompanionStager:
    """Copies companion executables and the shared support directory."""

    def __init__(self, config: InstallerConfig, filesystem: FileSystem) -> None:
        self.config = config
        self.fs = filesystem

    def script_sources(self) -> list[Path]:
        """Get the source paths of the companion scripts."""
        if self.config.companion_dir is None:
            return []
        return [self.config.companion_dir / name for name in self.config.companion_scripts]

    def check_sources(self) -> Path:
        """Assert every companion source is present.

        Returns:
            The support directory to stage.

        Raises:
            ConfigError: If no companion directory is configured or a source
                is missing.
        """
        support = self.config.support_source()
        if self.config.companion_dir is None or support is None:
            raise ConfigError(
                "No companion directory configured; pass --companion-dir or set "
                "companion_dir in the config file"
            )
        for source in [*self.script_sources(), support]:
            if not self.fs.exists(source):
                raise ConfigError(f"Companion artifact not found: {source}")
        return support

    def stage(self) -> list[Path]:
        """Copy every companion into its system location.

        Returns:
            Destination paths, scripts first, then the support directory.

        Raises:
            ConfigError: If a companion source is missing.
            PrivilegedCommandFailure: If a copy fails.
        """
        support = self.check_sources()

        staged: list[Path] = []
        for source in self.script_sources():
            destination = self.config.bin_dir / source.name
            logger.info("Installing %s to %s", source.name, destination)
            self.fs.install_file(source, destination, EXECUTABLE_MODE)
            staged.append(destination)

        target = self.config.support_dir_target
        logger.info("Copying %s to %s", support, target)
        self.fs.replace_tree(support, target)
        staged.append(target)
        return staged
