"""OS tuning recommended for Couchbase Server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from couchbase_installer.config import InstallerConfig
from couchbase_installer.protocols import CommandExecutor, FileSystem
from couchbase_installer.textpatch import key_pattern, replace_or_append_line

if TYPE_CHECKING:
    from couchbase_installer.platforms import Platform

logger = logging.getLogger(__name__)

BOOT_SCRIPT_MODE = 0o755


class SystemTuner:
    """Applies kernel and memory settings.

    Both actions are idempotent and independent of each other.
    """

    def __init__(
        self,
        config: InstallerConfig,
        filesystem: FileSystem,
        runner: CommandExecutor,
    ) -> None:
        """Initialize tuner with required dependencies.

        Args:
            config: Installer configuration (paths and keys).
            filesystem: Filesystem abstraction for system files.
            runner: Command runner for boot registration.
        """
        self.config = config
        self.fs = filesystem
        self.runner = runner

    def update_swappiness(self, value: int) -> bool:
        """Persist vm.swappiness in the kernel parameter config file.

        An existing setting is replaced in place, otherwise one is appended.
        Repeated runs never produce a second matching line.

        Args:
            value: Swappiness value.

        Returns:
            True if the file changed, False if it already held the value.
        """
        path = self.config.sysctl_conf_path
        key = self.config.swappiness_key
        current = self.fs.read_text(path) if self.fs.exists(path) else ""
        updated = replace_or_append_line(current, key_pattern(key), f"{key} = {value}")

        if updated == current:
            logger.info("%s already sets %s = %s", path, key, value)
            return False

        logger.info("Setting %s = %s in %s", key, value, path)
        self.fs.write_text_atomic(path, updated)
        return True

    def disable_transparent_huge_pages(self, platform: Platform) -> None:
        """Install and register the boot script that disables THP.

        Any previous copy of the script is overwritten.

        Args:
            platform: Platform used to register the script at boot.
        """
        destination = self.config.thp_script_path
        logger.info("Installing %s to disable transparent huge pages", destination)
        self.fs.install_file(self.config.thp_template, destination, BOOT_SCRIPT_MODE)
        platform.register_boot_script(self.runner, destination.name)
