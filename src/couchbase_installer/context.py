"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
and reducing coupling in the CLI command.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from couchbase_installer.config import InstallerConfig
from couchbase_installer.install import Installer
from couchbase_installer.protocols import CommandExecutor, FileSystem


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for all services used by the CLI.
    Dependencies are typed using Protocol interfaces so that test doubles
    can be injected without inheritance.
    """

    config: InstallerConfig
    runner: CommandExecutor
    filesystem: FileSystem
    installer: Installer


# Builds the context from the configuration the CLI loaded
ContextFactory = Callable[[InstallerConfig], AppContext]


def create_context(config: InstallerConfig | None = None) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.
    For tests, pass a ContextFactory building AppContext with test doubles.

    Args:
        config: Loaded configuration. Defaults to the built-in values.

    Returns:
        Configured AppContext with all dependencies.
    """
    from couchbase_installer.commands import CommandRunner
    from couchbase_installer.filesystem import PrivilegedFileSystem, RealFileSystem

    config = config or InstallerConfig()
    runner = CommandRunner.create()
    filesystem: FileSystem = PrivilegedFileSystem(runner) if runner.escalate else RealFileSystem()
    installer = Installer.create(config=config, runner=runner, filesystem=filesystem)

    return AppContext(
        config=config,
        runner=runner,
        filesystem=filesystem,
        installer=installer,
    )
