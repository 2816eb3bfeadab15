"""Platform-specific implementations."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from couchbase_installer.errors import UnsupportedPlatform
from couchbase_installer.protocols import CommandExecutor
from couchbase_installer.types import Edition, OsInfo

from .amazon_linux import AmazonLinuxPlatform
from .base import NO_START_ENV, BasePlatform
from .ubuntu import UbuntuPlatform


@runtime_checkable
class Platform(Protocol):
    """Protocol defining the interface for platform implementations.

    All platform handlers must implement this interface to support
    the Open-Closed Principle: new platforms can be added without
    modifying the dispatcher.
    """

    name: str
    display_name: str

    def detect(self, os_info: OsInfo) -> bool:
        """Check whether the host runs this platform.

        Args:
            os_info: Host identity from os-release.

        Returns:
            True if this platform handles the host.
        """
        raise NotImplementedError

    def dependencies(self) -> list[str]:
        """Get the packages Couchbase Server needs on this platform."""
        raise NotImplementedError

    def artifact_name(self, edition: Edition, version: str) -> str:
        """Get the upstream package file name.

        Args:
            edition: Product edition.
            version: Exact version.

        Returns:
            Package file name as published upstream.
        """
        raise NotImplementedError

    def artifact_url(self, base_url: str, edition: Edition, version: str) -> str:
        """Build the download URL for an edition and version."""
        raise NotImplementedError

    def install_command(self, path: Path) -> list[str]:
        """Get the command installing a local package file."""
        raise NotImplementedError

    def install_dependencies(self, runner: CommandExecutor) -> None:
        """Refresh the package index and install dependencies."""
        raise NotImplementedError

    def install_package(self, runner: CommandExecutor, path: Path) -> None:
        """Install a package file without starting the service."""
        raise NotImplementedError

    def disable_autostart(self, runner: CommandExecutor, service: str) -> None:
        """Stop the service manager from starting the service at boot."""
        raise NotImplementedError

    def register_boot_script(self, runner: CommandExecutor, script_name: str) -> None:
        """Register an init script to run at boot."""
        raise NotImplementedError


__all__ = [
    "NO_START_ENV",
    "AmazonLinuxPlatform",
    "BasePlatform",
    "Platform",
    "UbuntuPlatform",
    "detect_platform",
    "get_platform",
    "is_amazon_linux",
]


PLATFORMS: dict[str, type[BasePlatform]] = {
    "ubuntu": UbuntuPlatform,
    "amazon-linux": AmazonLinuxPlatform,
}


def get_platform(name: str) -> Platform:
    """Get a platform instance by name.

    Args:
        name: Platform name (ubuntu, amazon-linux).

    Returns:
        Platform instance.

    Raises:
        ValueError: If platform is not supported.
    """
    if name not in PLATFORMS:
        raise ValueError(f"Unknown platform: {name}. Supported: {list(PLATFORMS.keys())}")
    return PLATFORMS[name]()


def detect_platform(os_info: OsInfo) -> Platform:
    """Find the platform handling the host.

    Args:
        os_info: Host identity from os-release.

    Returns:
        The first registered platform that matches.

    Raises:
        UnsupportedPlatform: If no registered platform matches.
    """
    for platform_class in PLATFORMS.values():
        platform = platform_class()
        if platform.detect(os_info):
            return platform
    raise UnsupportedPlatform(
        os_info.describe(), [cls.display_name for cls in PLATFORMS.values()]
    )


def is_amazon_linux(os_info: OsInfo) -> bool:
    """Check the host class used to pick default packages.

    Args:
        os_info: Host identity from os-release.

    Returns:
        True on Amazon Linux, False on anything else.
    """
    return AmazonLinuxPlatform().detect(os_info)
