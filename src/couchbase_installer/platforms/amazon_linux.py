"""Amazon Linux platform implementation."""

from __future__ import annotations

from pathlib import Path

from couchbase_installer.types import Edition, OsInfo

from .base import BasePlatform


class AmazonLinuxPlatform(BasePlatform):
    """Amazon Linux handler using yum, rpm and chkconfig.

    Upstream does not publish Amazon Linux packages; the CentOS 6 build is
    the one that runs there.
    """

    name = "amazon-linux"
    display_name = "Amazon Linux"
    os_id = "amzn"
    package_release = "centos6"
    package_arch = "x86_64"

    def detect(self, os_info: OsInfo) -> bool:
        """Check whether the host runs Amazon Linux."""
        return os_info.id == self.os_id

    def dependencies(self) -> list[str]:
        """Get the packages Couchbase Server needs on Amazon Linux."""
        return ["pkgconfig", "openssl", "jq"]

    def dependency_commands(self) -> list[list[str]]:
        """Get the yum commands for the package index and dependencies."""
        return [
            ["yum", "update", "-y"],
            ["yum", "install", "-y", *self.dependencies()],
        ]

    def artifact_name(self, edition: Edition, version: str) -> str:
        """Get the .rpm file name.

        Returns:
            e.g. couchbase-server-enterprise-5.1.0-centos6.x86_64.rpm
        """
        return (
            f"couchbase-server-{edition.value}-{version}-"
            f"{self.package_release}.{self.package_arch}.rpm"
        )

    def install_command(self, path: Path) -> list[str]:
        """Get the rpm install command."""
        return ["rpm", "-i", str(path)]

    def disable_autostart_command(self, service: str) -> list[str]:
        """Get the chkconfig off command."""
        return ["chkconfig", service, "off"]

    def register_boot_script_command(self, script_name: str) -> list[str]:
        """Get the chkconfig registration command."""
        return ["chkconfig", "--add", script_name]
