"""Ubuntu platform implementation."""

from __future__ import annotations

from pathlib import Path

from couchbase_installer.types import Edition, OsInfo

from .base import BasePlatform


class UbuntuPlatform(BasePlatform):
    """Ubuntu handler using apt-get, dpkg and systemd."""

    name = "ubuntu"
    display_name = "Ubuntu"
    package_release = "ubuntu16.04"
    package_arch = "amd64"

    def detect(self, os_info: OsInfo) -> bool:
        """Check whether the host runs Ubuntu."""
        return os_info.id == "ubuntu"

    def dependencies(self) -> list[str]:
        """Get the packages Couchbase Server needs on Ubuntu."""
        return ["libssl1.0.0", "python-httplib2", "jq"]

    def dependency_commands(self) -> list[list[str]]:
        """Get the apt-get commands for the package index and dependencies."""
        return [
            ["apt-get", "update", "-y"],
            ["apt-get", "install", "-y", *self.dependencies()],
        ]

    def artifact_name(self, edition: Edition, version: str) -> str:
        """Get the .deb file name.

        Returns:
            e.g. couchbase-server-enterprise_5.1.0-ubuntu16.04_amd64.deb
        """
        return (
            f"couchbase-server-{edition.value}_{version}-"
            f"{self.package_release}_{self.package_arch}.deb"
        )

    def install_command(self, path: Path) -> list[str]:
        """Get the dpkg install command."""
        return ["dpkg", "-i", str(path)]

    def disable_autostart_command(self, service: str) -> list[str]:
        """Get the systemctl disable command."""
        return ["systemctl", "disable", service]

    def register_boot_script_command(self, script_name: str) -> list[str]:
        """Get the update-rc.d registration command."""
        return ["update-rc.d", script_name, "defaults"]
