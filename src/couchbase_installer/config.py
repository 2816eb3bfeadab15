"""Installer configuration.

All constants the pipeline needs live on a single frozen `InstallerConfig`
that is built once at startup and injected into each component. An optional
YAML file may override any field.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from couchbase_installer.errors import ConfigError
from couchbase_installer.types import ChecksumType, Edition

# Packaged data files (boot script template)
ASSETS_DIR = Path(__file__).resolve().parent / "assets"

DEFAULT_BASE_URL = "https://packages.couchbase.com/releases"

# Name of the support directory inside the companion directory
SUPPORT_DIR_NAME = "bash-commons"


class DefaultPackage(BaseModel):
    """A version and how its download is verified.

    Without a pinned `checksum`, the package is checked against the digest
    upstream publishes beside it (`<package URL>.<checksum_type>`).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: str
    checksum_type: ChecksumType
    checksum: str | None = None


class EditionDefaults(BaseModel):
    """Default package per host class.

    Upstream publishes a different package file per OS family, so each edition
    carries one default for Amazon Linux hosts and one for everything else.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    amazon_linux: DefaultPackage
    ubuntu: DefaultPackage

    def select(self, is_amazon_linux: bool) -> DefaultPackage:
        """Pick the default for the given host class."""
        return self.amazon_linux if is_amazon_linux else self.ubuntu


def _enterprise_defaults() -> EditionDefaults:
    package = DefaultPackage(version="5.1.0", checksum_type=ChecksumType.SHA256)
    return EditionDefaults(amazon_linux=package, ubuntu=package)


def _community_defaults() -> EditionDefaults:
    package = DefaultPackage(version="5.0.1", checksum_type=ChecksumType.MD5)
    return EditionDefaults(amazon_linux=package, ubuntu=package)


class InstallerConfig(BaseModel):
    """Every fixed value used while provisioning a node.

    `companion_dir` has no default: it is the checkout holding the runtime
    scripts and must be given with --companion-dir or in the config file.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = DEFAULT_BASE_URL
    enterprise: EditionDefaults = Field(default_factory=_enterprise_defaults)
    community: EditionDefaults = Field(default_factory=_community_defaults)

    required_tools: tuple[str, ...] = ("curl",)
    service_name: str = "couchbase-server"
    os_release_path: Path = Path("/etc/os-release")

    sysctl_conf_path: Path = Path("/etc/sysctl.conf")
    swappiness_key: str = "vm.swappiness"
    thp_template: Path = ASSETS_DIR / "disable-thp"
    thp_script_path: Path = Path("/etc/init.d/disable-thp")

    companion_dir: Path | None = None
    companion_scripts: tuple[str, ...] = ("run-couchbase-server", "couchbase-rally-point")
    bin_dir: Path = Path("/opt/couchbase/bin")
    support_dir_source: Path | None = None
    support_dir_target: Path = Path("/opt/couchbase-commons")

    download_dir: Path | None = None

    def defaults_for(self, edition: Edition, is_amazon_linux: bool) -> DefaultPackage:
        """Get the default package for an edition on a host class.

        Args:
            edition: Product edition.
            is_amazon_linux: True when the host is Amazon Linux.

        Returns:
            The matching DefaultPackage.
        """
        table = self.community if edition == Edition.COMMUNITY else self.enterprise
        return table.select(is_amazon_linux)

    def support_source(self) -> Path | None:
        """Get the support directory to stage, defaulting to the companion checkout's."""
        if self.support_dir_source is not None:
            return self.support_dir_source
        if self.companion_dir is not None:
            return self.companion_dir / SUPPORT_DIR_NAME
        return None


def load_config(path: Path | None = None) -> InstallerConfig:
    """Load configuration, applying overrides from a YAML file.

    Args:
        path: Optional YAML file. Keys map to InstallerConfig fields.

    Returns:
        Validated InstallerConfig.

    Raises:
        ConfigError: If the file is missing, unparsable, or invalid.
    """
    if path is None:
        return InstallerConfig()

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        return InstallerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
