"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from couchbase_installer.config import InstallerConfig
from couchbase_installer.filesystem import RealFileSystem

COMPANION_SCRIPTS = ("run-couchbase-server", "couchbase-rally-point")


# ============================================================================
# Host Fixtures
# ============================================================================


@pytest.fixture
def host_root(tmp_path: Path) -> Path:
    """Create a fake root filesystem for system files."""
    root = tmp_path / "root"
    (root / "etc").mkdir(parents=True)
    return root


@pytest.fixture
def companion_dir(tmp_path: Path) -> Path:
    """Create companion scripts and the bash-commons support directory."""
    modules = tmp_path / "modules"
    modules.mkdir()
    for name in COMPANION_SCRIPTS:
        (modules / name).write_text(f"#!/bin/bash\necho {name}\n")

    commons = modules / "bash-commons"
    (commons / "lib").mkdir(parents=True)
    (commons / "lib" / "os.sh").write_text("#!/bin/bash\n")
    (commons / "lib" / "assert.sh").write_text("#!/bin/bash\n")
    return modules


@pytest.fixture
def config(tmp_path: Path, host_root: Path, companion_dir: Path) -> InstallerConfig:
    """Create an InstallerConfig pointing every system path into tmp_path."""
    download_dir = tmp_path / "downloads"
    download_dir.mkdir()
    return InstallerConfig(
        os_release_path=host_root / "etc" / "os-release",
        sysctl_conf_path=host_root / "etc" / "sysctl.conf",
        thp_script_path=host_root / "etc" / "init.d" / "disable-thp",
        companion_dir=companion_dir,
        companion_scripts=COMPANION_SCRIPTS,
        support_dir_source=companion_dir / "bash-commons",
        bin_dir=host_root / "opt" / "couchbase" / "bin",
        support_dir_target=host_root / "opt" / "couchbase-commons",
        download_dir=download_dir,
    )


# ============================================================================
# os-release Fixtures
# ============================================================================


@pytest.fixture
def ubuntu_os_release() -> str:
    """Sample Ubuntu 16.04 os-release content."""
    return """NAME="Ubuntu"
VERSION="16.04.3 LTS (Xenial Xerus)"
ID=ubuntu
ID_LIKE=debian
PRETTY_NAME="Ubuntu 16.04.3 LTS"
VERSION_ID="16.04"
VERSION_CODENAME=xenial
"""


@pytest.fixture
def amazon_os_release() -> str:
    """Sample Amazon Linux os-release content."""
    return """NAME="Amazon Linux AMI"
VERSION="2017.09"
ID="amzn"
ID_LIKE="rhel fedora"
VERSION_ID="2017.09"
PRETTY_NAME="Amazon Linux AMI 2017.09"
"""


@pytest.fixture
def centos_os_release() -> str:
    """Sample CentOS os-release content (unsupported)."""
    return """NAME="CentOS Linux"
VERSION="7 (Core)"
ID="centos"
ID_LIKE="rhel fedora"
VERSION_ID="7"
"""


@pytest.fixture
def ubuntu_host(config: InstallerConfig, ubuntu_os_release: str) -> InstallerConfig:
    """Configure the fake host as Ubuntu."""
    config.os_release_path.write_text(ubuntu_os_release)
    return config


@pytest.fixture
def amazon_host(config: InstallerConfig, amazon_os_release: str) -> InstallerConfig:
    """Configure the fake host as Amazon Linux."""
    config.os_release_path.write_text(amazon_os_release)
    return config


# ============================================================================
# Service Doubles
# ============================================================================


@pytest.fixture
def mock_runner() -> MagicMock:
    """Create a mock CommandRunner.

    Every command succeeds and every required tool is present.
    """
    runner = MagicMock()
    runner.require.return_value = None
    return runner


@pytest.fixture
def filesystem() -> RealFileSystem:
    """Create a direct filesystem operating on tmp_path."""
    return RealFileSystem()
