"""Shared data types for the Couchbase installer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["ChecksumType", "Edition", "InstallRequest", "OsInfo"]


class Edition(str, Enum):
    """Couchbase Server product variant."""

    ENTERPRISE = "enterprise"
    COMMUNITY = "community"


class ChecksumType(str, Enum):
    """Digest algorithm used to verify a downloaded package."""

    SHA256 = "sha256"
    MD5 = "md5"


@dataclass(frozen=True)
class InstallRequest:
    """Fully resolved parameters for one provisioning pass.

    Attributes:
        edition: Package variant to install.
        version: Exact Couchbase Server version, e.g. "5.1.0".
        checksum: Expected hex digest of the package file, or None to use the
            digest published next to the package.
        checksum_type: Algorithm the checksum was computed with.
        swappiness: Value to persist for vm.swappiness.
    """

    edition: Edition
    version: str
    checksum: str | None
    checksum_type: ChecksumType
    swappiness: int = 0

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.version:
            raise ValueError("version cannot be empty")
        if self.checksum is not None and not self.checksum.strip():
            raise ValueError("checksum cannot be empty")
        if self.swappiness < 0:
            raise ValueError("swappiness cannot be negative")


@dataclass(frozen=True)
class OsInfo:
    """Operating system identity read from os-release."""

    id: str
    version_id: str = ""
    name: str = ""

    def describe(self) -> str:
        """Human-readable description for log and error messages."""
        label = self.name or self.id or "unknown"
        return f"{label} {self.version_id}".strip()
