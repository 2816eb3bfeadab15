"""Resolution of command-line parameters into an install request."""

from __future__ import annotations

import logging

from couchbase_installer.config import InstallerConfig
from couchbase_installer.errors import UsageError
from couchbase_installer.types import ChecksumType, Edition, InstallRequest

logger = logging.getLogger(__name__)


def resolve_request(
    config: InstallerConfig,
    *,
    edition: Edition = Edition.ENTERPRISE,
    version: str | None = None,
    checksum: str | None = None,
    checksum_type: ChecksumType | None = None,
    swappiness: int = 0,
    is_amazon_linux: bool = False,
) -> InstallRequest:
    """Build the install request from user input and defaults.

    A pinned version must come with its checksum and checksum type so that an
    unverified package is never installed. Without a version, the version,
    checksum and checksum type all come from the edition's default table for
    the host class.

    Args:
        config: Installer configuration holding the default tables.
        edition: Product edition.
        version: Pinned version, or None to use the default.
        checksum: Expected digest for a pinned version.
        checksum_type: Digest algorithm for a pinned version.
        swappiness: vm.swappiness value to persist.
        is_amazon_linux: Host class used to pick defaults.

    Returns:
        Validated InstallRequest.

    Raises:
        UsageError: If a pinned version lacks its checksum or checksum type.
    """
    if version is not None:
        if not version.strip():
            raise UsageError("--version requires a non-empty value")
        if not checksum or not checksum.strip() or checksum_type is None:
            raise UsageError(
                "If you specify --version, you must also specify --checksum and --checksum-type."
            )
        return InstallRequest(
            edition=edition,
            version=version.strip(),
            checksum=checksum.strip(),
            checksum_type=checksum_type,
            swappiness=swappiness,
        )

    if checksum or checksum_type is not None:
        logger.warning("Ignoring --checksum/--checksum-type because --version was not specified")

    default = config.defaults_for(edition, is_amazon_linux)
    logger.info(
        "Using default %s version %s (%s)", edition.value, default.version, default.checksum_type.value
    )
    return InstallRequest(
        edition=edition,
        version=default.version,
        checksum=default.checksum,
        checksum_type=default.checksum_type,
        swappiness=swappiness,
    )
