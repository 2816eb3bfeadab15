"""Host operating system detection."""

from __future__ import annotations

import logging
from pathlib import Path

from couchbase_installer.types import OsInfo

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")


def parse_os_release(content: str) -> dict[str, str]:
    """Parse os-release content into a mapping.

    Args:
        content: Text in os-release KEY=VALUE format.

    Returns:
        Mapping of keys to unquoted values. Blank lines, comments and
        malformed lines are skipped.
    """
    values: dict[str, str] = {}
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip("\"'")
    return values


def read_os_info(path: Path = OS_RELEASE_PATH) -> OsInfo:
    """Read the host's OS identity.

    Args:
        path: os-release file to read.

    Returns:
        OsInfo for the host. A missing file yields an empty id, which no
        platform matches.
    """
    if not path.exists():
        logger.warning("%s not found; operating system is unknown", path)
        return OsInfo(id="")

    values = parse_os_release(path.read_text())
    info = OsInfo(
        id=values.get("ID", "").lower(),
        version_id=values.get("VERSION_ID", ""),
        name=values.get("NAME", ""),
    )
    logger.debug("Detected operating system: %s", info.describe())
    return info
