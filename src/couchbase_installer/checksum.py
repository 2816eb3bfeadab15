"""Package integrity verification."""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path

from couchbase_installer.errors import IntegrityError
from couchbase_installer.types import ChecksumType

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

_HEX = re.compile(r"[0-9a-fA-F]+")


def compute_checksum(path: Path, checksum_type: ChecksumType) -> str:
    """Get the hex digest of a file's content.

    Args:
        path: File to hash.
        checksum_type: Digest algorithm.

    Returns:
        Lowercase hex digest.
    """
    hasher = hashlib.new(checksum_type.value)
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def verify_checksum(path: Path, expected: str, checksum_type: ChecksumType) -> None:
    """Check a file against its expected digest.

    The comparison ignores case and surrounding whitespace.

    Args:
        path: Downloaded artifact.
        expected: Published hex digest.
        checksum_type: Algorithm the digest was computed with.

    Raises:
        IntegrityError: If the digests differ.
    """
    actual = compute_checksum(path, checksum_type)
    if actual.lower() != expected.strip().lower():
        raise IntegrityError(str(path), expected, actual, checksum_type.value)
    logger.info("Verified %s checksum of %s", checksum_type.value, path.name)


def parse_published_checksum(content: str, checksum_type: ChecksumType) -> str | None:
    """Extract the digest from a published checksum file.

    Accepts a bare digest or `sha256sum`/`md5sum` output ("<digest>  <file>").

    Args:
        content: Text of the checksum file.
        checksum_type: Algorithm the file is expected to hold.

    Returns:
        Lowercase hex digest, or None if the file holds no digest of the
        expected length.
    """
    fields = content.split()
    if not fields:
        return None
    digest = fields[0]
    if len(digest) != hashlib.new(checksum_type.value).digest_size * 2 or not _HEX.fullmatch(digest):
        return None
    return digest.lower()
