"""Artifact download over HTTPS."""

from __future__ import annotations

import logging
from pathlib import Path

from couchbase_installer.commands import CommandRunner
from couchbase_installer.errors import TransportError

logger = logging.getLogger(__name__)


class CurlDownloader:
    """Downloads artifacts with curl.

    curl follows redirects and fails on any non-2xx response, so a failed
    request never leaves a partial file that looks like a success.
    """

    tool = "curl"

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize with the runner used to invoke curl."""
        self.runner = runner

    def download(self, url: str, dest: Path) -> Path:
        """Download a URL to a local file.

        Args:
            url: Artifact URL.
            dest: Local file to write.

        Returns:
            Path to the downloaded file.

        Raises:
            TransportError: If curl fails for any reason.
        """
        logger.info("Downloading %s", url)
        self.runner.run(
            [
                self.tool,
                "--location",
                "--fail",
                "--silent",
                "--show-error",
                "--output",
                str(dest),
                url,
            ],
            error=TransportError,
        )
        return dest
