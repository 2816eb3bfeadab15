"""Protocol definitions for core abstractions.

This module defines abstract interfaces (Protocols) for the services the
installer pipeline depends on. Designing to interfaces enables:
- Loose coupling between components
- Easy substitution of test doubles
- Clear contracts for implementations

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from couchbase_installer.errors import CommandError


@runtime_checkable
class CommandExecutor(Protocol):
    """Protocol for running external commands."""

    def require(self, tool: str) -> None:
        """Assert that a tool is installed.

        Args:
            tool: Executable name to look up on PATH.

        Raises:
            PrerequisiteMissing: If the tool cannot be found.
        """
        ...

    def run(
        self,
        args: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        privileged: bool = False,
        error: type[CommandError] = ...,
    ) -> subprocess.CompletedProcess[str]:
        """Run a command, raising `error` if it fails.

        Args:
            args: Command and arguments.
            env: Extra environment variables.
            privileged: Run with privilege escalation.
            error: CommandError subclass raised on failure.

        Returns:
            The completed process.
        """
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for system file changes.

    Implementations either operate directly or escalate every write.
    """

    def read_text(self, path: Path) -> str:
        """Read text content from a file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        ...

    def write_text_atomic(self, path: Path, content: str) -> None:
        """Replace a file's content without exposing a partial write.

        Args:
            path: File to replace. Existing permissions are kept.
            content: New file content.
        """
        ...

    def install_file(self, src: Path, dst: Path, mode: int) -> None:
        """Copy a file into place, overwriting, and set its mode.

        Args:
            src: Source file.
            dst: Destination file. Parent directories are created.
            mode: Permission bits for the destination.
        """
        ...

    def replace_tree(self, src: Path, dst: Path) -> None:
        """Copy a directory recursively, replacing any existing copy.

        Args:
            src: Source directory.
            dst: Destination directory.
        """
        ...


@runtime_checkable
class ArtifactDownloader(Protocol):
    """Protocol for fetching a package over the network."""

    def download(self, url: str, dest: Path) -> Path:
        """Download a URL to a local file.

        Args:
            url: Artifact URL.
            dest: Local file to write.

        Returns:
            Path to the downloaded file.

        Raises:
            TransportError: On any transport failure or non-2xx response.
        """
        ...
