"""Filesystem abstraction for system file changes.

Two implementations satisfy the FileSystem protocol structurally:
RealFileSystem performs operations directly (running as root, or in tests
against a temporary directory), PrivilegedFileSystem routes every write
through the command runner so each step is escalated on its own.
"""

from __future__ import annotations

import os
import shutil
import stat
import tempfile
from pathlib import Path

from couchbase_installer.commands import CommandRunner
from couchbase_installer.errors import PrivilegedCommandFailure

DEFAULT_FILE_MODE = 0o644


def _current_mode(path: Path) -> int:
    """Get permission bits of an existing file, or the default for new files."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    return DEFAULT_FILE_MODE


class RealFileSystem:
    """Direct filesystem implementation.

    Wraps standard library Path, os and shutil operations. OS errors are
    reported as PrivilegedCommandFailure naming the equivalent command.
    """

    def read_text(self, path: Path) -> str:
        """Read text content from a file."""
        return path.read_text()

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        return path.exists()

    def write_text_atomic(self, path: Path, content: str) -> None:
        """Replace a file's content via a temp file and rename."""
        mode = _current_mode(path)
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", dir=path.parent, prefix=f".{path.name}.", delete=False
            ) as tmp:
                tmp.write(content)
                tmp_name = tmp.name
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PrivilegedCommandFailure(["write", str(path)], 1, str(e)) from e

    def install_file(self, src: Path, dst: Path, mode: int) -> None:
        """Copy a file into place, overwriting, and set its mode."""
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dst)
            os.chmod(dst, mode)
        except OSError as e:
            raise PrivilegedCommandFailure(["install", str(src), str(dst)], 1, str(e)) from e

    def replace_tree(self, src: Path, dst: Path) -> None:
        """Copy a directory tree, replacing any existing copy."""
        try:
            if dst.exists():
                shutil.rmtree(dst)
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(src, dst)
        except OSError as e:
            raise PrivilegedCommandFailure(["cp", "-R", str(src), str(dst)], 1, str(e)) from e


class PrivilegedFileSystem:
    """Filesystem implementation that escalates each write with sudo.

    Reads are done directly; system configuration files are world-readable.
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize with the runner used for privileged commands."""
        self.runner = runner

    def read_text(self, path: Path) -> str:
        """Read text content from a file."""
        return path.read_text()

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        return path.exists()

    def write_text_atomic(self, path: Path, content: str) -> None:
        """Replace a root-owned file's content atomically.

        The content is staged in a scratch file, installed next to the target
        and renamed over it, so readers never see a partial file.
        """
        mode = _current_mode(path)
        staged = path.with_name(f".{path.name}.couchbase-installer.tmp")
        fd, scratch = tempfile.mkstemp(prefix="couchbase-installer-")
        try:
            with os.fdopen(fd, "w") as fh:
                fh.write(content)
            try:
                self.runner.run(
                    ["install", "-m", f"{mode:o}", scratch, str(staged)], privileged=True
                )
                self.runner.run(["mv", "-f", str(staged), str(path)], privileged=True)
            except PrivilegedCommandFailure:
                self.runner.run(["rm", "-f", str(staged)], privileged=True)
                raise
        finally:
            os.unlink(scratch)

    def install_file(self, src: Path, dst: Path, mode: int) -> None:
        """Copy a file into place, creating parents, and set its mode."""
        self.runner.run(["install", "-D", "-m", f"{mode:o}", str(src), str(dst)], privileged=True)

    def replace_tree(self, src: Path, dst: Path) -> None:
        """Copy a directory tree, replacing any existing copy."""
        self.runner.run(["rm", "-rf", str(dst)], privileged=True)
        self.runner.run(["mkdir", "-p", str(dst.parent)], privileged=True)
        self.runner.run(["cp", "-R", str(src), str(dst)], privileged=True)
