"""Tests for filesystem abstraction."""

from __future__ import annotations

import stat
from pathlib import Path
from unittest.mock import MagicMock, call

import pytest

from couchbase_installer.errors import PrivilegedCommandFailure
from couchbase_installer.filesystem import PrivilegedFileSystem, RealFileSystem
from couchbase_installer.protocols import FileSystem


class TestRealFileSystem:
    """Tests for RealFileSystem implementation."""

    def test_satisfies_protocol(self) -> None:
        """Test RealFileSystem satisfies the FileSystem protocol."""
        assert isinstance(RealFileSystem(), FileSystem)

    def test_read_text(self, tmp_path: Path) -> None:
        """Test reading text content from a file."""
        fs = RealFileSystem()
        test_file = tmp_path / "test.txt"
        test_file.write_text("Hello, World!")

        assert fs.read_text(test_file) == "Hello, World!"

    def test_read_text_not_found(self, tmp_path: Path) -> None:
        """Test reading a non-existent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            RealFileSystem().read_text(tmp_path / "missing.txt")

    def test_exists(self, tmp_path: Path) -> None:
        """Test exists for present and absent paths."""
        fs = RealFileSystem()
        present = tmp_path / "exists.txt"
        present.touch()

        assert fs.exists(present) is True
        assert fs.exists(tmp_path / "missing.txt") is False

    def test_write_text_atomic_new_file(self, tmp_path: Path) -> None:
        """Test a new file is created with the default mode."""
        target = tmp_path / "etc" / "sysctl.conf"

        RealFileSystem().write_text_atomic(target, "vm.swappiness = 0\n")

        assert target.read_text() == "vm.swappiness = 0\n"
        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    def test_write_text_atomic_preserves_mode(self, tmp_path: Path) -> None:
        """Test replacing a file keeps its permissions."""
        target = tmp_path / "sysctl.conf"
        target.write_text("old\n")
        target.chmod(0o640)

        RealFileSystem().write_text_atomic(target, "new\n")

        assert target.read_text() == "new\n"
        assert stat.S_IMODE(target.stat().st_mode) == 0o640

    def test_write_text_atomic_leaves_no_temp_files(self, tmp_path: Path) -> None:
        """Test no scratch files remain next to the target."""
        target = tmp_path / "sysctl.conf"

        RealFileSystem().write_text_atomic(target, "x\n")

        assert [p.name for p in tmp_path.iterdir()] == ["sysctl.conf"]

    def test_install_file(self, tmp_path: Path) -> None:
        """Test a file is copied into a new directory with the mode set."""
        src = tmp_path / "script"
        src.write_text("#!/bin/bash\n")
        dst = tmp_path / "opt" / "bin" / "script"

        RealFileSystem().install_file(src, dst, 0o755)

        assert dst.read_text() == "#!/bin/bash\n"
        assert stat.S_IMODE(dst.stat().st_mode) == 0o755

    def test_install_file_missing_source(self, tmp_path: Path) -> None:
        """Test a missing source raises PrivilegedCommandFailure."""
        with pytest.raises(PrivilegedCommandFailure):
            RealFileSystem().install_file(tmp_path / "missing", tmp_path / "out", 0o755)

    def test_replace_tree(self, tmp_path: Path) -> None:
        """Test a tree replaces an existing copy."""
        src = tmp_path / "src"
        (src / "lib").mkdir(parents=True)
        (src / "lib" / "os.sh").write_text("new")
        dst = tmp_path / "opt" / "commons"
        dst.mkdir(parents=True)
        (dst / "old.sh").write_text("old")

        RealFileSystem().replace_tree(src, dst)

        assert (dst / "lib" / "os.sh").read_text() == "new"
        assert not (dst / "old.sh").exists()


class TestPrivilegedFileSystem:
    """Tests for PrivilegedFileSystem implementation."""

    def test_satisfies_protocol(self) -> None:
        """Test PrivilegedFileSystem satisfies the FileSystem protocol."""
        assert isinstance(PrivilegedFileSystem(MagicMock()), FileSystem)

    def test_reads_directly(self, tmp_path: Path) -> None:
        """Test reads do not go through the runner."""
        runner = MagicMock()
        test_file = tmp_path / "sysctl.conf"
        test_file.write_text("content")
        fs = PrivilegedFileSystem(runner)

        assert fs.read_text(test_file) == "content"
        assert fs.exists(test_file) is True
        runner.run.assert_not_called()

    def test_write_text_atomic(self, tmp_path: Path) -> None:
        """Test content is installed beside the target and renamed over it."""
        runner = MagicMock()
        target = tmp_path / "sysctl.conf"
        written: list[str] = []

        def record(args: list[str], **kwargs: object) -> None:
            if args[0] == "install":
                written.append(Path(args[-2]).read_text())

        runner.run.side_effect = record

        PrivilegedFileSystem(runner).write_text_atomic(target, "vm.swappiness = 0\n")

        staged = str(tmp_path / ".sysctl.conf.couchbase-installer.tmp")
        install_call, mv_call = runner.run.call_args_list
        assert install_call.args[0][:3] == ["install", "-m", "644"]
        assert install_call.args[0][-1] == staged
        assert install_call.kwargs == {"privileged": True}
        assert mv_call == call(["mv", "-f", staged, str(target)], privileged=True)
        assert written == ["vm.swappiness = 0\n"]

    def test_write_text_atomic_removes_scratch(self, tmp_path: Path) -> None:
        """Test the scratch file is removed even if the install fails."""
        runner = MagicMock()
        scratch: list[Path] = []

        def fail(args: list[str], **kwargs: object) -> None:
            scratch.append(Path(args[-2]))
            raise PrivilegedCommandFailure(args, 1, "denied")

        runner.run.side_effect = fail

        with pytest.raises(PrivilegedCommandFailure):
            PrivilegedFileSystem(runner).write_text_atomic(tmp_path / "sysctl.conf", "x\n")

        assert not scratch[0].exists()

    def test_write_text_atomic_removes_staged_file(self, tmp_path: Path) -> None:
        """Test a failed rename removes the staged copy beside the target."""
        runner = MagicMock()
        target = tmp_path / "sysctl.conf"
        staged = str(tmp_path / ".sysctl.conf.couchbase-installer.tmp")

        def fail_mv(args: list[str], **kwargs: object) -> None:
            if args[0] == "mv":
                raise PrivilegedCommandFailure(args, 1, "read-only file system")

        runner.run.side_effect = fail_mv

        with pytest.raises(PrivilegedCommandFailure, match="read-only file system"):
            PrivilegedFileSystem(runner).write_text_atomic(target, "x\n")

        assert runner.run.call_args_list[-1] == call(["rm", "-f", staged], privileged=True)

    def test_install_file(self) -> None:
        """Test install creates parents and sets the mode."""
        runner = MagicMock()

        PrivilegedFileSystem(runner).install_file(
            Path("/src/disable-thp"), Path("/etc/init.d/disable-thp"), 0o755
        )

        runner.run.assert_called_once_with(
            ["install", "-D", "-m", "755", "/src/disable-thp", "/etc/init.d/disable-thp"],
            privileged=True,
        )

    def test_replace_tree(self) -> None:
        """Test the old tree is removed before copying."""
        runner = MagicMock()

        PrivilegedFileSystem(runner).replace_tree(
            Path("/src/bash-commons"), Path("/opt/couchbase-commons")
        )

        assert runner.run.call_args_list == [
            call(["rm", "-rf", "/opt/couchbase-commons"], privileged=True),
            call(["mkdir", "-p", "/opt"], privileged=True),
            call(["cp", "-R", "/src/bash-commons", "/opt/couchbase-commons"], privileged=True),
        ]
