import stat
from pathlib import Path

import pytest

from pymoq.common.transaction import GENERATED_FILE_MODE, RealFileSystem, TransactionManager
from pymoq.spec import StaleFileCleanupError


class FailingRemoveFileSystem(RealFileSystem):
    def remove(self, path: Path) -> None:
        raise PermissionError(f"cannot remove {path}")


def test_operations_run_in_queue_order(tmp_path):
    (tmp_path / "old_mock.py").write_text("stale")
    tm = TransactionManager(tmp_path)
    tm.add_delete_file("old_mock.py")
    tm.add_write("store_mock.py", "fresh")

    assert tm.preview() == ["[DELETE] old_mock.py", "[WRITE] store_mock.py"]
    tm.commit()

    assert not (tmp_path / "old_mock.py").exists()
    assert (tmp_path / "store_mock.py").read_text() == "fresh"
    assert tm.pending_count == 0


def test_written_files_are_not_executable(tmp_path):
    tm = TransactionManager(tmp_path)
    tm.add_write("nested/store_mock.py", "x = 1\n")
    tm.commit()

    mode = stat.S_IMODE((tmp_path / "nested" / "store_mock.py").stat().st_mode)
    assert mode == GENERATED_FILE_MODE


def test_failed_cleanup_stops_before_writing(tmp_path):
    tm = TransactionManager(tmp_path, FailingRemoveFileSystem())
    tm.add_delete_file("old_mock.py")
    tm.add_write("store_mock.py", "fresh")

    with pytest.raises(StaleFileCleanupError, match="old_mock.py"):
        tm.commit()

    assert not (tmp_path / "store_mock.py").exists()


def test_rewrite_replaces_content_without_leftovers(tmp_path):
    target = tmp_path / "store_mock.py"
    target.write_text("old", encoding="utf-8")
    target.chmod(0o755)

    RealFileSystem().write_text(target, "new")

    assert target.read_text(encoding="utf-8") == "new"
    assert stat.S_IMODE(target.stat().st_mode) == GENERATED_FILE_MODE
    assert [p.name for p in tmp_path.iterdir()] == ["store_mock.py"]
