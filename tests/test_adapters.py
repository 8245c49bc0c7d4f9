import pytest

from sandpipe import HostFileStore, MemoryFileStore, SandboxShell
from sandpipe.exceptions import InvalidOperation, NodeNotFound, QuotaExceeded


def test_memory_store_initial_content_and_listing():
    store = MemoryFileStore(initial={"a.txt": "hello", "dir/b.txt": "nested"})
    assert store.read_file("a.txt") == "hello"
    assert store.is_dir("dir")
    paths = [entry.path for entry in store.list_entries()]
    assert paths == ["a.txt", "dir", "dir/b.txt"]
    assert [entry.path for entry in store.list_entries("dir")] == ["dir/b.txt"]


def test_memory_store_errors():
    store = MemoryFileStore(initial={"a.txt": "hello"})
    with pytest.raises(NodeNotFound):
        store.read_file("missing.txt")
    with pytest.raises(NodeNotFound):
        store.write_file("missing.txt", "x")
    with pytest.raises(InvalidOperation):
        store.create_directory("a.txt/sub")
    with pytest.raises(InvalidOperation):
        store.delete_directory("")


def test_memory_store_quota():
    store = MemoryFileStore(quota=10)
    store.create_file("small.txt", "12345")
    with pytest.raises(QuotaExceeded):
        store.create_file("big.txt", "1234567890")
    # overwriting replaces the old bytes rather than adding to them
    store.write_file("small.txt", "1234567890")
    assert store.storage_info().used == 10


def test_copy_rejects_directories():
    store = MemoryFileStore(initial={"dir/a.txt": "x"})
    with pytest.raises(InvalidOperation):
        store.copy("dir", "other")


class _StickySourceStore(MemoryFileStore):
    """Refuses to delete one particular file."""

    def __init__(self, *args, sticky: str, fail_cleanup: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.sticky = sticky
        self.fail_cleanup = fail_cleanup

    def delete_file(self, path: str) -> None:
        if path == self.sticky or self.fail_cleanup:
            raise InvalidOperation(f"Permission denied: {path}")
        super().delete_file(path)


def test_move_rolls_back_copy_when_delete_fails():
    store = _StickySourceStore(initial={"src.txt": "data"}, sticky="src.txt")
    with pytest.raises(InvalidOperation) as exc:
        store.move("src.txt", "dest.txt")
    assert "Failed to complete rename" in str(exc.value)
    assert store.exists("src.txt")
    assert not store.exists("dest.txt")


def test_move_restores_existing_destination_when_delete_fails():
    store = _StickySourceStore(
        initial={"src.txt": "new", "dest.txt": "precious"}, sticky="src.txt"
    )
    shell = SandboxShell(store)
    result = shell.exec("mv src.txt dest.txt")
    assert not result.success
    assert store.read_file("dest.txt") == "precious"
    assert store.read_file("src.txt") == "new"


def test_store_errors_use_rooted_paths():
    store = MemoryFileStore(initial={"docs/a.txt": "x"})
    with pytest.raises(NodeNotFound, match="No such file or directory: /docs/b.txt"):
        store.read_file("docs/b.txt")
    with pytest.raises(InvalidOperation, match="Is a directory: /docs"):
        store.read_file("docs")


def test_host_store_errors_use_rooted_paths(tmp_path):
    store = HostFileStore(tmp_path)
    with pytest.raises(NodeNotFound, match="No such file or directory: /missing.txt"):
        store.read_file("missing.txt")


def test_move_rollback_failure_reports_original_error(caplog):
    store = _StickySourceStore(initial={"src.txt": "data"}, sticky="src.txt", fail_cleanup=True)
    with pytest.raises(InvalidOperation) as exc:
        store.move("src.txt", "dest.txt")
    assert 'could not delete original file "/src.txt"' in str(exc.value)
    assert "Could not roll back dest.txt" in caplog.text


def test_shell_reports_failed_move():
    store = _StickySourceStore(initial={"src.txt": "data"}, sticky="src.txt")
    shell = SandboxShell(store)
    result = shell.exec("mv src.txt dest.txt")
    assert not result.success
    assert "Permission denied" in result.error
    assert not store.exists("dest.txt")


def test_host_store_round_trip(tmp_path):
    store = HostFileStore(tmp_path / "sandbox")
    store.create_file("docs/readme.txt", "hi")
    assert (tmp_path / "sandbox" / "docs" / "readme.txt").read_text() == "hi"
    assert [entry.path for entry in store.list_entries()] == ["docs", "docs/readme.txt"]
    store.move("docs/readme.txt", "readme.txt")
    assert store.read_file("readme.txt") == "hi"
    assert not store.exists("docs/readme.txt")
    store.clear_all()
    assert store.list_entries() == []


def test_host_store_refuses_escape(tmp_path):
    store = HostFileStore(tmp_path / "sandbox")
    with pytest.raises(InvalidOperation):
        store.create_file("../outside.txt", "nope")
    assert not (tmp_path / "outside.txt").exists()


def test_host_store_storage_info(tmp_path):
    store = HostFileStore(tmp_path)
    store.create_file("a.txt", "12345")
    info = store.storage_info()
    assert info.used == 5
    assert info.quota >= info.used
