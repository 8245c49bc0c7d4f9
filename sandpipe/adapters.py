"""Concrete file stores: in-memory and host-directory backed."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import InvalidOperation, NodeNotFound, QuotaExceeded
from .nodes import DirectoryNode, FileNode, StoreNode
from .path_utils import display_path, join_path, parent_and_name, split_path
from .store import FileStore, StorageInfo, StoreEntry

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_QUOTA = 50 * 1024 * 1024


def _entry_for(node: StoreNode) -> StoreEntry:
    kind = "directory" if isinstance(node, DirectoryNode) else "file"
    return StoreEntry(name=node.name, path=node.path(), kind=kind)


@dataclass
class MemoryFileStore(FileStore):
    """Keeps the whole tree in memory. ``initial`` maps file paths to text."""

    initial: Mapping[str, str] = field(default_factory=dict)
    quota: int = DEFAULT_MEMORY_QUOTA

    def __post_init__(self) -> None:
        self.root = DirectoryNode(name="")
        for path, text in self.initial.items():
            self.create_file(path, text)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve(self, path: str) -> StoreNode:
        current: StoreNode = self.root
        for part in split_path(path):
            if not isinstance(current, DirectoryNode):
                raise InvalidOperation(f"Not a directory: {display_path(current.path())}")
            current = current.get_child(part)
        return current

    def _resolve_dir(self, path: str, *, create: bool = False) -> DirectoryNode:
        current = self.root
        for part in split_path(path):
            try:
                next_node = current.get_child(part)
            except NodeNotFound:
                if not create:
                    raise
                next_node = DirectoryNode(name=part)
                current.add_child(next_node)
            if not isinstance(next_node, DirectoryNode):
                raise InvalidOperation(f"Not a directory: {display_path(next_node.path())}")
            current = next_node
        return current

    def _resolve_file(self, path: str) -> FileNode:
        node = self._resolve(path)
        if not isinstance(node, FileNode):
            raise InvalidOperation(f"Is a directory: {display_path(node.path())}")
        return node

    def _used_bytes(self) -> int:
        return sum(node.size() for node in self.root.walk() if isinstance(node, FileNode))

    def _check_quota(self, previous: int, content: str) -> None:
        projected = self._used_bytes() - previous + len(content.encode("utf-8"))
        if projected > self.quota:
            raise QuotaExceeded(
                f"Storage quota exceeded ({projected} of {self.quota} bytes)"
            )

    # ------------------------------------------------------------------
    # FileStore API
    # ------------------------------------------------------------------
    def list_entries(self, root: str = "") -> list[StoreEntry]:
        directory = self._resolve_dir(root)
        return [_entry_for(node) for node in directory.walk()]

    def read_file(self, path: str) -> str:
        return self._resolve_file(path).content

    def write_file(self, path: str, content: str) -> None:
        node = self._resolve_file(path)
        self._check_quota(node.size(), content)
        node.write(content)
        logger.debug("wrote %d chars to %s", len(content), node.path())

    def create_file(self, path: str, content: str = "") -> StoreEntry:
        parent_path, name = parent_and_name(path)
        if not name:
            raise InvalidOperation(f"Invalid file path: {display_path(path)}")
        parent = self._resolve_dir(parent_path, create=True)
        existing = parent.children.get(name)
        if isinstance(existing, DirectoryNode):
            raise InvalidOperation(f"Is a directory: {display_path(existing.path())}")
        previous = existing.size() if isinstance(existing, FileNode) else 0
        self._check_quota(previous, content)
        if isinstance(existing, FileNode):
            existing.write(content)
            return _entry_for(existing)
        node = FileNode(name=name, content=content)
        parent.add_child(node)
        logger.debug("created %s", node.path())
        return _entry_for(node)

    def create_directory(self, path: str) -> StoreEntry:
        if not split_path(path):
            raise InvalidOperation("Invalid directory path: path cannot be empty")
        return _entry_for(self._resolve_dir(path, create=True))

    def delete_file(self, path: str) -> None:
        node = self._resolve_file(path)
        assert node.parent is not None
        logger.debug("deleting %s", node.path())
        node.parent.remove_child(node.name)

    def delete_directory(self, path: str) -> None:
        if not split_path(path):
            raise InvalidOperation("Cannot remove root directory")
        node = self._resolve(path)
        if not isinstance(node, DirectoryNode):
            raise InvalidOperation(f"Not a directory: {display_path(node.path())}")
        assert node.parent is not None
        node.parent.remove_child(node.name)

    def exists(self, path: str) -> bool:
        try:
            self._resolve(path)
        except (NodeNotFound, InvalidOperation):
            return False
        return True

    def is_dir(self, path: str) -> bool:
        try:
            return isinstance(self._resolve(path), DirectoryNode)
        except (NodeNotFound, InvalidOperation):
            return False

    def storage_info(self) -> StorageInfo | None:
        return StorageInfo(used=self._used_bytes(), quota=self.quota)

    def clear_all(self) -> None:
        self.root.children.clear()


@dataclass
class HostFileStore(FileStore):
    """Persists the sandbox inside a directory on the host."""

    root: Path
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        self.root.mkdir(parents=True, exist_ok=True)
        self._root_resolved = self.root.resolve()

    def _resolve(self, path: str) -> Path:
        target = self.root.joinpath(*split_path(path)).resolve()
        if not target.is_relative_to(self._root_resolved):
            raise InvalidOperation(f"Path escapes store root: {display_path(path)}")
        return target

    def _existing(self, path: str) -> Path:
        target = self._resolve(path)
        if not target.exists():
            raise NodeNotFound(f"No such file or directory: {display_path(join_path(path))}")
        return target

    def _existing_file(self, path: str) -> Path:
        target = self._existing(path)
        if target.is_dir():
            raise InvalidOperation(f"Is a directory: {display_path(join_path(path))}")
        return target

    def _relative(self, target: Path) -> str:
        return target.relative_to(self._root_resolved).as_posix()

    def list_entries(self, root: str = "") -> list[StoreEntry]:
        base = self._existing(root)
        if not base.is_dir():
            raise InvalidOperation(f"Not a directory: {display_path(join_path(root))}")
        entries: list[StoreEntry] = []
        for target in sorted(base.rglob("*")):
            rel_path = self._relative(target)
            kind = "directory" if target.is_dir() else "file"
            entries.append(StoreEntry(name=target.name, path=rel_path, kind=kind))
        return entries

    def read_file(self, path: str) -> str:
        target = self._existing_file(path)
        return target.read_text(encoding=self.encoding, errors="replace")

    def write_file(self, path: str, content: str) -> None:
        target = self._existing_file(path)
        target.write_text(content, encoding=self.encoding)
        logger.debug("wrote %d chars to %s", len(content), target)

    def create_file(self, path: str, content: str = "") -> StoreEntry:
        parent_path, name = parent_and_name(path)
        if not name:
            raise InvalidOperation(f"Invalid file path: {display_path(path)}")
        if parent_path:
            self.create_directory(parent_path)
        target = self._resolve(path)
        if target.is_dir():
            raise InvalidOperation(f"Is a directory: {display_path(join_path(path))}")
        target.write_text(content, encoding=self.encoding)
        return StoreEntry(name=name, path=join_path(path), kind="file")

    def create_directory(self, path: str) -> StoreEntry:
        if not split_path(path):
            raise InvalidOperation("Invalid directory path: path cannot be empty")
        target = self._resolve(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError) as exc:
            raise InvalidOperation(f"Not a directory: {display_path(join_path(path))}") from exc
        return StoreEntry(name=target.name, path=join_path(path), kind="directory")

    def delete_file(self, path: str) -> None:
        self._existing_file(path).unlink()

    def delete_directory(self, path: str) -> None:
        if not split_path(path):
            raise InvalidOperation("Cannot remove root directory")
        target = self._existing(path)
        if not target.is_dir():
            raise InvalidOperation(f"Not a directory: {display_path(join_path(path))}")
        shutil.rmtree(target)

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).exists()
        except InvalidOperation:
            return False

    def is_dir(self, path: str) -> bool:
        try:
            return self._resolve(path).is_dir()
        except InvalidOperation:
            return False

    def storage_info(self) -> StorageInfo | None:
        used = sum(p.stat().st_size for p in self.root.rglob("*") if p.is_file())
        free = shutil.disk_usage(self.root).free
        return StorageInfo(used=used, quota=used + free)

    def clear_all(self) -> None:
        for child in self.root.iterdir():
            if child.is_dir():
                shutil.rmtree(child)
            else:
                child.unlink()


__all__ = ["MemoryFileStore", "HostFileStore", "DEFAULT_MEMORY_QUOTA"]
