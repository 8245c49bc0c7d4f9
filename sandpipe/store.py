"""File store interface consumed by the shell."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from .exceptions import InvalidOperation, SandboxError
from .path_utils import display_path

logger = logging.getLogger(__name__)

EntryKind = Literal["file", "directory"]


@dataclass(frozen=True)
class StoreEntry:
    name: str
    path: str
    kind: EntryKind

    @property
    def is_dir(self) -> bool:
        return self.kind == "directory"


@dataclass(frozen=True)
class StorageInfo:
    used: int
    quota: int


class FileStore:
    """Hierarchical text store addressed by slash-delimited relative paths.

    Paths never carry a leading slash; the empty string names the root.
    Implementations raise :class:`~sandpipe.exceptions.SandboxError`
    subclasses for every failure a user should see.
    """

    def list_entries(self, root: str = "") -> list[StoreEntry]:
        """Return every entry below ``root`` (recursively, root excluded)."""
        raise NotImplementedError

    def read_file(self, path: str) -> str:
        raise NotImplementedError

    def write_file(self, path: str, content: str) -> None:
        """Overwrite an existing file."""
        raise NotImplementedError

    def create_file(self, path: str, content: str = "") -> StoreEntry:
        """Create (or truncate) a file, creating missing parent directories."""
        raise NotImplementedError

    def create_directory(self, path: str) -> StoreEntry:
        """Create a directory and any missing parents."""
        raise NotImplementedError

    def delete_file(self, path: str) -> None:
        raise NotImplementedError

    def delete_directory(self, path: str) -> None:
        """Delete a directory and everything below it."""
        raise NotImplementedError

    def copy(self, source: str, dest: str) -> StoreEntry:
        if self.is_dir(source):
            raise InvalidOperation(f"Cannot copy directory: {display_path(source)}")
        return self.create_file(dest, self.read_file(source))

    def move(self, source: str, dest: str) -> None:
        """Copy ``source`` to ``dest`` then delete ``source``.

        When the delete fails ``dest`` is put back the way it was: restored
        if it already existed, removed otherwise.
        """
        if self.is_dir(source):
            raise InvalidOperation(f"Cannot move directory: {display_path(source)}")
        if source == dest:
            return
        previous: str | None = None
        if self.exists(dest) and not self.is_dir(dest):
            previous = self.read_file(dest)
        self.copy(source, dest)
        try:
            self.delete_file(source)
        except SandboxError as exc:
            try:
                if previous is None:
                    self.delete_file(dest)
                else:
                    self.write_file(dest, previous)
            except SandboxError as cleanup_exc:
                logger.warning("Could not roll back %s after failed move: %s", dest, cleanup_exc)
            raise InvalidOperation(
                f'Failed to complete rename: could not delete original file "{display_path(source)}". '
                f"Error: {exc}"
            ) from exc

    def exists(self, path: str) -> bool:
        raise NotImplementedError

    def is_dir(self, path: str) -> bool:
        raise NotImplementedError

    def storage_info(self) -> StorageInfo | None:
        return None

    def clear_all(self) -> None:
        raise NotImplementedError


__all__ = ["FileStore", "StoreEntry", "StorageInfo", "EntryKind"]
