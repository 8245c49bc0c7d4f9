"""Node tree backing the in-memory file store."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .exceptions import NodeExists, NodeNotFound
from .path_utils import display_path, join_path


@dataclass(eq=False)
class StoreNode:
    """Base node stored inside the sandbox."""

    name: str
    parent: "DirectoryNode" | None = None

    def path(self) -> str:
        segments = []
        node: StoreNode | None = self
        while node and node.parent is not None:
            segments.append(node.name)
            node = node.parent
        return "/".join(reversed(segments))


class FileNode(StoreNode):
    """A text file."""

    def __init__(
        self,
        name: str,
        *,
        parent: "DirectoryNode" | None = None,
        content: str = "",
    ) -> None:
        super().__init__(name=name, parent=parent)
        self.content = content

    def write(self, data: str) -> None:
        self.content = data

    def size(self) -> int:
        return len(self.content.encode("utf-8"))


class DirectoryNode(StoreNode):
    """Directories keep their children keyed by name."""

    def __init__(self, name: str, *, parent: "DirectoryNode" | None = None) -> None:
        super().__init__(name=name, parent=parent)
        self.children: dict[str, StoreNode] = {}

    def add_child(self, node: StoreNode) -> None:
        if node.name in self.children:
            raise NodeExists(f"{node.name} already exists in {display_path(self.path())}")
        node.parent = self
        self.children[node.name] = node

    def remove_child(self, name: str) -> None:
        if name not in self.children:
            raise NodeNotFound(f"{name} not found in {display_path(self.path())}")
        del self.children[name]

    def get_child(self, name: str) -> StoreNode:
        try:
            return self.children[name]
        except KeyError as exc:
            missing = display_path(join_path(self.path(), name))
            raise NodeNotFound(f"No such file or directory: {missing}") from exc

    def iter_children(self) -> Iterator[StoreNode]:
        return iter(self.children.values())

    def walk(self) -> Iterator[StoreNode]:
        """Yield every descendant, parents before their children."""
        for child in self.iter_children():
            yield child
            if isinstance(child, DirectoryNode):
                yield from child.walk()


__all__ = ["StoreNode", "FileNode", "DirectoryNode"]
