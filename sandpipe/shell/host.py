"""Host-side file picker used by ``import`` and ``export``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..exceptions import InvalidOperation, NodeNotFound


@dataclass(frozen=True)
class PickedFile:
    name: str
    content: str


class FilePicker:
    """Moves files between the sandbox and the host environment."""

    def pick_files(self, requested: list[str]) -> list[PickedFile]:
        raise NotImplementedError

    def save_file(self, name: str, content: str) -> str:
        """Store ``content`` on the host and return where it went."""
        raise NotImplementedError


class HostFilePicker(FilePicker):
    """Picks files from, and saves files into, a host directory."""

    def __init__(self, base: Path | str, *, encoding: str = "utf-8") -> None:
        self.base = Path(base).expanduser()
        self.encoding = encoding

    def pick_files(self, requested: list[str]) -> list[PickedFile]:
        picked: list[PickedFile] = []
        for name in requested:
            source = self.base / Path(name).expanduser()
            if not source.is_file():
                raise NodeNotFound(f"No such host file: {name}")
            text = source.read_text(encoding=self.encoding, errors="replace")
            picked.append(PickedFile(name=source.name, content=text))
        return picked

    def save_file(self, name: str, content: str) -> str:
        if not name or name in (".", ".."):
            raise InvalidOperation(f"Invalid export name: {name!r}")
        self.base.mkdir(parents=True, exist_ok=True)
        target = self.base / name
        target.write_text(content, encoding=self.encoding)
        return str(target)


__all__ = ["FilePicker", "HostFilePicker", "PickedFile"]
