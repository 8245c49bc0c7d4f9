"""Shared shell types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..grammar import ArgumentRecord

if TYPE_CHECKING:
    from .core import SandboxShell


@dataclass(slots=True)
class CommandResult:
    success: bool = True
    output: str = ""
    error: str | None = None

    @classmethod
    def ok(cls, output: str = "") -> "CommandResult":
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, error: str) -> "CommandResult":
        return cls(success=False, error=error)


StageHandler = Callable[["SandboxShell", ArgumentRecord, str | None], CommandResult]


def split_lines(text: str) -> list[str]:
    """Split on ``\\n``, ignoring a single trailing newline."""
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n") if text else []


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


def source_paths(args: ArgumentRecord) -> list[str]:
    """Return the path argument(s) as a list, whichever shape was parsed."""
    paths = args.get("paths")
    if isinstance(paths, list):
        return paths
    path = args.get("path")
    return [path] if isinstance(path, str) else []


__all__ = ["CommandResult", "StageHandler", "split_lines", "join_lines", "source_paths"]
