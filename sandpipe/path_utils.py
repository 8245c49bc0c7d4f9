"""Helpers for turning user paths into store paths."""

from __future__ import annotations

from pathlib import PurePosixPath


def split_path(path: str) -> list[str]:
    """Split a store path into its non-empty segments."""
    return [part for part in path.split("/") if part and part != "."]


def join_path(*parts: str) -> str:
    return "/".join(segment for part in parts for segment in split_path(part))


def parent_and_name(path: str) -> tuple[str, str]:
    parts = split_path(path)
    if not parts:
        return "", ""
    return "/".join(parts[:-1]), parts[-1]


def base_name(path: str) -> str:
    return parent_and_name(path)[1]


def resolve_path(cwd: str, path: str | None) -> str:
    """Resolve ``path`` against ``cwd`` and return a store path.

    A leading ``/`` anchors the path at the store root. ``..`` above the
    root stays at the root.
    """
    if not path or path == ".":
        raw = PurePosixPath("/", cwd)
    elif path.startswith("/"):
        raw = PurePosixPath(path)
    else:
        raw = PurePosixPath("/", cwd, path)
    parts: list[str] = []
    for part in raw.parts:
        if part in ("", "/", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return "/".join(parts)


def display_path(path: str) -> str:
    return "/" + path


__all__ = [
    "split_path",
    "join_path",
    "parent_and_name",
    "base_name",
    "resolve_path",
    "display_path",
]
