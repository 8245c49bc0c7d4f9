"""Navigation-oriented commands."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from ...exceptions import InvalidOperation, NodeNotFound
from ...grammar import ArgumentRecord
from ...path_utils import base_name, display_path, parent_and_name
from ...store import StoreEntry
from ...verbs import Verb
from ..common import CommandResult
from ..registry import COMMAND_REGISTRY

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import SandboxShell


def _ordered(entries: list[StoreEntry]) -> list[StoreEntry]:
    return sorted(entries, key=lambda entry: (not entry.is_dir, entry.name))


def _format_ls(entries: list[StoreEntry], *, long_format: bool) -> str:
    if not entries:
        return ""
    if long_format:
        return "\n".join(
            f"{'d' if entry.is_dir else '-'} {display_path(entry.path)}" for entry in entries
        )
    return "  ".join(f"{entry.name}/" if entry.is_dir else entry.name for entry in entries)


def _require_directory(shell: "SandboxShell", target: str) -> None:
    if target and not shell.store.is_dir(target):
        if shell.store.exists(target):
            raise InvalidOperation(f"Not a directory: {display_path(target)}")
        raise NodeNotFound(f"No such directory: {display_path(target)}")


@COMMAND_REGISTRY.command(Verb.PRINT_WORKING_DIRECTORY, usage="pwd", description="Print working directory")
def pwd(shell: "SandboxShell", _: ArgumentRecord, __: str | None) -> CommandResult:
    return CommandResult.ok(shell.pwd())


@COMMAND_REGISTRY.command(Verb.CHANGE_DIRECTORY, usage="cd <path>", description="Change directory")
def cd(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    path = args.get("path")
    if not isinstance(path, str) or path == "/":
        shell.cwd = ""
        return CommandResult.ok()
    target = shell.resolve(path)
    if target and not shell.store.is_dir(target):
        return CommandResult.fail(f"Not a directory: {display_path(target)}")
    shell.cwd = target
    return CommandResult.ok()


@COMMAND_REGISTRY.command(
    Verb.LIST_DIRECTORY, usage="ls [path]", description="List files and directories"
)
def ls(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    path = args.get("path")
    target = shell.resolve(path if isinstance(path, str) else None)
    long_format = bool(args.get("long"))
    if target and shell.store.exists(target) and not shell.store.is_dir(target):
        entry = StoreEntry(name=base_name(target), path=target, kind="file")
        return CommandResult.ok(_format_ls([entry], long_format=long_format))
    _require_directory(shell, target)
    children = [
        entry
        for entry in shell.store.list_entries(target)
        if parent_and_name(entry.path)[0] == target
    ]
    return CommandResult.ok(_format_ls(_ordered(children), long_format=long_format))


@COMMAND_REGISTRY.command(Verb.TREE, usage="tree [path]", description="Show directory tree")
def tree(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    path = args.get("path")
    target = shell.resolve(path if isinstance(path, str) else None)
    _require_directory(shell, target)
    children: dict[str, list[StoreEntry]] = defaultdict(list)
    for entry in shell.store.list_entries(target):
        children[parent_and_name(entry.path)[0]].append(entry)

    lines = [display_path(target)]

    def render(directory: str, prefix: str = "") -> None:
        entries = _ordered(children.get(directory, []))
        for idx, entry in enumerate(entries):
            last = idx == len(entries) - 1
            connector = "└──" if last else "├──"
            label = f"{entry.name}/" if entry.is_dir else entry.name
            lines.append(f"{prefix}{connector} {label}")
            if entry.is_dir:
                render(entry.path, prefix + ("    " if last else "│   "))

    render(target)
    return CommandResult.ok("\n".join(lines))
