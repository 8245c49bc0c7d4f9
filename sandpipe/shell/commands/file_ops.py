"""File manipulation commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...grammar import ArgumentRecord
from ...path_utils import base_name, display_path, join_path
from ...verbs import Verb
from ..common import CommandResult
from ..registry import COMMAND_REGISTRY

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import SandboxShell


def _target(shell: "SandboxShell", args: ArgumentRecord, usage: str) -> str | CommandResult:
    path = args.get("path")
    if not isinstance(path, str):
        return CommandResult.fail(f"Usage: {usage}")
    return shell.resolve(path)


def _source_and_dest(
    shell: "SandboxShell", args: ArgumentRecord, usage: str
) -> tuple[str, str] | CommandResult:
    source, dest = args.get("source"), args.get("dest")
    if not isinstance(source, str) or not isinstance(dest, str):
        return CommandResult.fail(f"Usage: {usage}")
    source_path, dest_path = shell.resolve(source), shell.resolve(dest)
    if shell.store.is_dir(dest_path) or not dest_path:
        dest_path = join_path(dest_path, base_name(source_path))
    return source_path, dest_path


@COMMAND_REGISTRY.command(Verb.MAKE_DIRECTORY, usage="mkdir <path>", description="Create directory")
def mkdir(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    target = _target(shell, args, "mkdir <path>")
    if isinstance(target, CommandResult):
        return target
    shell.store.create_directory(target)
    return CommandResult.ok(f"Created directory: {display_path(target)}")


@COMMAND_REGISTRY.command(Verb.CREATE_EMPTY, usage="touch <path>", description="Create empty file")
def touch(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    target = _target(shell, args, "touch <path>")
    if isinstance(target, CommandResult):
        return target
    if shell.store.exists(target) and not shell.store.is_dir(target):
        return CommandResult.ok(f"File exists: {display_path(target)}")
    shell.store.create_file(target, "")
    return CommandResult.ok(f"Created file: {display_path(target)}")


@COMMAND_REGISTRY.command(Verb.REMOVE, usage="rm <path>", description="Remove file")
def rm(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    target = _target(shell, args, "rm <path>")
    if isinstance(target, CommandResult):
        return target
    if shell.store.is_dir(target):
        if not args.get("recursive"):
            return CommandResult.fail(
                f"Is a directory: {display_path(target)} (use rmdir or rm -r)"
            )
        shell.store.delete_directory(target)
    else:
        shell.store.delete_file(target)
    return CommandResult.ok(f"Removed: {display_path(target)}")


@COMMAND_REGISTRY.command(
    Verb.REMOVE_DIRECTORY, usage="rmdir <path>", description="Remove directory and its contents"
)
def rmdir(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    target = _target(shell, args, "rmdir <path>")
    if isinstance(target, CommandResult):
        return target
    shell.store.delete_directory(target)
    return CommandResult.ok(f"Removed directory: {display_path(target)}")


@COMMAND_REGISTRY.command(Verb.MOVE, usage="mv <source> <dest>", description="Move/rename file")
def mv(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    operands = _source_and_dest(shell, args, "mv <source> <dest>")
    if isinstance(operands, CommandResult):
        return operands
    source, dest = operands
    shell.store.move(source, dest)
    return CommandResult.ok(f"Moved: {display_path(source)} -> {display_path(dest)}")


@COMMAND_REGISTRY.command(Verb.COPY, usage="cp <source> <dest>", description="Copy file")
def cp(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    operands = _source_and_dest(shell, args, "cp <source> <dest>")
    if isinstance(operands, CommandResult):
        return operands
    source, dest = operands
    shell.store.copy(source, dest)
    return CommandResult.ok(f"Copied: {display_path(source)} -> {display_path(dest)}")


@COMMAND_REGISTRY.command(
    Verb.IMPORT, usage="import [host-path...]", description="Import files from the host"
)
def import_files(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    if shell.picker is None:
        return CommandResult.fail("Import is not available in this session")
    requested = args.get("paths")
    if not isinstance(requested, list) or not requested:
        return CommandResult.fail("No files selected")
    imported: list[str] = []
    for picked in shell.picker.pick_files(requested):
        target = join_path(shell.cwd, picked.name)
        shell.store.create_file(target, picked.content)
        imported.append(f"  {display_path(target)}")
    return CommandResult.ok(f"Imported {len(imported)} file(s):\n" + "\n".join(imported))


@COMMAND_REGISTRY.command(
    Verb.EXPORT, usage="export <path>", description="Export file to the host"
)
def export(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    target = _target(shell, args, "export <path>")
    if isinstance(target, CommandResult):
        return target
    if shell.picker is None:
        return CommandResult.fail("Export is not available in this session")
    content = shell.store.read_file(target)
    location = shell.picker.save_file(base_name(target), content)
    return CommandResult.ok(f"Exported: {display_path(target)} -> {location}")
