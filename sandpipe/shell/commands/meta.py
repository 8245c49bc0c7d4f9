"""Meta commands for shell introspection and housekeeping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...grammar import ArgumentRecord
from ...verbs import Verb, aliases_for, resolve_verb
from ..common import CommandResult
from ..registry import COMMAND_REGISTRY

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import SandboxShell

_MB = 1024 * 1024


@COMMAND_REGISTRY.command(Verb.HELP, usage="help [command]", description="Show available commands")
def help(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:  # noqa: A001
    topic = args.get("topic")
    if isinstance(topic, str):
        verb = resolve_verb(topic)
        spec = shell.commands.get(verb) if verb else None
        if spec is None:
            return CommandResult.fail(f"No help for unknown command: {topic}")
        lines = [f"{spec.verb} - {spec.description}", f"Usage: {spec.usage}"]
        aliases = aliases_for(spec.verb)
        if aliases:
            lines.append(f"Aliases: {', '.join(aliases)}")
        if spec.pipe_aware:
            lines.append("Reads piped input when used after |")
        return CommandResult.ok("\n".join(lines))

    lines = ["Available commands:", ""]
    for spec in shell.available_commands():
        aliases = aliases_for(spec.verb)
        suffix = f" (aliases: {', '.join(aliases)})" if aliases else ""
        lines.append(f"  {spec.usage:<24} {spec.description}{suffix}")
    lines.append("")
    lines.append("Chain commands with |, e.g. cat notes.txt | grep todo | sort | uniq")
    return CommandResult.ok("\n".join(lines))


@COMMAND_REGISTRY.command(Verb.CLEAR_SCREEN, usage="clear", description="Clear terminal")
def clear(shell: "SandboxShell", _: ArgumentRecord, __: str | None) -> CommandResult:
    shell.clear_screen()
    return CommandResult.ok()


@COMMAND_REGISTRY.command(Verb.STORAGE_INFO, usage="storage", description="Show storage usage")
def storage(shell: "SandboxShell", _: ArgumentRecord, __: str | None) -> CommandResult:
    info = shell.store.storage_info()
    if info is None or info.quota <= 0:
        return CommandResult.fail("Storage info not available")
    percent = info.used / info.quota * 100
    return CommandResult.ok(
        f"Storage: {info.used / _MB:.2f} MB / {info.quota / _MB:.2f} MB ({percent:.1f}%)"
    )


@COMMAND_REGISTRY.command(Verb.RESET_ALL, usage="reset", description="Remove every file in the store")
def reset(shell: "SandboxShell", _: ArgumentRecord, __: str | None) -> CommandResult:
    shell.store.clear_all()
    shell.cwd = ""
    return CommandResult.ok("Store cleared. All files removed.")
