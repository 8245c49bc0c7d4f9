"""Search-oriented commands."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ...grammar import ArgumentRecord
from ...verbs import Verb
from ..common import CommandResult, join_lines, split_lines
from ..registry import COMMAND_REGISTRY

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import SandboxShell


@COMMAND_REGISTRY.command(
    Verb.SEARCH,
    usage="grep <pattern> <path>",
    description="Search for a pattern (case-insensitive regex)",
    pipe_aware=True,
)
def grep(shell: "SandboxShell", args: ArgumentRecord, stdin: str | None) -> CommandResult:
    pattern = args.get("pattern")
    if not isinstance(pattern, str):
        return CommandResult.fail("Usage: grep <pattern> <path>")
    try:
        compiled = re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        return CommandResult.fail(f"Invalid pattern '{pattern}': {exc}")

    path = args.get("path")
    if stdin is not None:
        content = stdin
        numbered = False
    elif isinstance(path, str):
        content = shell.store.read_file(shell.resolve(path))
        numbered = True
    else:
        return CommandResult.fail("Usage: grep <pattern> <path>")

    invert = bool(args.get("invert_match"))
    results: list[str] = []
    for number, line in enumerate(split_lines(content), start=1):
        if bool(compiled.search(line)) == invert:
            continue
        results.append(f"{number}:{line}" if numbered else line)
    return CommandResult.ok(join_lines(results))
