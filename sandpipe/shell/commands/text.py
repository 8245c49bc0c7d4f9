"""Text processing commands."""

from __future__ import annotations

import itertools
import locale
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...grammar import ArgumentRecord, parse_count
from ...verbs import Verb
from ..common import CommandResult, join_lines, source_paths, split_lines
from ..registry import COMMAND_REGISTRY

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import SandboxShell

DEFAULT_LINES = 10

_LEADING_NUMBER_RE = re.compile(r"^\s*([-+]?\d+(?:\.\d*)?)")


def read_input(shell: "SandboxShell", args: ArgumentRecord, stdin: str | None) -> str | None:
    """Piped input when there is some, otherwise the named file(s).

    Returns ``None`` when there is neither, so callers can report usage.
    """
    if stdin is not None:
        return stdin
    paths = source_paths(args)
    if not paths:
        return None
    return _concat(shell.store.read_file(shell.resolve(path)) for path in paths)


def _concat(blobs: Iterable[str]) -> str:
    parts: list[str] = []
    for blob in blobs:
        if parts and not parts[-1].endswith("\n"):
            parts.append("\n")
        parts.append(blob)
    return "".join(parts)


@COMMAND_REGISTRY.command(
    Verb.CONCATENATE, usage="cat <path> [path...]", description="Display file contents", pipe_aware=True
)
def cat(shell: "SandboxShell", args: ArgumentRecord, stdin: str | None) -> CommandResult:
    content = read_input(shell, args, stdin)
    if content is None:
        return CommandResult.fail("Usage: cat <path>")
    return CommandResult.ok(content)


@COMMAND_REGISTRY.command(Verb.READ, usage="read_file <path>", description="Read a file")
def read_file(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    path = args.get("path")
    if not isinstance(path, str):
        return CommandResult.fail("Usage: read_file <path>")
    return CommandResult.ok(shell.store.read_file(shell.resolve(path)))


@COMMAND_REGISTRY.command(
    Verb.WRITE,
    usage="write <path> <content>",
    description="Write content (or piped input) to a file",
    pipe_aware=True,
)
def write(shell: "SandboxShell", args: ArgumentRecord, stdin: str | None) -> CommandResult:
    path = args.get("path")
    if not isinstance(path, str):
        return CommandResult.fail("Usage: write <path> <content>")
    content = args.get("content")
    if not isinstance(content, str):
        content = stdin if stdin is not None else ""
    target = shell.resolve(path)
    exists = shell.store.exists(target)
    if args.get("append") and exists:
        content = shell.store.read_file(target) + content
    if exists:
        shell.store.write_file(target, content)
    else:
        shell.store.create_file(target, content)
    return CommandResult.ok(f"Written to: /{target}")


@COMMAND_REGISTRY.command(Verb.ECHO, usage="echo [text...]", description="Print text")
def echo(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    return CommandResult.ok(str(args.get("text", "")))


def _line_window(
    shell: "SandboxShell", args: ArgumentRecord, stdin: str | None, *, tail: bool
) -> CommandResult:
    count = args.get("lines")
    path = args.get("path")
    if stdin is not None:
        content = stdin
        # mid-pipeline, "head 5" means five lines rather than a file named 5
        if isinstance(path, str) and count is None:
            count = parse_count(path)
    elif isinstance(path, str):
        content = shell.store.read_file(shell.resolve(path))
    else:
        name = "tail" if tail else "head"
        return CommandResult.fail(f"Usage: {name} <path> [lines]")
    if not isinstance(count, int) or isinstance(count, bool) or count <= 0:
        count = DEFAULT_LINES
    lines = split_lines(content)
    window = lines[-count:] if tail else lines[:count]
    return CommandResult.ok(join_lines(window))


@COMMAND_REGISTRY.command(
    Verb.HEAD, usage="head <path> [lines]", description="Show the first N lines", pipe_aware=True
)
def head(shell: "SandboxShell", args: ArgumentRecord, stdin: str | None) -> CommandResult:
    return _line_window(shell, args, stdin, tail=False)


@COMMAND_REGISTRY.command(
    Verb.TAIL, usage="tail <path> [lines]", description="Show the last N lines", pipe_aware=True
)
def tail(shell: "SandboxShell", args: ArgumentRecord, stdin: str | None) -> CommandResult:
    return _line_window(shell, args, stdin, tail=True)


def _numeric_key(line: str) -> float:
    match = _LEADING_NUMBER_RE.match(line)
    return float(match.group(1)) if match else 0.0


@COMMAND_REGISTRY.command(
    Verb.SORT, usage="sort <path>", description="Sort lines", pipe_aware=True
)
def sort(shell: "SandboxShell", args: ArgumentRecord, stdin: str | None) -> CommandResult:
    content = read_input(shell, args, stdin)
    if content is None:
        return CommandResult.fail("Usage: sort <path>")

    numeric = bool(args.get("numeric"))
    ignore_case = bool(args.get("ignore_case"))

    def key(line: str) -> tuple[float, str]:
        collated = locale.strxfrm(line.casefold() if ignore_case else line)
        return (_numeric_key(line) if numeric else 0.0, collated)

    lines = sorted(split_lines(content), key=key, reverse=bool(args.get("reverse")))
    if args.get("unique"):
        lines = [next(group) for _, group in itertools.groupby(lines, key=key)]
    return CommandResult.ok(join_lines(lines))


@COMMAND_REGISTRY.command(
    Verb.DEDUPLICATE,
    usage="uniq <path>",
    description="Drop adjacent duplicate lines",
    pipe_aware=True,
)
def uniq(shell: "SandboxShell", args: ArgumentRecord, stdin: str | None) -> CommandResult:
    content = read_input(shell, args, stdin)
    if content is None:
        return CommandResult.fail("Usage: uniq <path>")
    ignore_case = bool(args.get("ignore_case"))
    output: list[str] = []
    for _, group in itertools.groupby(
        split_lines(content), key=lambda line: line.casefold() if ignore_case else line
    ):
        members = list(group)
        if args.get("duplicates_only") and len(members) < 2:
            continue
        if args.get("unique_only") and len(members) > 1:
            continue
        if args.get("count"):
            output.append(f"{len(members):>7} {members[0]}")
        else:
            output.append(members[0])
    return CommandResult.ok(join_lines(output))


@COMMAND_REGISTRY.command(
    Verb.WORD_COUNT,
    usage="wc <path>",
    description="Count lines, words and characters",
    pipe_aware=True,
)
def wc(shell: "SandboxShell", args: ArgumentRecord, stdin: str | None) -> CommandResult:
    content = read_input(shell, args, stdin)
    if content is None:
        return CommandResult.fail("Usage: wc <path>")
    counts = [
        ("count_lines", content.count("\n")),
        ("count_words", len(content.split())),
        ("count_chars", len(content)),
    ]
    selected = [value for name, value in counts if args.get(name, True)]
    line = "  " + " ".join(f"{value:>6}" for value in selected)
    path = args.get("path")
    if stdin is None and isinstance(path, str):
        line = f"{line} {path}"
    return CommandResult.ok(line)


@COMMAND_REGISTRY.command(
    Verb.COMPARE, usage="diff <path1> <path2>", description="Compare two files line by line"
)
def diff(shell: "SandboxShell", args: ArgumentRecord, _: str | None) -> CommandResult:
    left, right = args.get("left"), args.get("right")
    if not isinstance(left, str) or not isinstance(right, str):
        return CommandResult.fail("Usage: diff <path1> <path2>")
    left_path, right_path = shell.resolve(left), shell.resolve(right)
    left_text = shell.store.read_file(left_path)
    right_text = shell.store.read_file(right_path)
    if left_text == right_text:
        return CommandResult.ok("Files are identical")

    left_lines, right_lines = split_lines(left_text), split_lines(right_text)
    report = [f"--- /{left_path}", f"+++ /{right_path}"]
    for idx in range(max(len(left_lines), len(right_lines))):
        number = idx + 1
        old = left_lines[idx] if idx < len(left_lines) else None
        new = right_lines[idx] if idx < len(right_lines) else None
        if old == new:
            continue
        if old is not None:
            report.append(f"- {number}: {old}")
        if new is not None:
            report.append(f"+ {number}: {new}")
    if len(report) == 2:
        report.append("(files differ only in trailing newline)")
    return CommandResult.ok(join_lines(report))
