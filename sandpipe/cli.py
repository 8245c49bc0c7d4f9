"""Command-line interface for sandpipe."""

from __future__ import annotations

import argparse
import locale
import logging
import sys
from pathlib import Path

from .adapters import DEFAULT_MEMORY_QUOTA, HostFileStore, MemoryFileStore
from .shell import CommandResult, HostFilePicker, SandboxShell
from .store import FileStore
from .terminal import EXIT_WORDS, TerminalSession

logger = logging.getLogger(__name__)


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Persist the sandbox in this host directory (default: in memory).",
    )
    parser.add_argument(
        "--quota",
        type=int,
        default=DEFAULT_MEMORY_QUOTA,
        help="Byte quota for the in-memory store.",
    )
    parser.add_argument(
        "--host-dir",
        type=Path,
        default=Path.cwd(),
        help="Host directory used by import and export.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Prefix results with a description of the parsed pipeline.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics written to stderr.",
    )


def _build_store(args: argparse.Namespace) -> FileStore:
    if args.root is not None:
        logger.info("using host-backed store at %s", args.root)
        return HostFileStore(args.root)
    return MemoryFileStore(quota=args.quota)


def _build_shell(args: argparse.Namespace) -> SandboxShell:
    return SandboxShell(
        _build_store(args),
        picker=HostFilePicker(args.host_dir),
        debug=args.debug,
    )


def _emit(result: CommandResult) -> None:
    if result.success:
        if result.output:
            sys.stdout.write(result.output.rstrip("\n") + "\n")
    else:
        sys.stderr.write(f"Error: {result.error}\n")


def _run_exec(args: argparse.Namespace) -> int:
    shell = _build_shell(args)
    result = shell.exec_script(args.command)
    _emit(result)
    return 0 if result.success else 1


def _run_shell(args: argparse.Namespace) -> int:
    shell = _build_shell(args)
    if sys.stdin.isatty() and sys.stdout.isatty():
        return TerminalSession(shell).run()
    try:
        while True:
            line = input(f"{shell.pwd()}$ ")
            if line.strip() in EXIT_WORDS:
                return 0
            _emit(shell.exec(line))
    except (EOFError, KeyboardInterrupt):
        return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="sandpipe")
    subparsers = parser.add_subparsers(dest="command_name", required=True)

    exec_parser = subparsers.add_parser("exec", help="Run one or more command lines")
    _add_common_flags(exec_parser)
    exec_parser.add_argument("command", help="Command string to execute")
    exec_parser.set_defaults(func=_run_exec)

    shell_parser = subparsers.add_parser("shell", help="Start an interactive shell")
    _add_common_flags(shell_parser)
    shell_parser.set_defaults(func=_run_shell)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.debug("falling back to the C collation locale")
    exit_code = args.func(args)
    raise SystemExit(exit_code)


__all__ = ["main"]
