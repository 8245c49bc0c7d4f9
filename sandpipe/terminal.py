"""Display surfaces and the raw-key interactive session."""

from __future__ import annotations

import codecs
import logging
import os
import re
import shutil
import signal
import sys
import termios
import tty
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from .editor import LineEditor
from .shell import CommandResult, SandboxShell

logger = logging.getLogger(__name__)

EOF_KEY = "\x04"
EXIT_WORDS = frozenset({"exit", "quit", ":q"})

_ESCAPE_RE = re.compile(r"\x1b(?:\[[0-9;?]*[@-~]|O.|.)?", re.DOTALL)


class Display:
    """Character surface the editor and session render to."""

    def write(self, text: str) -> None:
        raise NotImplementedError

    def write_line(self, text: str = "") -> None:
        self.write(text + "\r\n")

    def clear(self) -> None:
        raise NotImplementedError


class StreamDisplay(Display):
    """Display backed by a text stream, ``sys.stdout`` by default."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def clear(self) -> None:
        self.write("\x1b[2J\x1b[H")


@contextmanager
def raw_mode(fd: int) -> Iterator[None]:
    """Put the terminal behind ``fd`` in raw mode for the duration."""
    saved = termios.tcgetattr(fd)
    tty.setraw(fd)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def read_key(fd: int, decoder: codecs.IncrementalDecoder) -> str | None:
    """Read whatever bytes are ready; ``None`` means end of input.

    ``decoder`` holds back a multi-byte character split across two reads.
    """
    data = os.read(fd, 64)
    if not data:
        return None
    return decoder.decode(data)


def iter_keys(data: str) -> Iterator[str]:
    """Split a chunk of raw input into keys, keeping escape sequences whole."""
    pos = 0
    while pos < len(data):
        if data[pos] == "\x1b":
            match = _ESCAPE_RE.match(data, pos)
            end = match.end() if match else pos + 1
        else:
            end = pos + 1
        yield data[pos:end]
        pos = end


class TerminalSession:
    """Connects a line editor, a shell and a display into a REPL."""

    def __init__(self, shell: SandboxShell, display: Display | None = None) -> None:
        self.shell = shell
        self.display = display if display is not None else StreamDisplay()
        self.editor = LineEditor(self.display, prompt=lambda: f"{self.shell.pwd()}$ ")
        self.columns = shutil.get_terminal_size().columns
        self.decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        if self.shell.on_clear is None:
            self.shell.on_clear = self.display.clear

    def render(self, result: CommandResult) -> None:
        if result.success:
            if result.output:
                for line in result.output.split("\n"):
                    self.display.write_line(line)
        else:
            self.display.write_line(f"Error: {result.error}")

    def resize(self) -> None:
        self.columns = shutil.get_terminal_size().columns
        logger.debug("terminal resized to %d columns", self.columns)
        self.editor.redraw()

    def feed(self, key: str) -> bool:
        """Process one key; return ``False`` once the session should end."""
        if key == EOF_KEY and not self.editor.buffer:
            self.display.write_line()
            return False
        line = self.editor.handle(key)
        if line is None:
            return True
        if line in EXIT_WORDS:
            return False
        self.render(self.shell.exec(line))
        self.editor.show_prompt()
        return True

    def run(self, fd: int | None = None) -> int:
        fd = sys.stdin.fileno() if fd is None else fd
        previous = signal.signal(signal.SIGWINCH, lambda *_: self.resize())
        try:
            with raw_mode(fd):
                self.editor.show_prompt()
                while True:
                    data = read_key(fd, self.decoder)
                    if data is None:
                        break
                    if not all(self.feed(key) for key in iter_keys(data)):
                        break
        finally:
            signal.signal(signal.SIGWINCH, previous)
        return 0


__all__ = [
    "Display",
    "StreamDisplay",
    "TerminalSession",
    "iter_keys",
    "raw_mode",
    "read_key",
]
