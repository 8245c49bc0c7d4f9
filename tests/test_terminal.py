import io
import os

from sandpipe import MemoryFileStore, SandboxShell
from sandpipe.terminal import StreamDisplay, TerminalSession, iter_keys, read_key


def setup_session() -> tuple[TerminalSession, io.StringIO]:
    stream = io.StringIO()
    shell = SandboxShell(MemoryFileStore(initial={"a.txt": "one\ntwo"}))
    return TerminalSession(shell, StreamDisplay(stream)), stream


def test_iter_keys_keeps_escape_sequences_whole():
    assert list(iter_keys("ab\x1b[Ac\r")) == ["a", "b", "\x1b[A", "c", "\r"]
    assert list(iter_keys("\x1b[3~")) == ["\x1b[3~"]


def test_session_runs_submitted_line():
    session, stream = setup_session()
    for key in "cat a.txt\r":
        assert session.feed(key)
    output = stream.getvalue()
    assert "one\r\ntwo\r\n" in output
    assert output.endswith("/$ ")


def test_session_renders_errors():
    session, stream = setup_session()
    for key in "cat nope.txt\r":
        session.feed(key)
    assert "Error: No such file or directory: /nope.txt" in stream.getvalue()


def test_session_exit_words_and_eof():
    session, _ = setup_session()
    assert all(session.feed(key) for key in "exit")
    assert session.feed("\r") is False

    session, _ = setup_session()
    assert session.feed("\x04") is False


def test_eof_with_pending_text_is_ignored():
    session, _ = setup_session()
    session.feed("l")
    assert session.feed("\x04") is True
    assert session.editor.buffer == "l"


def test_clear_verb_clears_display():
    session, stream = setup_session()
    for key in "clear\r":
        session.feed(key)
    assert "\x1b[2J" in stream.getvalue()


def test_read_key_keeps_split_multibyte_characters():
    session, _ = setup_session()
    read_fd, write_fd = os.pipe()
    try:
        encoded = "é".encode("utf-8")
        os.write(write_fd, encoded[:1])
        assert read_key(read_fd, session.decoder) == ""
        os.write(write_fd, encoded[1:])
        assert read_key(read_fd, session.decoder) == "é"
        os.close(write_fd)
        assert read_key(read_fd, session.decoder) is None
    finally:
        os.close(read_fd)
