import pytest

from sandpipe.path_utils import display_path, join_path, parent_and_name, resolve_path


@pytest.mark.parametrize(
    "cwd, path, expected",
    [
        ("", None, ""),
        ("docs", ".", "docs"),
        ("docs", "notes.txt", "docs/notes.txt"),
        ("docs", "./notes.txt", "docs/notes.txt"),
        ("docs", "/notes.txt", "notes.txt"),
        ("docs/a", "../b", "docs/b"),
        ("docs", "../../..", ""),
        ("", "a//b/", "a/b"),
    ],
)
def test_resolve_path(cwd, path, expected):
    assert resolve_path(cwd, path) == expected


def test_path_helpers():
    assert join_path("a", "b/c") == "a/b/c"
    assert join_path("", "x") == "x"
    assert parent_and_name("a/b/c.txt") == ("a/b", "c.txt")
    assert parent_and_name("") == ("", "")
    assert display_path("a/b") == "/a/b"
    assert display_path("") == "/"
