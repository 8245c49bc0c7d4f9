import pytest

from sandpipe import MemoryFileStore, SandboxShell
from sandpipe.shell import CommandResult


def setup_shell(**kwargs) -> SandboxShell:
    store = MemoryFileStore(
        initial={
            "workspace/app.py": "print('hi')\n",
            "workspace/README.md": "hello world\nsecond line\nHELLO again\n",
            "notes.txt": "b\na\nb\n",
        }
    )
    return SandboxShell(store, **kwargs)


def test_ls_and_cd():
    shell = setup_shell()
    result = shell.exec("ls /workspace")
    assert result.success
    assert result.output == "README.md  app.py"
    assert shell.exec("cd workspace").success
    assert shell.exec("pwd").output == "/workspace"
    assert shell.exec("cd ..").success
    assert shell.exec("pwd").output == "/"


def test_ls_lists_directories_first_and_only_children():
    shell = setup_shell()
    assert shell.exec("ls").output == "workspace/  notes.txt"
    long = shell.exec("ls -l").output.splitlines()
    assert long == ["d /workspace", "- /notes.txt"]


def test_cd_into_file_fails():
    shell = setup_shell()
    result = shell.exec("cd notes.txt")
    assert not result.success
    assert "Not a directory" in result.error


def test_tree_renders_nesting():
    shell = setup_shell()
    shell.exec("mkdir workspace/lib")
    output = shell.exec("tree").output.splitlines()
    assert output == [
        "/",
        "├── workspace/",
        "│   ├── lib/",
        "│   ├── README.md",
        "│   └── app.py",
        "└── notes.txt",
    ]


def test_write_sort_uniq_pipeline():
    shell = setup_shell()
    assert shell.exec("write scratch.txt b").success
    shell.store.write_file("scratch.txt", "b\na\nb")
    result = shell.exec("sort scratch.txt | uniq")
    assert result.success
    assert result.output == "a\nb"


def test_uniq_only_drops_adjacent_duplicates():
    shell = setup_shell()
    assert shell.exec("uniq notes.txt").output == "b\na\nb"


def test_grep_direct_and_piped():
    shell = setup_shell()
    direct = shell.exec("grep hello workspace/README.md")
    assert direct.output == "1:hello world\n3:HELLO again"
    piped = shell.exec("cat workspace/README.md | grep hello")
    assert piped.output == "hello world\nHELLO again"
    inverted = shell.exec("cat workspace/README.md | grep -v hello")
    assert inverted.output == "second line"


def test_grep_invalid_pattern():
    shell = setup_shell()
    result = shell.exec("grep ( notes.txt")
    assert not result.success
    assert "Invalid pattern" in result.error


def test_write_from_stdin_and_append():
    shell = setup_shell()
    assert shell.exec("cat notes.txt | sort | write sorted.txt").output == "Written to: /sorted.txt"
    assert shell.exec("cat sorted.txt").output == "a\nb\nb"
    shell.exec("write -a sorted.txt !")
    assert shell.store.read_file("sorted.txt") == "a\nb\nb!"


def test_write_without_content_creates_empty_file():
    shell = setup_shell()
    assert shell.exec("write empty.txt").success
    assert shell.store.read_file("empty.txt") == ""


def test_wc_counts_newlines_words_and_chars():
    shell = setup_shell()
    assert shell.exec("wc notes.txt").output == "       3      3      6 notes.txt"
    assert shell.exec("cat notes.txt | wc -l").output == "       3"


def test_sort_flags():
    shell = setup_shell()
    shell.store.create_file("nums.txt", "10\n9\n100\n9\n")
    assert shell.exec("sort -n nums.txt").output == "9\n9\n10\n100"
    assert shell.exec("sort -n -r -u nums.txt").output == "100\n10\n9"


def test_diff_reports_line_changes():
    shell = setup_shell()
    shell.store.create_file("left.txt", "a\nb\n")
    shell.store.create_file("right.txt", "a\nc\nd\n")
    assert shell.exec("diff left.txt left.txt").output == "Files are identical"
    report = shell.exec("diff left.txt right.txt").output.splitlines()
    assert report == [
        "--- /left.txt",
        "+++ /right.txt",
        "- 2: b",
        "+ 2: c",
        "+ 3: d",
    ]


def test_pipeline_halts_on_first_failure():
    shell = setup_shell()
    result = shell.exec("cat missing.txt | sort | write out.txt")
    assert not result.success
    assert "missing.txt" in result.error
    assert not shell.store.exists("out.txt")


def test_non_pipe_aware_stage_ignores_stdin():
    shell = setup_shell()
    result = shell.exec("cat notes.txt | mkdir")
    assert not result.success
    assert result.error == "Usage: mkdir <path>"


def test_parse_errors_are_reported():
    shell = setup_shell()
    assert "requires a file path" in shell.exec("cat | sort").error
    assert "Unknown command" in shell.exec("cat notes.txt | bogus").error


def test_natural_language_goes_to_fallback():
    seen = []

    def fallback(line: str) -> CommandResult:
        seen.append(line)
        return CommandResult.ok("routed")

    shell = setup_shell(fallback=fallback)
    assert shell.exec("What is in notes.txt?").output == "routed"
    assert seen == ["What is in notes.txt?"]


def test_unknown_word_without_fallback():
    shell = setup_shell()
    result = shell.exec("frobnicate now")
    assert not result.success
    assert result.error.startswith("Unknown command: frobnicate")


def test_debug_prefixes_description():
    shell = setup_shell(debug=True)
    result = shell.exec("echo hi")
    assert result.output == "[echo(text='hi')]\nhi"


def test_allowed_commands_restricts_verbs():
    shell = setup_shell(allowed_commands=["cat", "ls"])
    assert shell.exec("list").success
    result = shell.exec("rm notes.txt")
    assert not result.success
    assert "disabled" in result.error
    assert shell.store.exists("notes.txt")


def test_output_limit():
    shell = setup_shell(max_output_bytes=4)
    result = shell.exec("cat notes.txt")
    assert not result.success
    assert "Output limit" in result.error


def test_output_limit_counts_bytes():
    shell = setup_shell(max_output_bytes=4)
    assert shell.exec("echo abcd").success
    result = shell.exec("echo ééé")
    assert not result.success
    assert "Output limit" in result.error


def test_write_append_extends_file():
    shell = setup_shell()
    shell.exec("write log.txt one")
    shell.exec("write --append log.txt two")
    assert shell.store.read_file("log.txt") == "onetwo"


def test_unexpected_handler_error_is_contained(monkeypatch):
    shell = setup_shell()

    def broken(path):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(shell.store, "read_file", broken)
    result = shell.exec("cat notes.txt")
    assert not result.success
    assert result.error == "cat failed: disk on fire"


def test_file_operations():
    shell = setup_shell()
    assert shell.exec("touch new.txt").output == "Created file: /new.txt"
    assert shell.exec("cp notes.txt workspace").output == (
        "Copied: /notes.txt -> /workspace/notes.txt"
    )
    assert shell.exec("mv new.txt renamed.txt").success
    assert not shell.store.exists("new.txt")
    assert shell.store.exists("renamed.txt")
    assert shell.exec("rm workspace").error.startswith("Is a directory")
    assert shell.exec("rm -r workspace").success
    assert not shell.store.exists("workspace")


def test_touch_keeps_existing_content():
    shell = setup_shell()
    shell.exec("touch notes.txt")
    assert shell.store.read_file("notes.txt") == "b\na\nb\n"


def test_help_lists_commands_and_topics():
    shell = setup_shell()
    listing = shell.exec("help").output
    assert "grep <pattern> <path>" in listing
    assert "aliases: less, more, type" in listing
    topic = shell.exec("help find").output
    assert topic.startswith("grep - ")
    assert "Aliases: find" in topic


def test_storage_and_reset():
    shell = setup_shell()
    assert shell.exec("df").output.startswith("Storage: 0.00 MB / 50.00 MB")
    shell.exec("cd workspace")
    assert shell.exec("reset").success
    assert shell.pwd() == "/"
    assert shell.store.list_entries() == []


def test_clear_calls_hook():
    cleared = []
    shell = setup_shell(on_clear=lambda: cleared.append(True))
    assert shell.exec("cls").success
    assert cleared == [True]


def test_exec_script_stops_at_failure():
    shell = setup_shell()
    result = shell.exec_script("mkdir a\ncat nope.txt\nmkdir b")
    assert not result.success
    assert shell.store.is_dir("a")
    assert not shell.store.exists("b")


@pytest.mark.parametrize("line", ["", "   "])
def test_blank_lines_are_no_ops(line):
    assert setup_shell().exec(line) == CommandResult.ok()
