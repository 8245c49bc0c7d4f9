from sandpipe.grammar import GRAMMARS, parse_args
from sandpipe.verbs import ALIASES, Verb, aliases_for, resolve_verb


def test_every_verb_has_a_grammar():
    assert set(GRAMMARS) == set(Verb)


def test_alias_resolution_is_case_insensitive():
    assert resolve_verb("DIR") is Verb.LIST_DIRECTORY
    assert resolve_verb("Rename") is Verb.MOVE
    assert resolve_verb("nope") is None
    assert all(resolve_verb(alias) is verb for alias, verb in ALIASES.items())


def test_aliases_for_lists_sorted_names():
    assert aliases_for(Verb.CONCATENATE) == ["less", "more", "type"]
    assert aliases_for(Verb.PRINT_WORKING_DIRECTORY) == []


def test_word_count_first_flag_is_exclusive():
    assert parse_args(Verb.WORD_COUNT, ["-l", "a.txt"]) == {
        "count_lines": True,
        "count_words": False,
        "count_chars": False,
        "path": "a.txt",
    }


def test_word_count_later_flags_only_add():
    record = parse_args(Verb.WORD_COUNT, ["-w", "-c"])
    assert record == {"count_lines": False, "count_words": True, "count_chars": True}


def test_word_count_without_flags_leaves_defaults():
    assert parse_args(Verb.WORD_COUNT, ["a.txt"]) == {"path": "a.txt"}


def test_boolean_flags_are_absent_unless_given():
    assert parse_args(Verb.SORT, ["names.txt"]) == {"path": "names.txt"}
    assert parse_args(Verb.SORT, ["-r", "-n", "names.txt"]) == {
        "reverse": True,
        "numeric": True,
        "path": "names.txt",
    }


def test_uniq_flags():
    record = parse_args(Verb.DEDUPLICATE, ["-c", "-i"])
    assert record == {"count": True, "ignore_case": True}


def test_head_second_positional_is_count():
    assert parse_args(Verb.HEAD, ["notes.txt", "3"]) == {"path": "notes.txt", "lines": 3}


def test_grep_explicit_pattern_flag():
    assert parse_args(Verb.SEARCH, ["-e", "-x", "a.txt"]) == {"pattern": "-x", "path": "a.txt"}


def test_write_joins_content():
    assert parse_args(Verb.WRITE, ["-a", "log.txt", "hello", "world"]) == {
        "append": True,
        "path": "log.txt",
        "content": "hello world",
    }
    assert parse_args(Verb.WRITE, ["empty.txt"]) == {"path": "empty.txt"}


def test_move_and_compare_slots():
    assert parse_args(Verb.MOVE, ["a", "b"]) == {"source": "a", "dest": "b"}
    assert parse_args(Verb.COMPARE, ["a"]) == {"left": "a"}


def test_rm_recursive_flag():
    assert parse_args(Verb.REMOVE, ["-r", "docs"]) == {"recursive": True, "path": "docs"}
