"""Per-verb argument grammars.

Every grammar scans the tokens after the verb left to right and returns an
argument record. Tokens starting with ``-`` are flags; anything else fills
the next free positional slot. Absent keys mean "use the default".
"""

from __future__ import annotations

import re
from collections.abc import Callable

from .verbs import Verb

ArgValue = str | int | bool | list[str]
ArgumentRecord = dict[str, ArgValue]
Grammar = Callable[[list[str]], ArgumentRecord]

_NUMERIC_FLAG_RE = re.compile(r"^-(\d+)$")
_NUMBER_RE = re.compile(r"^\d+$")

GRAMMARS: dict[Verb, Grammar] = {}


def grammar(*verbs: Verb) -> Callable[[Grammar], Grammar]:
    def decorator(func: Grammar) -> Grammar:
        for verb in verbs:
            GRAMMARS[verb] = func
        return func

    return decorator


def parse_args(verb: Verb, tokens: list[str]) -> ArgumentRecord:
    return GRAMMARS[verb](list(tokens))


def parse_count(token: str) -> int | None:
    """Return ``token`` as a non-negative integer, or ``None``."""
    if _NUMBER_RE.match(token):
        return int(token)
    return None


def is_flag(token: str) -> bool:
    return token.startswith("-") and token != "-"


def _positionals(tokens: list[str]) -> list[str]:
    return [token for token in tokens if not is_flag(token)]


def _assign(record: ArgumentRecord, slots: tuple[str, ...], tokens: list[str]) -> None:
    for slot, token in zip(slots, _positionals(tokens)):
        record[slot] = token


@grammar(
    Verb.HELP,
    Verb.PRINT_WORKING_DIRECTORY,
    Verb.CLEAR_SCREEN,
    Verb.STORAGE_INFO,
    Verb.RESET_ALL,
)
def _optional_topic(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    # help accepts an optional topic; the rest ignore stray words
    _assign(record, ("topic",), tokens)
    return record


@grammar(
    Verb.READ,
    Verb.MAKE_DIRECTORY,
    Verb.CREATE_EMPTY,
    Verb.REMOVE_DIRECTORY,
    Verb.CHANGE_DIRECTORY,
    Verb.TREE,
    Verb.EXPORT,
)
def _single_path(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    _assign(record, ("path",), tokens)
    return record


@grammar(Verb.LIST_DIRECTORY)
def _list_directory(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    for token in tokens:
        if token in ("-l", "--long"):
            record["long"] = True
    _assign(record, ("path",), tokens)
    return record


@grammar(Verb.REMOVE)
def _remove(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    for token in tokens:
        if token in ("-r", "-rf", "-R", "--recursive"):
            record["recursive"] = True
    _assign(record, ("path",), tokens)
    return record


@grammar(Verb.MOVE, Verb.COPY)
def _source_dest(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    _assign(record, ("source", "dest"), tokens)
    return record


@grammar(Verb.COMPARE)
def _compare(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    _assign(record, ("left", "right"), tokens)
    return record


@grammar(Verb.CONCATENATE)
def _concatenate(tokens: list[str]) -> ArgumentRecord:
    paths = _positionals(tokens)
    if not paths:
        return {}
    if len(paths) == 1:
        return {"path": paths[0]}
    return {"paths": paths}


@grammar(Verb.IMPORT)
def _import(tokens: list[str]) -> ArgumentRecord:
    paths = _positionals(tokens)
    return {"paths": paths} if paths else {}


@grammar(Verb.SEARCH)
def _search(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    positionals: list[str] = []
    idx = 0
    while idx < len(tokens):
        token = tokens[idx]
        if token in ("-i", "--ignore-case"):
            record["case_insensitive"] = True
        elif token in ("-v", "--invert-match"):
            record["invert_match"] = True
        elif token in ("-e", "--regexp") and idx + 1 < len(tokens):
            record["pattern"] = tokens[idx + 1]
            idx += 1
        elif not is_flag(token):
            positionals.append(token)
        idx += 1
    slots = ("path",) if "pattern" in record else ("pattern", "path")
    for slot, token in zip(slots, positionals):
        record[slot] = token
    return record


@grammar(Verb.HEAD, Verb.TAIL)
def _line_range(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    idx = 0
    while idx < len(tokens):
        token = tokens[idx]
        shorthand = _NUMERIC_FLAG_RE.match(token)
        if token in ("-n", "--lines") and idx + 1 < len(tokens):
            count = parse_count(tokens[idx + 1])
            if count is not None:
                record["lines"] = count
            idx += 2
            continue
        if shorthand:
            record["lines"] = int(shorthand.group(1))
        elif not is_flag(token):
            if "path" not in record:
                record["path"] = token
            else:
                count = parse_count(token)
                if count is not None:
                    record["lines"] = count
        idx += 1
    return record


@grammar(Verb.SORT)
def _sort(tokens: list[str]) -> ArgumentRecord:
    flags = {
        "-r": "reverse",
        "--reverse": "reverse",
        "-n": "numeric",
        "--numeric": "numeric",
        "-u": "unique",
        "--unique": "unique",
        "-f": "ignore_case",
        "--ignore-case": "ignore_case",
    }
    return _flags_and_path(tokens, flags)


@grammar(Verb.DEDUPLICATE)
def _deduplicate(tokens: list[str]) -> ArgumentRecord:
    flags = {
        "-c": "count",
        "--count": "count",
        "-d": "duplicates_only",
        "--repeated": "duplicates_only",
        "-u": "unique_only",
        "--unique": "unique_only",
        "-i": "ignore_case",
        "--ignore-case": "ignore_case",
    }
    return _flags_and_path(tokens, flags)


def _flags_and_path(tokens: list[str], flags: dict[str, str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    for token in tokens:
        if token in flags:
            record[flags[token]] = True
    _assign(record, ("path",), tokens)
    return record


_COUNT_FAMILY = {
    "-l": "count_lines",
    "--lines": "count_lines",
    "-w": "count_words",
    "--words": "count_words",
    "-c": "count_chars",
    "-m": "count_chars",
    "--chars": "count_chars",
}


@grammar(Verb.WORD_COUNT)
def _word_count(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    selected = False
    for token in tokens:
        field_name = _COUNT_FAMILY.get(token)
        if field_name is None:
            continue
        if not selected:
            for other in ("count_lines", "count_words", "count_chars"):
                record[other] = False
            selected = True
        record[field_name] = True
    _assign(record, ("path",), tokens)
    return record


@grammar(Verb.ECHO)
def _echo(tokens: list[str]) -> ArgumentRecord:
    return {"text": " ".join(tokens)} if tokens else {}


@grammar(Verb.WRITE)
def _write(tokens: list[str]) -> ArgumentRecord:
    record: ArgumentRecord = {}
    idx = 0
    while idx < len(tokens) and is_flag(tokens[idx]):
        if tokens[idx] in ("-a", "--append"):
            record["append"] = True
        idx += 1
    if idx < len(tokens):
        record["path"] = tokens[idx]
        rest = tokens[idx + 1 :]
        if rest:
            record["content"] = " ".join(rest)
    return record


_missing = set(Verb) - set(GRAMMARS)
if _missing:  # pragma: no cover - guards the table at import time
    raise RuntimeError(f"Verbs without a grammar: {sorted(v.value for v in _missing)}")


__all__ = [
    "ArgumentRecord",
    "ArgValue",
    "GRAMMARS",
    "parse_args",
    "parse_count",
    "is_flag",
]
