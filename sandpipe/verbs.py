"""The closed command vocabulary and its alias table."""

from __future__ import annotations

from enum import Enum


class Verb(str, Enum):
    HELP = "help"
    LIST_DIRECTORY = "ls"
    CONCATENATE = "cat"
    READ = "read_file"
    MAKE_DIRECTORY = "mkdir"
    CREATE_EMPTY = "touch"
    REMOVE = "rm"
    REMOVE_DIRECTORY = "rmdir"
    MOVE = "mv"
    COPY = "cp"
    PRINT_WORKING_DIRECTORY = "pwd"
    CHANGE_DIRECTORY = "cd"
    CLEAR_SCREEN = "clear"
    TREE = "tree"
    HEAD = "head"
    TAIL = "tail"
    SEARCH = "grep"
    WORD_COUNT = "wc"
    COMPARE = "diff"
    SORT = "sort"
    DEDUPLICATE = "uniq"
    ECHO = "echo"
    WRITE = "write"
    IMPORT = "import"
    EXPORT = "export"
    STORAGE_INFO = "storage"
    RESET_ALL = "reset"

    def __str__(self) -> str:
        return self.value


ALIASES: dict[str, Verb] = {
    "list": Verb.LIST_DIRECTORY,
    "dir": Verb.LIST_DIRECTORY,
    "less": Verb.CONCATENATE,
    "more": Verb.CONCATENATE,
    "type": Verb.CONCATENATE,
    "find": Verb.SEARCH,
    "read": Verb.READ,
    "write_file": Verb.WRITE,
    "compare": Verb.COMPARE,
    "copy": Verb.COPY,
    "move": Verb.MOVE,
    "rename": Verb.MOVE,
    "del": Verb.REMOVE,
    "md": Verb.MAKE_DIRECTORY,
    "cls": Verb.CLEAR_SCREEN,
    "df": Verb.STORAGE_INFO,
}

_BY_NAME: dict[str, Verb] = {verb.value: verb for verb in Verb}


def resolve_verb(name: str) -> Verb | None:
    """Map a command word (case-insensitive) to its canonical verb."""
    key = name.lower()
    return _BY_NAME.get(key) or ALIASES.get(key)


def aliases_for(verb: Verb) -> list[str]:
    return sorted(alias for alias, target in ALIASES.items() if target is verb)


def is_known_word(name: str) -> bool:
    return resolve_verb(name) is not None


__all__ = ["Verb", "ALIASES", "resolve_verb", "aliases_for", "is_known_word"]
