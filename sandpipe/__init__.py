"""sandpipe package: a pipe-capable mini shell over a sandboxed file store."""

from .adapters import HostFileStore, MemoryFileStore
from .editor import EditorState, LineEditor
from .exceptions import InvalidOperation, NodeExists, NodeNotFound, QuotaExceeded, SandboxError
from .shell import CommandResult, HostFilePicker, SandboxShell
from .shell_parser import Pipeline, Stage, describe_pipeline, looks_like_pipeline, parse_pipeline
from .store import FileStore, StorageInfo, StoreEntry
from .tokenizer import tokenize
from .verbs import Verb, resolve_verb

__all__ = [
    "SandboxShell",
    "CommandResult",
    "HostFilePicker",
    "LineEditor",
    "EditorState",
    "Pipeline",
    "Stage",
    "parse_pipeline",
    "looks_like_pipeline",
    "describe_pipeline",
    "tokenize",
    "Verb",
    "resolve_verb",
    "FileStore",
    "StoreEntry",
    "StorageInfo",
    "MemoryFileStore",
    "HostFileStore",
    "SandboxError",
    "NodeNotFound",
    "NodeExists",
    "InvalidOperation",
    "QuotaExceeded",
]
