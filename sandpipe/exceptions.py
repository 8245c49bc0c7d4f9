"""Exceptions raised by file stores and surfaced by the shell."""

from __future__ import annotations


class SandboxError(Exception):
    """Base class for every error a command may report to the user."""


class NodeNotFound(SandboxError):
    pass


class NodeExists(SandboxError):
    pass


class InvalidOperation(SandboxError):
    pass


class QuotaExceeded(SandboxError):
    """Raised when a write would push the store past its byte quota."""


__all__ = [
    "SandboxError",
    "NodeNotFound",
    "NodeExists",
    "InvalidOperation",
    "QuotaExceeded",
]
