"""Sandbox shell package."""

from .common import CommandResult
from .core import SandboxShell
from .host import FilePicker, HostFilePicker, PickedFile

__all__ = ["SandboxShell", "CommandResult", "FilePicker", "HostFilePicker", "PickedFile"]
