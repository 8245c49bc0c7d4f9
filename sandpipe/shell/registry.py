"""Registry mapping verbs to their handlers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Iterable

from ..verbs import Verb
from .common import StageHandler


@dataclass(slots=True)
class VerbSpec:
    verb: Verb
    handler: StageHandler
    usage: str = ""
    description: str = ""
    pipe_aware: bool = False


class CommandRegistry:
    """Dispatch table from :class:`Verb` to handler."""

    def __init__(self) -> None:
        self._commands: dict[Verb, VerbSpec] = {}

    def register(
        self,
        verb: Verb,
        handler: StageHandler,
        *,
        usage: str = "",
        description: str = "",
        pipe_aware: bool = False,
    ) -> StageHandler:
        self._commands[verb] = VerbSpec(verb, handler, usage, description, pipe_aware)
        return handler

    def command(
        self,
        verb: Verb,
        *,
        usage: str = "",
        description: str = "",
        pipe_aware: bool = False,
    ) -> Callable[[StageHandler], StageHandler]:
        """Decorator variant for registering verb handlers.

        Pipe-aware handlers receive the previous stage's output as ``stdin``;
        every other handler always sees ``None``.
        """

        def decorator(func: StageHandler) -> StageHandler:
            return self.register(
                verb, func, usage=usage, description=description, pipe_aware=pipe_aware
            )

        return decorator

    def get(self, verb: Verb) -> VerbSpec | None:
        return self._commands.get(verb)

    def iter_commands(self) -> Iterable[VerbSpec]:
        return tuple(self._commands.values())


COMMAND_REGISTRY = CommandRegistry()


__all__ = ["COMMAND_REGISTRY", "CommandRegistry", "VerbSpec"]
