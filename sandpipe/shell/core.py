"""Core SandboxShell implementation: the pipeline executor."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from ..exceptions import SandboxError
from ..path_utils import display_path, resolve_path
from ..shell_parser import Pipeline, Stage, describe_pipeline, parse_pipeline
from ..store import FileStore
from ..verbs import Verb, is_known_word, resolve_verb
from .common import CommandResult
from .host import FilePicker
from .registry import COMMAND_REGISTRY, VerbSpec

logger = logging.getLogger(__name__)

Fallback = Callable[[str], CommandResult]


class SandboxShell:
    """Parses command lines and runs them against a file store.

    One instance is one session: it owns the current directory and the
    debug toggle, so several shells can share a store independently.
    """

    def __init__(
        self,
        store: FileStore,
        *,
        cwd: str = "",
        picker: FilePicker | None = None,
        fallback: Fallback | None = None,
        allowed_commands: Iterable[str] | None = None,
        max_output_bytes: int | None = None,
        debug: bool = False,
        on_clear: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.cwd = resolve_path("", cwd)
        self.picker = picker
        self.fallback = fallback
        self.allowed_commands: set[Verb] | None = None
        if allowed_commands is not None:
            self.allowed_commands = {
                verb for verb in map(resolve_verb, allowed_commands) if verb is not None
            }
        self.max_output_bytes = max_output_bytes
        self.debug = debug
        self.on_clear = on_clear
        self.commands: dict[Verb, VerbSpec] = {}
        self._register_builtin_commands()

    # ------------------------------------------------------------------
    # Command registration
    # ------------------------------------------------------------------
    def _register_builtin_commands(self) -> None:
        # Import command modules for their side effects (registration)
        from . import commands  # noqa: F401

        for spec in COMMAND_REGISTRY.iter_commands():
            self.commands[spec.verb] = spec

    def available_commands(self) -> list[VerbSpec]:
        return sorted(self.commands.values(), key=lambda spec: spec.verb.value)

    # ------------------------------------------------------------------
    # Session helpers used by handlers
    # ------------------------------------------------------------------
    def resolve(self, path: str | None) -> str:
        return resolve_path(self.cwd, path)

    def pwd(self) -> str:
        return display_path(self.cwd)

    def clear_screen(self) -> None:
        if self.on_clear is not None:
            self.on_clear()

    def _enforce_output_limit(self, result: CommandResult) -> CommandResult:
        if self.max_output_bytes is None:
            return result
        if len(result.output.encode("utf-8")) <= self.max_output_bytes:
            return result
        return CommandResult.fail(f"Output limit ({self.max_output_bytes} bytes) exceeded")

    # ------------------------------------------------------------------
    # Dispatcher
    # ------------------------------------------------------------------
    def exec(self, line: str) -> CommandResult:
        """Run one input line and return the visible result."""
        if not line.strip():
            return CommandResult.ok()
        pipeline = parse_pipeline(line)
        if not pipeline.is_pipeline:
            if self.fallback is not None:
                return self.fallback(line)
            return CommandResult.fail(_not_a_command(line))
        if pipeline.error is not None:
            return CommandResult.fail(pipeline.error)
        logger.debug("running %s", describe_pipeline(pipeline))
        result = self.execute(pipeline)
        if self.debug:
            description = f"[{describe_pipeline(pipeline)}]"
            result.output = f"{description}\n{result.output}" if result.output else description
        return result

    def exec_script(self, script: str) -> CommandResult:
        """Run each non-empty line in turn, stopping at the first failure."""
        last_result = CommandResult.ok()
        for line in filter(None, (raw.strip() for raw in script.splitlines())):
            last_result = self.exec(line)
            if not last_result.success:
                return last_result
        return last_result

    def execute(self, pipeline: Pipeline) -> CommandResult:
        """Run the stages in order, feeding each output to the next stage."""
        if pipeline.error is not None:
            return CommandResult.fail(pipeline.error)
        stdin: str | None = None
        result = CommandResult.ok()
        for index, stage in enumerate(pipeline.stages):
            result = self._run_stage(stage, stdin)
            if not result.success:
                logger.debug("stage %d (%s) failed: %s", index, stage.verb, result.error)
                return result
            stdin = result.output
        return result

    def _run_stage(self, stage: Stage, stdin: str | None) -> CommandResult:
        spec = self.commands.get(stage.verb)
        if spec is None:
            return CommandResult.fail(f"Unknown command: {stage.verb}")
        if self.allowed_commands is not None and stage.verb not in self.allowed_commands:
            return CommandResult.fail(f"Command '{stage.verb}' is disabled in this shell")
        piped = stdin if spec.pipe_aware else None
        logger.debug("stage %s args=%r piped=%s", stage.verb, stage.args, piped is not None)
        try:
            result = spec.handler(self, dict(stage.args), piped)
        except SandboxError as exc:
            return CommandResult.fail(str(exc))
        except Exception as exc:  # unexpected failure path
            logger.warning("%s failed unexpectedly", stage.verb, exc_info=True)
            return CommandResult.fail(f"{stage.verb} failed: {exc}")
        return self._enforce_output_limit(result)


def _not_a_command(line: str) -> str:
    word = line.split()[0]
    if is_known_word(word):
        return f"Not a command: {line.strip()}"
    return f"Unknown command: {word}. Type 'help' for available commands."


__all__ = ["SandboxShell", "Fallback"]
