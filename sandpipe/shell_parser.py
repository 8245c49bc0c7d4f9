"""Classify input lines and parse them into pipelines of stages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .grammar import ArgumentRecord, parse_args
from .tokenizer import PIPE, split_pipeline, tokenize
from .verbs import Verb, is_known_word, resolve_verb

# The first stage has nothing piped into it, so these must name a file.
REQUIRES_SOURCE = frozenset({Verb.CONCATENATE, Verb.SEARCH, Verb.READ})

_NATURAL_LANGUAGE_RE = re.compile(r"\?|\bplease\b", re.IGNORECASE)


@dataclass(frozen=True)
class Stage:
    verb: Verb
    args: ArgumentRecord = field(default_factory=dict)


@dataclass(frozen=True)
class Pipeline:
    stages: tuple[Stage, ...] = ()
    is_pipeline: bool = False
    error: str | None = None

    @property
    def runnable(self) -> bool:
        return self.is_pipeline and self.error is None and bool(self.stages)


def _first_word(text: str) -> str:
    words = text.split()
    return words[0] if words else ""


def looks_like_pipeline(line: str) -> bool:
    """Tell shell commands apart from natural-language requests."""
    trimmed = line.strip()
    if not trimmed:
        return False
    if PIPE in trimmed:
        first_segment = trimmed.split(PIPE, 1)[0]
        return is_known_word(_first_word(first_segment))
    if not is_known_word(_first_word(trimmed)):
        return False
    return _NATURAL_LANGUAGE_RE.search(trimmed) is None


def parse_stage(segment: str) -> Stage | None:
    tokens = tokenize(segment.strip())
    if not tokens:
        return None
    verb = resolve_verb(tokens[0])
    if verb is None:
        return None
    return Stage(verb=verb, args=parse_args(verb, tokens[1:]))


def parse_pipeline(line: str) -> Pipeline:
    """Parse ``line`` into a :class:`Pipeline`.

    A line that is not command syntax yields ``is_pipeline=False`` with no
    error; that is a routing signal rather than a failure.
    """
    trimmed = line.strip()
    if not looks_like_pipeline(trimmed):
        return Pipeline()

    segments = [segment.strip() for segment in split_pipeline(trimmed)]
    segments = [segment for segment in segments if segment]
    if not segments:
        return Pipeline()

    stages: list[Stage] = []
    for segment in segments:
        stage = parse_stage(segment)
        if stage is None:
            return Pipeline(is_pipeline=True, error=f"Unknown command: {_first_word(segment)}")
        stages.append(stage)

    first = stages[0]
    if first.verb in REQUIRES_SOURCE and "path" not in first.args and "paths" not in first.args:
        return Pipeline(
            is_pipeline=True,
            error=f"First command ({first.verb}) requires a file path",
        )
    return Pipeline(stages=tuple(stages), is_pipeline=True)


def describe_pipeline(pipeline: Pipeline) -> str:
    """Render a parsed pipeline as ``verb(key=value, ...) | ...``."""
    if not pipeline.runnable:
        return ""
    parts = []
    for stage in pipeline.stages:
        rendered = ", ".join(f"{key}={value!r}" for key, value in stage.args.items())
        parts.append(f"{stage.verb}({rendered})")
    return " | ".join(parts)


__all__ = [
    "Stage",
    "Pipeline",
    "REQUIRES_SOURCE",
    "looks_like_pipeline",
    "parse_stage",
    "parse_pipeline",
    "describe_pipeline",
]
