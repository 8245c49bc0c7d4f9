"""Quote-aware tokenizer and pipe splitter.

Both scans share the same quoting rules: ``"`` or ``'`` opens a span that
only the same character closes, the quote characters themselves are not
content, and an unterminated span runs to the end of input. There is no
escape character.

A quoted span never produces a token on its own, so ``""`` yields no
token at all.
"""

from __future__ import annotations

from collections.abc import Iterator

QUOTES = frozenset({'"', "'"})
SEPARATORS = frozenset({" ", "\t"})
PIPE = "|"


def _scan(text: str) -> Iterator[tuple[str, bool]]:
    """Yield ``(char, quoted)`` for every content character of ``text``.

    Opening and closing quote characters are consumed and not yielded.
    """
    quote: str | None = None
    for char in text:
        if quote is not None:
            if char == quote:
                quote = None
            else:
                yield char, True
        elif char in QUOTES:
            quote = char
        else:
            yield char, False


def tokenize(line: str) -> list[str]:
    tokens: list[str] = []
    current: list[str] = []
    for char, quoted in _scan(line):
        if not quoted and char in SEPARATORS:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        tokens.append("".join(current))
    return tokens


def split_pipeline(line: str) -> list[str]:
    """Split ``line`` on pipe characters that sit outside quotes.

    Unlike :func:`tokenize` the segments keep their quote characters so they
    can be tokenized again on their own.
    """
    segments: list[str] = []
    current: list[str] = []
    quote: str | None = None
    for char in line:
        if quote is not None:
            if char == quote:
                quote = None
        elif char in QUOTES:
            quote = char
        elif char == PIPE:
            segments.append("".join(current))
            current = []
            continue
        current.append(char)
    segments.append("".join(current))
    return segments


__all__ = ["tokenize", "split_pipeline", "PIPE"]
