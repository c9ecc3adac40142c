"""Pattern-driven lexer.

Patterns are tried strictly in the order given and the first one that
matches at the cursor wins, even when a later pattern would match more.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from descent.errors import LexError
from descent.source import Position, Span
from descent.tokens import ByteRegex, TokenData, TokenPattern

logger = logging.getLogger(__name__)


class Lexer:
    """Tokenizes input against an ordered list of token patterns."""

    def __init__(self, patterns: Iterable[TokenPattern], filename: str = "<input>") -> None:
        self.patterns: tuple[TokenPattern, ...] = tuple(patterns)
        self.filename = filename
        self.source = ""
        self._encoded = b""
        self.pos = 0
        self.byte_pos = 0
        self.line = 1
        self.col = 1

    def begin(self, source: str) -> None:
        """Reset the lexer onto a new input, discarding any prior stream."""
        self.source = source
        self._encoded = source.encode("utf-8") if self._wants_bytes() else b""
        self.pos = 0
        self.byte_pos = 0
        self.line = 1
        self.col = 1
        logger.debug(
            "lexing %s: %d chars, %d patterns", self.filename, len(source), len(self.patterns)
        )

    def next(self) -> TokenData | None:
        """Produce the next token, or None at end of input."""
        if self.pos >= len(self.source):
            return None

        for pattern in self.patterns:
            length = pattern.match(self.source, self.pos, self._encoded, self.byte_pos)
            if length is not None:
                return self._emit(pattern, length)

        ch = self.source[self.pos]
        logger.debug("no pattern matches %r at %d:%d", ch, self.line, self.col)
        raise LexError(ch, self.line, self.col, self.filename)

    def skip(self) -> str:
        """Step over one character without producing a token."""
        ch = self.source[self.pos]
        self._advance(ch)
        return ch

    def all(self) -> list[TokenData]:
        """Drain the remaining input into a token list."""
        tokens = []
        while (token := self.next()) is not None:
            tokens.append(token)
        return tokens

    def __iter__(self) -> Iterator[TokenData]:
        while (token := self.next()) is not None:
            yield token

    def _wants_bytes(self) -> bool:
        return any(isinstance(p.matcher, ByteRegex) for p in self.patterns)

    def _emit(self, pattern: TokenPattern, length: int) -> TokenData:
        start = self.pos
        byte_start = self.byte_pos
        text = self.source[start:start + length]
        position = Position(self.line, self.col)
        self._advance(text)
        return TokenData(
            kind=pattern.kind,
            text=text,
            label=pattern.label,
            position=position,
            span=Span(byte_start, self.byte_pos),
            offset=start,
        )

    def _advance(self, text: str) -> None:
        self.pos += len(text)
        self.byte_pos += len(text.encode("utf-8"))
        newlines = text.count("\n")
        if newlines:
            self.line += newlines
            self.col = len(text) - text.rfind("\n")
        else:
            self.col += len(text)


def tokenize(source: str, patterns: Iterable[TokenPattern], filename: str = "<input>") -> list[TokenData]:
    """Lex the whole of source with a fresh lexer."""
    lexer = Lexer(patterns, filename)
    lexer.begin(source)
    return lexer.all()
