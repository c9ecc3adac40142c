"""Token patterns and the token data produced by the lexer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from descent.errors import GrammarError
from descent.source import Position, Span

# ── Matchers ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class CharRange:
    start: str
    end: str


@dataclass(frozen=True)
class TextRegex:
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class ByteRegex:
    pattern: re.Pattern[bytes]


Matcher = Union[Literal, CharRange, TextRegex, ByteRegex]


def _compile(pattern, flags: int, label: str, want: type) -> re.Pattern:
    if isinstance(pattern, re.Pattern):
        if not isinstance(pattern.pattern, want):
            raise GrammarError(f"expected a {want.__name__} pattern", label)
        return pattern
    if isinstance(pattern, str) and want is bytes:
        pattern = pattern.encode("utf-8")
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise GrammarError(f"invalid regex: {e}", label) from e


@dataclass(frozen=True)
class TokenPattern:
    """A named, kinded matcher for a prefix of the remaining input.

    Matching is anchored: only a match starting at the cursor counts.
    """

    label: str
    kind: int
    matcher: Matcher

    @classmethod
    def literal(cls, label: str, kind: int, text: str) -> TokenPattern:
        if not text:
            raise GrammarError("literal must not be empty", label)
        return cls(label, kind, Literal(text))

    @classmethod
    def char_range(cls, label: str, kind: int, start: str, end: str) -> TokenPattern:
        if len(start) != 1 or len(end) != 1:
            raise GrammarError("range endpoints must be single characters", label)
        if start > end:
            raise GrammarError(f"empty range {start!r}..{end!r}", label)
        return cls(label, kind, CharRange(start, end))

    @classmethod
    def regex(cls, label: str, kind: int, pattern: str | re.Pattern[str], flags: int = 0) -> TokenPattern:
        return cls(label, kind, TextRegex(_compile(pattern, flags, label, str)))

    @classmethod
    def byte_regex(
        cls, label: str, kind: int, pattern: str | bytes | re.Pattern[bytes], flags: int = 0
    ) -> TokenPattern:
        return cls(label, kind, ByteRegex(_compile(pattern, flags, label, bytes)))

    def match(
        self, text: str, pos: int = 0, encoded: bytes | None = None, byte_pos: int = 0
    ) -> int | None:
        """Return the number of characters matched at text[pos:], or None.

        Byte regexes run over ``encoded``, the UTF-8 form of text, starting
        at ``byte_pos``. Callers lexing a whole buffer pass both so the text
        is encoded once; when omitted, only the remainder is encoded.
        """
        if pos >= len(text):
            return None
        match self.matcher:
            case Literal(lit):
                length = len(lit) if text.startswith(lit, pos) else 0
            case CharRange(start, end):
                end_pos = pos
                while end_pos < len(text) and start <= text[end_pos] <= end:
                    end_pos += 1
                length = end_pos - pos
            case TextRegex(pattern):
                m = pattern.match(text, pos)
                length = m.end() - pos if m is not None else 0
            case ByteRegex(pattern):
                if encoded is None:
                    encoded, byte_pos = text[pos:].encode("utf-8"), 0
                length = _byte_prefix_length(pattern, encoded, byte_pos)
        return length or None

    def describe(self) -> str:
        match self.matcher:
            case Literal(lit):
                return f"lit {lit!r}"
            case CharRange(start, end):
                return f"range {start!r}..{end!r}"
            case TextRegex(pattern):
                return f"regex /{pattern.pattern}/"
            case ByteRegex(pattern):
                return f"bytes /{pattern.pattern.decode('utf-8', 'replace')}/"
        raise AssertionError(self.matcher)


def _byte_prefix_length(pattern: re.Pattern[bytes], data: bytes, pos: int) -> int:
    m = pattern.match(data, pos)
    if m is None:
        return 0
    try:
        return len(data[pos:m.end()].decode("utf-8"))
    except UnicodeDecodeError:
        # ends inside a multi-byte character
        return 0


# ── Token data ───────────────────────────────────────────────────
@dataclass(frozen=True)
class TokenData:
    """A token produced by the lexer.

    ``span`` holds UTF-8 byte offsets into the lexed input; ``offset`` is
    the character offset of the token's first character.
    """

    kind: int
    text: str
    label: str
    position: Position
    span: Span
    offset: int = 0

    @classmethod
    def synthetic(cls, text: str, kind: int) -> TokenData:
        """Build a token that was not read from any input."""
        return cls(kind, text, text, Position(1, 1), Span(0, len(text.encode("utf-8"))))

    def __str__(self) -> str:
        return f"{self.label}({self.kind}) {self.text!r} @ {self.position}"
