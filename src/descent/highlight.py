"""Pygments lexer driven by a token pattern table."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from pygments.lexer import Lexer as PygmentsLexer
from pygments.token import (
    Comment,
    Error,
    Keyword,
    Name,
    Number,
    Operator,
    String,
    Text,
    _TokenType,
)

from descent.errors import LexError
from descent.lexer import Lexer
from descent.tokens import Literal, TokenPattern

# label fragment -> token type, first hit wins
_LABEL_HINTS: tuple[tuple[str, _TokenType], ...] = (
    ("space", Text.Whitespace),
    ("comment", Comment),
    ("string", String),
    ("number", Number),
    ("int", Number.Integer),
    ("float", Number.Float),
    ("ident", Name),
    ("name", Name),
    ("keyword", Keyword),
)


def guess_token_type(pattern: TokenPattern) -> _TokenType:
    label = pattern.label.lower()
    for hint, ttype in _LABEL_HINTS:
        if hint in label:
            return ttype
    if isinstance(pattern.matcher, Literal):
        if pattern.matcher.text.isidentifier():
            return Keyword
        return Operator
    return Text


class PatternLexer(PygmentsLexer):
    """Highlights text using a descent token pattern table.

    Characters no pattern matches are emitted as ``Error`` one at a
    time and lexing resumes after them.
    """

    name = "descent"
    aliases = ["descent"]

    def __init__(
        self,
        patterns: Iterable[TokenPattern],
        styles: Mapping[str, _TokenType] | None = None,
        **options,
    ) -> None:
        super().__init__(**options)
        self.patterns = tuple(patterns)
        self.styles = {p.label: guess_token_type(p) for p in self.patterns}
        self.styles.update(styles or {})

    def get_tokens_unprocessed(self, text: str) -> Iterator[tuple[int, _TokenType, str]]:
        lexer = Lexer(self.patterns)
        lexer.begin(text)
        while True:
            try:
                token = lexer.next()
            except LexError as e:
                yield lexer.pos, Error, e.char
                lexer.skip()
                continue
            if token is None:
                return
            yield token.offset, self.styles.get(token.label, Text), token.text
