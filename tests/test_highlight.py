"""Tests for the Pygments adapter."""

from __future__ import annotations

from pygments.token import Error, Keyword, Name, Number, Operator, Text

from descent.highlight import PatternLexer, guess_token_type
from descent.tokens import TokenPattern


def stream(lexer: PatternLexer, text: str) -> list[tuple]:
    """Helper: unprocessed pygments tokens as (index, type, value)."""
    return list(lexer.get_tokens_unprocessed(text))


class TestGuessTokenType:
    def test_label_hints(self, let_patterns):
        types = [guess_token_type(p) for p in let_patterns]
        assert types == [Text.Whitespace, Keyword, Name, Operator, Number]

    def test_unknown_regex_is_text(self):
        assert guess_token_type(TokenPattern.regex("blob", 0, ".+")) is Text


class TestPatternLexer:
    def test_stream_covers_input(self, let_patterns):
        text = "let x = 10.5"
        tokens = stream(PatternLexer(let_patterns), text)
        assert "".join(value for _, _, value in tokens) == text
        assert tokens[0] == (0, Keyword, "let")
        assert tokens[-1] == (8, Number, "10.5")

    def test_style_override(self, let_patterns):
        lexer = PatternLexer(let_patterns, styles={"ident": Name.Variable})
        assert (4, Name.Variable, "x") in stream(lexer, "let x")

    def test_unknown_characters_become_errors(self, let_patterns):
        tokens = stream(PatternLexer(let_patterns), "x @ y")
        assert (2, Error, "@") in tokens
        assert tokens[-1] == (4, Name, "y")

    def test_offsets_are_characters(self, let_patterns):
        tokens = stream(PatternLexer(let_patterns), "é x")
        assert tokens[0] == (0, Error, "é")
        assert (2, Name, "x") in tokens
