"""Shared pytest fixtures for the descent test suite."""

from __future__ import annotations

import pytest

from descent.tokens import TokenPattern

WS, LET, IDENT, ASSIGN, NUMBER = 0, 1, 2, 3, 4


@pytest.fixture
def let_patterns() -> list[TokenPattern]:
    """Patterns for `let x = 10.5` style input."""
    return [
        TokenPattern.regex("whitespace", WS, r"\s+"),
        TokenPattern.literal("let", LET, "let"),
        TokenPattern.regex("ident", IDENT, r"[a-zA-Z_][a-zA-Z0-9_]*"),
        TokenPattern.literal("equal", ASSIGN, "="),
        TokenPattern.regex("number", NUMBER, r"\d+(\.\d+)?"),
    ]


@pytest.fixture
def grammar_file(tmp_path):
    """A grammar file for the same language as let_patterns."""
    path = tmp_path / "descent.toml"
    path.write_text(
        '[grammar]\nname = "let"\nskip = ["whitespace"]\n\n'
        '[[token]]\nlabel = "whitespace"\nregex = \'\\s+\'\n\n'
        '[[token]]\nlabel = "let"\nliteral = "let"\n\n'
        '[[token]]\nlabel = "ident"\nregex = \'[a-zA-Z_][a-zA-Z0-9_]*\'\n\n'
        '[[token]]\nlabel = "equal"\nliteral = "="\n\n'
        '[[token]]\nlabel = "number"\nregex = \'\\d+(\\.\\d+)?\'\n'
    )
    return path
