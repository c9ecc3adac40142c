"""Parser state and the commit/abort combinator engine.

A parsing unit is anything with a ``parse(state) -> Node`` method. Units
compose by calling ``state.parse(other_unit)``; each call runs the unit
against an isolated copy of the cursor and commits the advance only when
the unit returns normally. A failure unwinds the whole parse. There is
no backtracking across alternatives: grammar authors peek ahead and pick
the right unit themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol, Union, runtime_checkable

from descent.ast_nodes import Node
from descent.errors import ParseError
from descent.tokens import TokenData

logger = logging.getLogger(__name__)

Kinds = Union[int, Iterable[int]]


def _kind_set(kinds: Kinds) -> frozenset[int]:
    if isinstance(kinds, int):
        return frozenset((kinds,))
    return frozenset(kinds)


@runtime_checkable
class Parser(Protocol):
    """A parsing unit."""

    def parse(self, state: ParserState) -> Node: ...


class ParserState:
    """A token sequence plus a cursor. Only the cursor ever changes."""

    __slots__ = ("tokens", "skip_kinds", "filename", "_pos")

    def __init__(
        self,
        tokens: Sequence[TokenData],
        skip_kinds: Kinds | None = None,
        filename: str = "<input>",
    ) -> None:
        self.tokens: tuple[TokenData, ...] = tuple(tokens)
        self.skip_kinds = _kind_set(skip_kinds) if skip_kinds is not None else frozenset()
        self.filename = filename
        self._pos = 0

    @property
    def cursor(self) -> int:
        return self._pos

    def remaining(self) -> int:
        return len(self.tokens) - self._pos

    def is_at_end(self) -> bool:
        return self._pos >= len(self.tokens)

    # ── Token access ─────────────────────────────────────────────

    def peek(self) -> TokenData:
        if self.is_at_end():
            raise ParseError((), None, filename=self.filename)
        return self.tokens[self._pos]

    def eat(self) -> TokenData:
        tok = self.peek()
        self._pos += 1
        return tok

    def require(self, kinds: Kinds) -> TokenData:
        """Eat the current token if its kind is one of kinds, else fail."""
        expected = _kind_set(kinds)
        if self.is_at_end():
            raise ParseError(expected, None, filename=self.filename)
        tok = self.tokens[self._pos]
        if tok.kind not in expected:
            raise ParseError(expected, tok.kind, tok, self.filename)
        return self.eat()

    def is_kind(self, kinds: Kinds) -> bool:
        if self.is_at_end():
            return False
        return self.tokens[self._pos].kind in _kind_set(kinds)

    def skip_while(self, kinds: Kinds) -> None:
        skip = _kind_set(kinds)
        while self._pos < len(self.tokens) and self.tokens[self._pos].kind in skip:
            self._pos += 1

    # ── Combinator ───────────────────────────────────────────────

    def _fork(self) -> ParserState:
        copy = ParserState.__new__(ParserState)
        copy.tokens = self.tokens
        copy.skip_kinds = self.skip_kinds
        copy.filename = self.filename
        copy._pos = self._pos
        return copy

    def parse(self, unit: Parser) -> Node:
        """Run unit on an isolated copy of this state; commit its advance on success."""
        if not callable(getattr(unit, "parse", None)):
            raise TypeError(f"{unit!r} is not a parsing unit")
        self.skip_while(self.skip_kinds)
        sandbox = self._fork()
        node = unit.parse(sandbox)
        logger.debug(
            "%s committed %d -> %d", type(unit).__name__, self._pos, sandbox._pos
        )
        self._pos = sandbox._pos
        return node

    def __repr__(self) -> str:
        return f"ParserState(cursor={self._pos}, tokens={len(self.tokens)})"
