"""descent: a toolkit for hand-built recursive-descent parsers."""

from __future__ import annotations

import logging

from descent.ast_nodes import Node
from descent.errors import (
    DescentError,
    GrammarError,
    LexError,
    NodeValueError,
    ParseError,
    ResultShapeError,
    VisitError,
)
from descent.kinds import KindEnum, make_kinds
from descent.lexer import Lexer, tokenize
from descent.parser import Parser, ParserState
from descent.tokens import TokenData, TokenPattern
from descent.visitor import (
    NONE,
    Compound,
    Integer,
    NoneResult,
    Number,
    String,
    Tagged,
    TextSink,
    Visitor,
    VisitorResult,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "NONE",
    "Compound",
    "DescentError",
    "GrammarError",
    "Integer",
    "KindEnum",
    "LexError",
    "Lexer",
    "Node",
    "NodeValueError",
    "NoneResult",
    "Number",
    "ParseError",
    "Parser",
    "ParserState",
    "ResultShapeError",
    "String",
    "Tagged",
    "TextSink",
    "TokenData",
    "TokenPattern",
    "Visitor",
    "VisitorResult",
    "VisitError",
    "make_kinds",
    "tokenize",
]
