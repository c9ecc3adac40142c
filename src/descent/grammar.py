"""TOML grammar files: a token pattern table plus skip kinds."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from descent.errors import GrammarError
from descent.lexer import Lexer
from descent.tokens import TokenPattern

GRAMMAR_FILENAME = "descent.toml"

_MATCHER_KEYS = ("literal", "range", "regex", "bytes")


@dataclass
class Grammar:
    name: str = "untitled"
    patterns: list[TokenPattern] = field(default_factory=list)
    skip_kinds: frozenset[int] = frozenset()

    def lexer(self, filename: str = "<input>") -> Lexer:
        return Lexer(self.patterns, filename)

    def kind_of(self, label: str) -> int:
        for pattern in self.patterns:
            if pattern.label == label:
                return pattern.kind
        raise KeyError(label)

    def label_of(self, kind: int) -> str:
        for pattern in self.patterns:
            if pattern.kind == kind:
                return pattern.label
        return str(kind)


def find_grammar(start_path: Path | None = None) -> Path:
    """Walk up directories to find descent.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        return path
    while True:
        candidate = path / GRAMMAR_FILENAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {GRAMMAR_FILENAME} found in any parent directory")
        path = parent


def load_grammar(path: Path) -> Grammar:
    """Parse a grammar file into a Grammar."""
    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise GrammarError(str(e), str(path)) from e
    return grammar_from_dict(data)


def grammar_from_dict(data: dict) -> Grammar:
    grammar = Grammar()

    meta = data.get("grammar", {})
    grammar.name = meta.get("name", "untitled")

    for index, entry in enumerate(data.get("token", [])):
        grammar.patterns.append(_pattern(index, entry))

    skip: set[int] = set()
    for item in meta.get("skip", []):
        if isinstance(item, int):
            skip.add(item)
            continue
        try:
            skip.add(grammar.kind_of(item))
        except KeyError:
            raise GrammarError(f"unknown token label {item!r}", "grammar.skip") from None
    grammar.skip_kinds = frozenset(skip)

    return grammar


def _pattern(index: int, entry: dict) -> TokenPattern:
    where = f"token[{index}]"
    label = entry.get("label")
    if not isinstance(label, str) or not label:
        raise GrammarError("missing label", where)
    kind = entry.get("kind", index)
    if not isinstance(kind, int) or kind < 0:
        raise GrammarError(f"kind must be a non-negative integer, got {kind!r}", label)

    given = [key for key in _MATCHER_KEYS if key in entry]
    if len(given) != 1:
        raise GrammarError(f"expected exactly one of {', '.join(_MATCHER_KEYS)}", label)
    flags = _flags(entry.get("flags", []), label)

    match given[0]:
        case "literal":
            return TokenPattern.literal(label, kind, entry["literal"])
        case "range":
            bounds = entry["range"]
            if not isinstance(bounds, list) or len(bounds) != 2:
                raise GrammarError("range must be a [start, end] pair", label)
            return TokenPattern.char_range(label, kind, bounds[0], bounds[1])
        case "regex":
            return TokenPattern.regex(label, kind, entry["regex"], flags)
        case _:
            return TokenPattern.byte_regex(label, kind, entry["bytes"], flags)


def _flags(names: list[str], label: str) -> int:
    flags = 0
    for name in names:
        flag = getattr(re.RegexFlag, name.upper(), None)
        if flag is None:
            raise GrammarError(f"unknown regex flag {name!r}", label)
        flags |= flag
    return flags
