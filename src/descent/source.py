"""Source positions and span tracking for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A 1-indexed line/column pair."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Span:
    """A half-open range of UTF-8 byte offsets within the lexed input."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Location:
    """Where a diagnostic points: a file and a start/end position."""

    file: str
    start: Position
    end: Position

    def __str__(self) -> str:
        return f"{self.file}:{self.start}"

    @classmethod
    def at(cls, file: str, line: int, column: int, width: int = 1) -> Location:
        start = Position(line, column)
        return cls(file, start, Position(line, column + max(1, width) - 1))

