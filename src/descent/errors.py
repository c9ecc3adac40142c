"""Error types and Rust-style colored diagnostic rendering."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from descent.source import Location

if TYPE_CHECKING:
    from descent.tokens import TokenData


class Severity(Enum):
    ERROR = "error"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    location: Location
    message: str
    style: str = "primary"  # "primary" or "secondary"


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors.

    Source lines are looked up in ``sources`` first (in-memory inputs
    keyed by filename), then on disk.
    """

    def __init__(self, *, color: bool = True, sources: dict[str, str] | None = None) -> None:
        self.color = color
        self._file_cache: dict[str, list[str]] = {
            name: text.splitlines() for name, text in (sources or {}).items()
        }

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        """Load and cache source file, return the 1-indexed line."""
        if filename not in self._file_cache:
            try:
                path = Path(filename)
                if path.is_file():
                    self._file_cache[filename] = path.read_text().splitlines()
                else:
                    self._file_cache[filename] = []
            except OSError:
                self._file_cache[filename] = []
        lines = self._file_cache[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E100]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            loc = label.location
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {loc}")
            gutter = f"{loc.start.line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self._get_source_line(loc.file, loc.start.line)
            if source_line is not None:
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
                )

            if loc.start.line == loc.end.line:
                caret_len = max(1, loc.end.column - loc.start.column + 1)
                padding = " " * (loc.start.column - 1)
                carets = "^" * caret_len
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                    f"{padding}{self._c(color)}{carets}{self._c(_RESET)}"
                )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


# ── Exceptions ───────────────────────────────────────────────────


class DescentError(Exception):
    """Base class for every fatal lexing, parsing and visiting error."""

    code = "E000"

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(Severity.ERROR, self.code, str(self))


class GrammarError(DescentError, ValueError):
    """A token pattern or grammar file is malformed."""

    code = "E010"

    def __init__(self, message: str, entry: str | None = None) -> None:
        self.entry = entry
        super().__init__(f"{entry}: {message}" if entry else message)


class LexError(DescentError):
    """No token pattern matches at the current input position."""

    code = "E100"

    def __init__(self, char: str, line: int, column: int, filename: str = "<input>") -> None:
        self.char = char
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(f"invalid character {char!r} at line {line}, column {column}")

    def to_diagnostic(self) -> Diagnostic:
        loc = Location.at(self.filename, self.line, self.column)
        return Diagnostic(
            severity=Severity.ERROR,
            code=self.code,
            message=f"invalid character {self.char!r}",
            labels=[DiagnosticLabel(loc, "no token pattern matches here")],
        )


class ParseError(DescentError):
    """A required token kind was not found."""

    code = "E200"

    def __init__(
        self,
        expected: Iterable[int],
        found: int | None,
        token: TokenData | None = None,
        filename: str = "<input>",
    ) -> None:
        self.expected = tuple(sorted({int(k) for k in expected}))
        self.found = None if found is None else int(found)
        self.token = token
        self.filename = filename
        got = "end of input" if self.found is None else str(self.found)
        super().__init__(f"expected {list(self.expected)} but found {got}")

    def to_diagnostic(self) -> Diagnostic:
        diag = Diagnostic(Severity.ERROR, self.code, str(self))
        if self.token is not None:
            pos = self.token.position
            loc = Location.at(self.filename, pos.line, pos.column, len(self.token.text))
            diag.labels.append(
                DiagnosticLabel(loc, f"found {self.token.label}({int(self.token.kind)})")
            )
        return diag


class VisitError(DescentError):
    """No visitor handler is registered for a node's kind."""

    code = "E300"

    def __init__(self, kind: int, label: str) -> None:
        self.kind = int(kind)
        self.label = label
        super().__init__(f"no visitor registered for `{label}({self.kind})`")


class NodeValueError(DescentError, ValueError):
    """A scalar value was requested from a node or result that holds none."""

    code = "E301"

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"`{label}` has no value")


class ResultShapeError(DescentError):
    """A visitor result has the wrong variant for the requested operation."""

    code = "E302"

    def __init__(self, variant: str, message: str = "is not compound") -> None:
        self.variant = variant
        super().__init__(f"{variant} result {message}")
