"""Tree dumps for tokens, nodes and visitor results.

Diagnostic output only; dispatches on the dumped object's type the same
way for every kind of tree.
"""

from __future__ import annotations

from descent.ast_nodes import Node
from descent.tokens import TokenData, TokenPattern
from descent.visitor import Compound, Integer, NoneResult, Number, String, Tagged, VisitorResult

_LABEL = "\033[32m"     # green
_FIELD = "\033[31;3m"   # italic red
_VALUE = "\033[34m"     # blue
_NUMBER = "\033[33m"    # yellow
_LINE = "\033[90m"      # grey
_RESET = "\033[0m"


class TreeFormatter:
    """Render trees with box-drawing guides, optionally in color."""

    def __init__(self, *, color: bool = False) -> None:
        self.color = color

    def _c(self, code: str, text: str) -> str:
        return f"{code}{text}{_RESET}" if self.color else text

    # ── Public API ─────────────────────────────────────────────

    def format(self, obj: object) -> str:
        lines: list[str] = []
        if isinstance(obj, Node):
            self._node(obj, "", "", lines)
        elif isinstance(obj, VisitorResult):
            self._result(obj, "", "", lines)
        elif isinstance(obj, TokenData):
            lines.append(self.token_line(obj))
        elif isinstance(obj, TokenPattern):
            lines.append(self.pattern_line(obj))
        else:
            raise TypeError(f"cannot format {type(obj).__name__}")
        return "\n".join(lines)

    def token_line(self, token: TokenData) -> str:
        pos = f"{token.position.line}:{token.position.column}"
        return (
            f"{self._c(_NUMBER, f'{pos:<8}')}"
            f"{self._c(_LABEL, token.label)}({int(token.kind)})  "
            f"{self._c(_VALUE, repr(token.text))}"
        )

    def pattern_line(self, pattern: TokenPattern) -> str:
        return f"{self._c(_LABEL, pattern.label)}({int(pattern.kind)})  {pattern.describe()}"

    # ── Nodes ──────────────────────────────────────────────────

    def _node(self, node: Node, lead: str, indent: str, lines: list[str]) -> None:
        head = f"{self._c(_LABEL, node.label)}({int(node.kind)})"
        if node.value is not None:
            head += f" {self._c(_FIELD, 'value:')} {self._c(_VALUE, repr(node.value))}"
        lines.append(f"{lead}{head}")
        for i, child in enumerate(node.children):
            last = i == len(node.children) - 1
            branch = self._c(_LINE, "└─ " if last else "├─ ")
            guide = "   " if last else self._c(_LINE, "│  ")
            self._node(child, indent + branch, indent + guide, lines)

    # ── Results ────────────────────────────────────────────────

    def _result(self, result: VisitorResult, lead: str, indent: str, lines: list[str]) -> None:
        if isinstance(result, Compound):
            lines.append(f"{lead}{self._c(_LABEL, 'compound')}")
            for i, item in enumerate(result.items):
                last = i == len(result.items) - 1
                branch = self._c(_LINE, "└─ " if last else "├─ ")
                guide = "   " if last else self._c(_LINE, "│  ")
                self._result(item, indent + branch, indent + guide, lines)
        elif isinstance(result, Tagged):
            lines.append(f"{lead}{self._c(_LABEL, result.label)}")
            self._result(result.inner, indent + self._c(_LINE, "└─ "), indent + "   ", lines)
        elif isinstance(result, String):
            lines.append(f"{lead}{self._c(_FIELD, 'string:')} {self._c(_VALUE, repr(result.text))}")
        elif isinstance(result, Integer):
            lines.append(f"{lead}{self._c(_FIELD, 'integer:')} {self._c(_NUMBER, str(result.value))}")
        elif isinstance(result, Number):
            lines.append(f"{lead}{self._c(_FIELD, 'number:')} {self._c(_NUMBER, result.as_string())}")
        elif isinstance(result, NoneResult):
            lines.append(f"{lead}{self._c(_FIELD, 'none')}")
        else:
            raise TypeError(f"unknown result variant {type(result).__name__}")


def dump(obj: object, *, color: bool = False) -> str:
    return TreeFormatter(color=color).format(obj)
