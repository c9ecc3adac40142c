"""Kind-keyed visitor dispatch over node trees.

Handlers are looked up by the node's integer kind. Every kind that can
appear in a tree handed to a visitor needs a handler, otherwise the
visit fails with VisitError.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

from descent.ast_nodes import Node
from descent.errors import NodeValueError, ResultShapeError, VisitError

logger = logging.getLogger(__name__)

# ── Results ──────────────────────────────────────────────────────


class VisitorResult(ABC):
    """Base of the result variants a handler may return."""

    __slots__ = ()

    variant = "result"

    @abstractmethod
    def as_string(self) -> str: ...

    def add_child(self, child: VisitorResult) -> None:
        raise ResultShapeError(self.variant)


@dataclass
class Compound(VisitorResult):
    items: list[VisitorResult] = field(default_factory=list)

    variant = "compound"

    def add_child(self, child: VisitorResult) -> None:
        self.items.append(child)

    def as_string(self) -> str:
        return "".join(item.as_string() for item in self.items)

    def __iter__(self) -> Iterator[VisitorResult]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class String(VisitorResult):
    text: str

    variant = "string"

    def as_string(self) -> str:
        return self.text


@dataclass(frozen=True)
class Integer(VisitorResult):
    value: int

    variant = "integer"

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"integer result must be non-negative, got {self.value}")

    def as_string(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Number(VisitorResult):
    value: float

    variant = "number"

    def as_string(self) -> str:
        value = float(self.value)
        if value.is_integer():
            return str(int(value))
        return repr(value)


@dataclass(frozen=True)
class Tagged(VisitorResult):
    label: str
    inner: VisitorResult

    variant = "tagged"

    def as_string(self) -> str:
        return f"{self.label} {self.inner.as_string()}"


@dataclass(frozen=True)
class NoneResult(VisitorResult):
    variant = "none"

    def as_string(self) -> str:
        raise NodeValueError("none")


NONE = NoneResult()


# ── Scope sinks ──────────────────────────────────────────────────


class Sink(Protocol):
    def append(self, text: str) -> None: ...


class TextSink:
    """An in-memory output sink."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, text: str) -> None:
        self._parts.append(text)

    def getvalue(self) -> str:
        return "".join(self._parts)


# ── Visitor ──────────────────────────────────────────────────────

S = TypeVar("S")
Handler = Callable[["Visitor[S]", Node], VisitorResult]


class Visitor(Generic[S]):
    """A table of handlers keyed by node kind, plus a shared scope."""

    def __init__(self, scope: S = None) -> None:  # type: ignore[assignment]
        self.scope = scope
        self.handlers: dict[int, Handler] = {}
        self._registry_lock = threading.Lock()
        self._scope_lock = threading.Lock()

    def register(self, kind: int, handler: Handler) -> None:
        with self._registry_lock:
            if kind in self.handlers:
                logger.debug("replacing handler for kind %d", kind)
            self.handlers[kind] = handler

    def handler(self, kind: int) -> Callable[[Handler], Handler]:
        """Decorator form of register()."""

        def decorator(fn: Handler) -> Handler:
            self.register(kind, fn)
            return fn

        return decorator

    @contextmanager
    def locked_scope(self) -> Iterator[S]:
        """Hold the scope lock for a single access to the scope."""
        with self._scope_lock:
            yield self.scope

    def visit(self, node: Node) -> VisitorResult:
        with self._registry_lock:
            handler = self.handlers.get(node.kind)
        if handler is None:
            raise VisitError(node.kind, node.label)
        result = handler(self, node)
        if not isinstance(result, VisitorResult):
            raise ResultShapeError(
                type(result).__name__,
                f"returned by the `{node.label}({int(node.kind)})` handler is not a visitor result",
            )
        return result

    def visit_children(self, node: Node) -> Compound:
        compound = Compound()
        for child in node.children:
            compound.add_child(self.visit(child))
        return compound
