"""Tests for kind-keyed visitor dispatch and visitor results."""

from __future__ import annotations

import pytest

from descent.ast_nodes import Node
from descent.errors import NodeValueError, ResultShapeError, VisitError
from descent.visitor import (
    NONE,
    Compound,
    Integer,
    Number,
    String,
    Tagged,
    TextSink,
    Visitor,
    VisitorResult,
)


def tree() -> Node:
    """Helper: (+ 1 (+ 2 3)) as kinds 0 = add, 1 = number."""
    root = Node(0, "Add")
    root.add_child(Node(1, "Number", "1"))
    inner = root.add_child(Node(0, "Add"))
    inner.add_children(Node(1, "Number", "2"), Node(1, "Number", "3"))
    return root


def evaluator() -> Visitor:
    visitor = Visitor()

    @visitor.handler(0)
    def add(v, node):
        total = sum(float(r.as_string()) for r in v.visit_children(node))
        return Number(total)

    @visitor.handler(1)
    def number(v, node):
        return Number(float(node.value_as_string()))

    return visitor


class TestDispatch:
    def test_missing_handler_fails(self):
        with pytest.raises(VisitError) as exc:
            Visitor().visit(Node(9, "Mystery"))
        assert exc.value.kind == 9
        assert exc.value.label == "Mystery"
        assert "Mystery(9)" in str(exc.value)

    def test_registering_makes_visit_succeed(self):
        visitor = Visitor()
        node = Node(9, "Mystery")
        with pytest.raises(VisitError):
            visitor.visit(node)
        visitor.register(9, lambda v, n: String("found"))
        assert visitor.visit(node) == String("found")

    def test_only_kinds_zero_to_eight(self):
        visitor = Visitor()
        for kind in range(9):
            visitor.register(kind, lambda v, n: NONE)
        root = Node(0, "Root")
        root.add_child(Node(9, "Stray"))
        visitor.register(0, lambda v, n: v.visit_children(n))
        with pytest.raises(VisitError) as exc:
            visitor.visit(root)
        assert exc.value.kind == 9

    def test_last_registration_wins(self):
        visitor = Visitor()
        visitor.register(1, lambda v, n: String("first"))
        visitor.register(1, lambda v, n: String("second"))
        assert visitor.visit(Node(1, "X")) == String("second")

    def test_recursive_evaluation(self):
        assert evaluator().visit(tree()) == Number(6.0)

    def test_visit_children_preserves_order(self):
        visitor = Visitor()
        visitor.register(1, lambda v, n: String(n.value_as_string()))
        root = Node(0, "Root")
        root.add_children(Node(1, "A", "a"), Node(1, "B", "b"), Node(1, "C", "c"))
        result = visitor.visit_children(root)
        assert isinstance(result, Compound)
        assert result.as_string() == "abc"

    def test_visit_children_of_leaf(self):
        assert Visitor().visit_children(Node(0, "Leaf")) == Compound()

    def test_handler_must_return_a_result(self):
        visitor = Visitor()
        visitor.register(0, lambda v, n: "plain string")
        with pytest.raises(ResultShapeError):
            visitor.visit(Node(0, "Bad"))


class TestScope:
    def test_scope_mutations_visible_to_later_children(self):
        visitor = Visitor({"seen": []})

        def record(v, node):
            with v.locked_scope() as scope:
                before = list(scope["seen"])
                scope["seen"].append(node.value)
            return String(",".join(before))

        visitor.register(1, record)
        visitor.register(0, lambda v, n: v.visit_children(n))
        root = Node(0, "Root")
        root.add_children(Node(1, "A", "a"), Node(1, "B", "b"))
        result = visitor.visit(root)
        assert [r.as_string() for r in result] == ["", "a"]
        assert visitor.scope["seen"] == ["a", "b"]

    def test_sink_scope(self):
        visitor = Visitor(TextSink())

        @visitor.handler(1)
        def emit(v, node):
            with v.locked_scope() as out:
                out.append(node.value_as_string())
            return NONE

        visitor.register(0, lambda v, n: v.visit_children(n))
        root = Node(0, "Root")
        root.add_children(Node(1, "A", "hello "), Node(1, "B", "world"))
        visitor.visit(root)
        assert visitor.scope.getvalue() == "hello world"

    def test_lock_is_released_between_accesses(self):
        visitor = Visitor(TextSink())

        def inner(v, node):
            with v.locked_scope() as out:
                out.append("inner")
            return NONE

        def outer(v, node):
            with v.locked_scope() as out:
                out.append("outer ")
            # the scope lock is not held while visiting children
            return v.visit_children(node)

        visitor.register(0, outer)
        visitor.register(1, inner)
        root = Node(0, "Root")
        root.add_child(Node(1, "Leaf"))
        visitor.visit(root)
        assert visitor.scope.getvalue() == "outer inner"


class TestResults:
    def test_base_result_is_abstract(self):
        with pytest.raises(TypeError):
            VisitorResult()  # type: ignore[abstract]

    def test_variant_without_as_string_is_abstract(self):
        class Partial(VisitorResult):
            variant = "partial"

        with pytest.raises(TypeError):
            Partial()  # type: ignore[abstract]

    def test_compound_accumulates(self):
        result = Compound()
        result.add_child(String("a"))
        result.add_child(Integer(1))
        assert len(result) == 2
        assert result.as_string() == "a1"

    @pytest.mark.parametrize(
        "result",
        [String("x"), Integer(1), Number(1.5), Tagged("t", String("x")), NONE],
    )
    def test_non_compound_rejects_children(self, result):
        with pytest.raises(ResultShapeError):
            result.add_child(String("child"))

    def test_as_string(self):
        assert String("text").as_string() == "text"
        assert Integer(42).as_string() == "42"
        assert Number(10.5).as_string() == "10.5"
        assert Number(10.0).as_string() == "10"
        assert Tagged("imm", Integer(3)).as_string() == "imm 3"
        nested = Compound([String("a"), Compound([String("b"), Integer(2)])])
        assert nested.as_string() == "ab2"

    def test_none_has_no_string(self):
        with pytest.raises(NodeValueError):
            NONE.as_string()

    def test_integer_is_unsigned(self):
        with pytest.raises(ValueError):
            Integer(-1)
