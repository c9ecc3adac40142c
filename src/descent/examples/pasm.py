"""Pseudo-assembly: a small demo grammar built from parsing units.

    start:
        imm %r0, #10
        store total, %r0
"""

from __future__ import annotations

from descent.ast_nodes import Node
from descent.kinds import KindEnum
from descent.lexer import Lexer
from descent.parser import ParserState
from descent.tokens import TokenPattern
from descent.visitor import Number, Sink, String, Tagged, TextSink, Visitor, VisitorResult


class Tok(KindEnum):
    WHITESPACE = 0
    INSTRUCTION = 1
    IDENT = 2
    COLON = 3
    COMMA = 4
    PERCENT = 5
    NUMBER = 6
    HASH = 7
    COMMENT = 8


class Syn(KindEnum):
    PROGRAM = 0
    LABEL = 1
    INSTRUCTION = 2
    REGISTER = 3
    CONSTANT = 4
    IDENT = 5


MNEMONICS = ("imm", "store", "load", "add", "sub", "mov", "jmp")

PATTERNS = [
    TokenPattern.regex("whitespace", Tok.WHITESPACE, r"\s+"),
    TokenPattern.regex("comment", Tok.COMMENT, r";[^\n]*"),
    TokenPattern.literal("colon", Tok.COLON, ":"),
    TokenPattern.literal("comma", Tok.COMMA, ","),
    TokenPattern.literal("percent", Tok.PERCENT, "%"),
    TokenPattern.literal("hash", Tok.HASH, "#"),
    # must precede ident: the first matching pattern wins
    TokenPattern.regex("instruction", Tok.INSTRUCTION, rf"(?:{'|'.join(MNEMONICS)})\b"),
    TokenPattern.regex("ident", Tok.IDENT, r"[a-zA-Z_][a-zA-Z0-9_]*"),
    TokenPattern.regex("number", Tok.NUMBER, r"\d+(\.\d+)?"),
]

TRIVIA = (Tok.WHITESPACE, Tok.COMMENT)


# ── Parsing units ────────────────────────────────────────────────


class Register:
    def parse(self, state: ParserState) -> Node:
        state.require(Tok.PERCENT)
        name = state.require(Tok.IDENT)
        return Node(Syn.REGISTER, "Register", name.text)


class Constant:
    def parse(self, state: ParserState) -> Node:
        state.require(Tok.HASH)
        value = state.require(Tok.NUMBER)
        return Node(Syn.CONSTANT, "Constant", value.text)


class Operand:
    def parse(self, state: ParserState) -> Node:
        if state.is_kind(Tok.PERCENT):
            return state.parse(Register())
        if state.is_kind(Tok.HASH):
            return state.parse(Constant())
        ident = state.require(Tok.IDENT)
        return Node(Syn.IDENT, "Ident", ident.text)


class Instruction:
    def parse(self, state: ParserState) -> Node:
        mnemonic = state.require(Tok.INSTRUCTION)
        node = Node(Syn.INSTRUCTION, "Instruction", mnemonic.text)
        node.add_child(state.parse(Operand()))
        state.skip_while(TRIVIA)
        while state.is_kind(Tok.COMMA):
            state.eat()
            node.add_child(state.parse(Operand()))
            state.skip_while(TRIVIA)
        return node


class LabelDecl:
    def parse(self, state: ParserState) -> Node:
        name = state.require(Tok.IDENT)
        state.skip_while(TRIVIA)
        state.require(Tok.COLON)
        return Node(Syn.LABEL, "Label", name.text)


class Statement:
    def parse(self, state: ParserState) -> Node:
        if state.is_kind(Tok.INSTRUCTION):
            return state.parse(Instruction())
        return state.parse(LabelDecl())


class Program:
    def parse(self, state: ParserState) -> Node:
        program = Node(Syn.PROGRAM, "Program")
        state.skip_while(TRIVIA)
        while not state.is_at_end():
            program.add_child(state.parse(Statement()))
            state.skip_while(TRIVIA)
        return program


def parse(source: str, filename: str = "<input>") -> Node:
    lexer = Lexer(PATTERNS, filename)
    lexer.begin(source)
    state = ParserState(lexer.all(), TRIVIA, filename)
    return state.parse(Program())


# ── Printer ──────────────────────────────────────────────────────


def _operand_text(result: VisitorResult) -> str:
    if isinstance(result, Number):
        return f"#{result.as_string()}"
    return result.as_string()


def printer(sink: Sink) -> Visitor[Sink]:
    """A visitor that writes the normalized program text into its sink."""
    visitor: Visitor[Sink] = Visitor(sink)

    @visitor.handler(Syn.PROGRAM)
    def program(v: Visitor[Sink], node: Node) -> VisitorResult:
        return v.visit_children(node)

    @visitor.handler(Syn.LABEL)
    def label(v: Visitor[Sink], node: Node) -> VisitorResult:
        name = node.value_as_string()
        with v.locked_scope() as out:
            out.append(f"{name}:\n")
        return Tagged("label", String(name))

    @visitor.handler(Syn.INSTRUCTION)
    def instruction(v: Visitor[Sink], node: Node) -> VisitorResult:
        operands = v.visit_children(node)
        text = ", ".join(_operand_text(r) for r in operands)
        with v.locked_scope() as out:
            out.append(f"    {node.value_as_string()} {text}\n")
        return Tagged(node.value_as_string(), operands)

    @visitor.handler(Syn.REGISTER)
    def register(v: Visitor[Sink], node: Node) -> VisitorResult:
        return String(f"%{node.value_as_string()}")

    @visitor.handler(Syn.CONSTANT)
    def constant(v: Visitor[Sink], node: Node) -> VisitorResult:
        return Number(float(node.value_as_string()))

    @visitor.handler(Syn.IDENT)
    def ident(v: Visitor[Sink], node: Node) -> VisitorResult:
        return String(node.value_as_string())

    return visitor


def render(tree: Node) -> str:
    sink = TextSink()
    printer(sink).visit(tree)
    return sink.getvalue()

