"""AST node types produced by the parser and consumed by the evaluator.

The node set is closed: `Node` enumerates every variant, and both the parser
and the evaluator match over it exhaustively. Nodes are frozen after parsing.

Every node offers two renderings:
- `render(level)`: the canonical indented diagnostic dump used by tests and
  `sl --ast`;
- `str(node)`: a compact source-like form used in error messages.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union

from typing_extensions import TypeAlias

from .token_types import Tok


def _pad(level: int) -> str:
    return " " * (4 * level)


def _label(level: int, text: str) -> str:
    return f"{_pad(level)} {text}\n"


# ---------- Statements ----------

@dataclass(frozen=True)
class Program:
    statements: Tuple[Statement, ...] = ()

    def render(self, level: int = 0) -> str:
        return "".join(stmt.render(level) for stmt in self.statements)

    def __str__(self) -> str:
        return "\n".join(str(stmt) for stmt in self.statements)


@dataclass(frozen=True)
class ExpressionStatement:
    token: Tok
    expression: Expression

    def render(self, level: int = 0) -> str:
        return self.expression.render(level)

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class VarStatement:
    token: Tok
    name: Identifier
    value: Expression

    def render(self, level: int = 0) -> str:
        return (
            f"{_pad(level)}var statement:\n"
            + _label(level, f"identifier: {self.name.value}")
            + _label(level, "value:")
            + self.value.render(level + 1)
        )

    def __str__(self) -> str:
        return f"var {self.name} = {self.value}"


@dataclass(frozen=True)
class ReturnStatement:
    token: Tok
    value: Expression | None = None

    def render(self, level: int = 0) -> str:
        out = f"{_pad(level)}return statement:\n"
        if self.value is not None:
            out += _label(level, "value:") + self.value.render(level + 1)
        return out

    def __str__(self) -> str:
        return "return" if self.value is None else f"return {self.value}"


@dataclass(frozen=True)
class BlockStatement:
    token: Tok
    statements: Tuple[Statement, ...] = ()

    def render(self, level: int = 0) -> str:
        return f"{_pad(level)}block:\n" + "".join(
            stmt.render(level + 1) for stmt in self.statements
        )

    def __str__(self) -> str:
        inner = "; ".join(str(stmt) for stmt in self.statements)
        return f"{{ {inner} }}" if inner else "{}"


@dataclass(frozen=True)
class FunctionStatement:
    token: Tok
    name: Identifier
    parameters: Tuple[Identifier, ...]
    body: BlockStatement

    def render(self, level: int = 0) -> str:
        params = ", ".join(p.value for p in self.parameters)
        return (
            f"{_pad(level)}function statement:\n"
            + _label(level, f"name: {self.name.value}")
            + _label(level, f"parameters: {params}")
            + _label(level, "body:")
            + self.body.render(level + 1)
        )

    def __str__(self) -> str:
        params = ", ".join(p.value for p in self.parameters)
        return f"fn {self.name}({params}) {self.body}"


@dataclass(frozen=True)
class ForLoop:
    token: Tok
    condition: Expression
    body: BlockStatement

    def render(self, level: int = 0) -> str:
        return (
            f"{_pad(level)}for loop:\n"
            + _label(level, "condition:")
            + self.condition.render(level + 1)
            + _label(level, "body:")
            + self.body.render(level + 1)
        )

    def __str__(self) -> str:
        return f"for {self.condition} {self.body}"


# ---------- Expressions ----------

@dataclass(frozen=True)
class Identifier:
    token: Tok
    value: str

    def render(self, level: int = 0) -> str:
        return f"{_pad(level)}Identifier: {self.value}\n"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral:
    token: Tok
    value: int

    def render(self, level: int = 0) -> str:
        return f"{_pad(level)}Integer: {self.value}\n"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class StringLiteral:
    token: Tok
    value: str

    def render(self, level: int = 0) -> str:
        return f"{_pad(level)}String: {str(self)}\n"

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class Boolean:
    token: Tok
    value: bool

    def render(self, level: int = 0) -> str:
        return f"{_pad(level)}Boolean: {str(self)}\n"

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class PrefixExpression:
    token: Tok
    operator: str
    right: Expression

    def render(self, level: int = 0) -> str:
        return (
            f"{_pad(level)}prefix expression:\n"
            + _label(level, f"operator: {self.operator}")
            + _label(level, "right:")
            + self.right.render(level + 1)
        )

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression:
    token: Tok
    left: Expression
    operator: str
    right: Expression

    def render(self, level: int = 0) -> str:
        return (
            f"{_pad(level)}infix expression:\n"
            + _label(level, "left:")
            + self.left.render(level + 1)
            + _label(level, f"operator: {self.operator}")
            + _label(level, "right:")
            + self.right.render(level + 1)
        )

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression:
    token: Tok
    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None = None

    def render(self, level: int = 0) -> str:
        out = (
            f"{_pad(level)}if expression:\n"
            + _label(level, "condition:")
            + self.condition.render(level + 1)
            + _label(level, "consequence:")
            + self.consequence.render(level + 1)
        )
        if self.alternative is not None:
            out += _label(level, "alternative:") + self.alternative.render(level + 1)
        return out

    def __str__(self) -> str:
        out = f"if {self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f" else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionCall:
    token: Tok
    function: Expression
    arguments: Tuple[Expression, ...] = field(default_factory=tuple)

    def render(self, level: int = 0) -> str:
        out = (
            f"{_pad(level)}function call:\n"
            + _label(level, "function:")
            + self.function.render(level + 1)
            + _label(level, "arguments:")
        )
        return out + "".join(arg.render(level + 1) for arg in self.arguments)

    def __str__(self) -> str:
        args = ", ".join(str(arg) for arg in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class AnonymousFunction:
    token: Tok
    parameters: Tuple[Identifier, ...]
    body: BlockStatement

    def render(self, level: int = 0) -> str:
        params = ", ".join(p.value for p in self.parameters)
        return (
            f"{_pad(level)}anonymous function:\n"
            + _label(level, f"parameters: {params}")
            + _label(level, "body:")
            + self.body.render(level + 1)
        )

    def __str__(self) -> str:
        params = ", ".join(p.value for p in self.parameters)
        return f"fn({params}) {self.body}"


Statement: TypeAlias = Union[
    ExpressionStatement,
    VarStatement,
    ReturnStatement,
    FunctionStatement,
    BlockStatement,
]

Expression: TypeAlias = Union[
    Identifier,
    IntegerLiteral,
    StringLiteral,
    Boolean,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionCall,
    AnonymousFunction,
    ForLoop,
]

Node: TypeAlias = Union[Program, Statement, Expression]
