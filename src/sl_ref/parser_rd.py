"""
Pratt Parser for SL

Structure:
- Lexer: Token stream from source (lexer_rd)
- Parser: statement dispatch plus precedence climbing for expressions
- AST: frozen node dataclasses from tree.py

Each token kind may register a prefix handler and/or an infix handler.
Handlers leave `current` on the last token they consumed. A handler that
fails records a message in `errors` and returns None; callers never embed
a None child, and the statement loop resynchronizes at the next statement
terminator so several errors are reported from one pass.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .lexer_rd import LexError, tokenize
from .token_types import TT, Tok, describe, make_token
from .tree import (
    AnonymousFunction,
    BlockStatement,
    Boolean,
    Expression,
    ExpressionStatement,
    ForLoop,
    FunctionCall,
    FunctionStatement,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
    VarStatement,
)

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2    # == !=
    COMPARE = 3   # < >
    SUM = 4       # + -
    PRODUCT = 5   # * /
    PREFIX = 6    # -x !x
    CALL = 7      # f(x)


PRECEDENCES: Dict[TT, Precedence] = {
    TT.EQ: Precedence.EQUALS,
    TT.NEQ: Precedence.EQUALS,
    TT.LT: Precedence.COMPARE,
    TT.GT: Precedence.COMPARE,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.STAR: Precedence.PRODUCT,
    TT.SLASH: Precedence.PRODUCT,
    TT.LPAR: Precedence.CALL,
}

STATEMENT_END = (TT.SEMI, TT.NEWLINE)

PrefixFn = Callable[[], Optional[Expression]]
InfixFn = Callable[[Expression], Optional[Expression]]


class Parser:
    """
    Table-driven precedence-climbing parser for SL.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. compare (<, >)
    3. sum (+, -)
    4. product (*, /)
    5. prefix (-, !)
    6. call (f(...))
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TT.EOF:
            last = self.tokens[-1] if self.tokens else None
            line = last.line if last is not None else 1
            self.tokens.append(make_token(TT.EOF, '', line=line))

        self.pos = 0
        self.errors: List[str] = []

        self.precedences: Dict[TT, Precedence] = dict(PRECEDENCES)
        self.prefix_fns: Dict[TT, PrefixFn] = {}
        self.infix_fns: Dict[TT, InfixFn] = {}
        self.register_defaults()

    # ========================================================================
    # Handler Registries
    # ========================================================================

    def register_prefix(self, token_type: TT, fn: PrefixFn) -> None:
        self.prefix_fns[token_type] = fn

    def register_infix(self, token_type: TT, fn: InfixFn, precedence: Optional[Precedence] = None) -> None:
        self.infix_fns[token_type] = fn
        if precedence is not None:
            self.precedences[token_type] = precedence

    def register_defaults(self) -> None:
        self.register_prefix(TT.IDENT, self.parse_identifier)
        self.register_prefix(TT.NUMBER, self.parse_integer_literal)
        self.register_prefix(TT.STRING, self.parse_string_literal)
        self.register_prefix(TT.TRUE, self.parse_boolean)
        self.register_prefix(TT.FALSE, self.parse_boolean)
        self.register_prefix(TT.LPAR, self.parse_grouped_expression)
        self.register_prefix(TT.BANG, self.parse_prefix_expression)
        self.register_prefix(TT.MINUS, self.parse_prefix_expression)
        self.register_prefix(TT.IF, self.parse_if_expression)
        self.register_prefix(TT.FN, self.parse_anonymous_function)
        self.register_prefix(TT.FOR, self.parse_for_loop)

        for op in (TT.PLUS, TT.MINUS, TT.STAR, TT.SLASH, TT.EQ, TT.NEQ, TT.LT, TT.GT):
            self.register_infix(op, self.parse_infix_expression)
        self.register_infix(TT.LPAR, self.parse_call)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.tokens[self.pos]

    def peek(self, offset: int = 1) -> Tok:
        """Look ahead at token; clamps to the trailing EOF"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return prev

    def check(self, *types: TT) -> bool:
        return self.current.type in types

    def peek_is(self, *types: TT) -> bool:
        return self.peek().type in types

    def expect_peek(self, token_type: TT, context: str) -> bool:
        """Advance onto the next token if it has the given kind, else record an error"""
        if self.peek_is(token_type):
            self.advance()
            return True

        self.error(f"expected {token_type} {context}, got {describe(self.peek())}", self.peek())
        return False

    def peek_precedence(self) -> Precedence:
        return self.precedences.get(self.peek().type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return self.precedences.get(self.current.type, Precedence.LOWEST)

    def skip_newlines(self) -> None:
        while self.check(TT.NEWLINE):
            self.advance()

    def skip_semicolon(self) -> None:
        if self.peek_is(TT.SEMI):
            self.advance()

    def error(self, message: str, tok: Tok) -> None:
        self.errors.append(f"{message} at line {tok.line}, col {tok.column}")

    def synchronize(self, *closers: TT) -> None:
        """Skip the rest of a failed statement, stopping before its terminator"""
        stops = (TT.EOF, *STATEMENT_END, *closers)
        while not self.check(*stops) and not self.peek_is(*stops):
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse entire token stream"""
        statements = self.parse_statement_list()
        logger.debug("parsed %d statement(s), %d error(s)", len(statements), len(self.errors))
        return Program(tuple(statements))

    def parse_statement_list(self, *closers: TT) -> List[Statement]:
        statements: List[Statement] = []

        while not self.check(TT.EOF, *closers):
            before = len(self.errors)
            stmt = self.parse_statement()

            if stmt is not None:
                statements.append(stmt)
            elif len(self.errors) > before:
                self.synchronize(*closers)
                if self.check(*closers):
                    break

            self.advance()

        return statements

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Statement]:
        match self.current.type:
            case TT.VAR:
                return self.parse_var_statement()
            case TT.RETURN:
                return self.parse_return_statement()
            case TT.FN if self.peek_is(TT.IDENT):
                return self.parse_function_statement()
            case TT.NEWLINE | TT.SEMI:
                return None
            case _:
                return self.parse_expression_statement()

    def parse_var_statement(self) -> Optional[VarStatement]:
        """var name = expr"""
        tok = self.current
        if not self.expect_peek(TT.IDENT, "after 'var'"):
            return None

        name = Identifier(self.current, str(self.current))
        if not self.expect_peek(TT.ASSIGN, f"after 'var {name}'"):
            return None

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        self.skip_semicolon()
        return VarStatement(tok, name, value)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        """return [expr]"""
        tok = self.current
        if self.peek_is(*STATEMENT_END, TT.RBRACE, TT.EOF):
            self.skip_semicolon()
            return ReturnStatement(tok, None)

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        self.skip_semicolon()
        return ReturnStatement(tok, value)

    def parse_function_statement(self) -> Optional[FunctionStatement]:
        """fn name(params) { body }"""
        tok = self.current
        self.advance()
        name = Identifier(self.current, str(self.current))

        if not self.expect_peek(TT.LPAR, f"after function name '{name}'"):
            return None
        params = self.parse_parameters()
        if params is None:
            return None

        if not self.expect_peek(TT.LBRACE, f"before body of '{name}'"):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None

        self.skip_semicolon()
        return FunctionStatement(tok, name, params, body)

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        tok = self.current
        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None

        self.skip_semicolon()
        return ExpressionStatement(tok, expr)

    def parse_block_statement(self) -> Optional[BlockStatement]:
        """{ statements } with current on the opening brace"""
        tok = self.current
        self.advance()
        statements = self.parse_statement_list(TT.RBRACE)

        if not self.check(TT.RBRACE):
            self.error(
                f"expected }} to close block opened at line {tok.line}, col {tok.column}, "
                f"got {describe(self.current)}",
                self.current,
            )
            return None

        return BlockStatement(tok, tuple(statements))

    def parse_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        """(a, b, c) with current on the opening parenthesis"""
        params: List[Identifier] = []

        if self.peek_is(TT.RPAR):
            self.advance()
            return ()

        while True:
            if not self.expect_peek(TT.IDENT, "in parameter list"):
                return None

            param = Identifier(self.current, str(self.current))
            if any(p.value == param.value for p in params):
                self.error(f"duplicate parameter '{param}'", self.current)
                return None
            params.append(param)

            if not self.peek_is(TT.COMMA):
                break
            self.advance()

        if not self.expect_peek(TT.RPAR, "to close parameter list"):
            return None

        return tuple(params)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = self.prefix_fns.get(self.current.type)
        if prefix is None:
            self.error(f"no prefix handler for {describe(self.current)}", self.current)
            return None

        left = prefix()

        while left is not None and not self.peek_is(*STATEMENT_END) and precedence < self.peek_precedence():
            infix = self.infix_fns.get(self.peek().type)
            if infix is None:
                return left

            self.advance()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.current, str(self.current))

    def parse_integer_literal(self) -> Optional[Expression]:
        tok = self.current
        value = int(str(tok))

        if value > INT64_MAX:
            self.error(f"integer literal {tok} out of range", tok)
            return None

        return IntegerLiteral(tok, value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.current, str(self.current))

    def parse_boolean(self) -> Expression:
        return Boolean(self.current, self.check(TT.TRUE))

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.advance()
        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None

        if not self.expect_peek(TT.RPAR, "to close '('"):
            return None

        return expr

    def parse_prefix_expression(self) -> Optional[Expression]:
        tok = self.current
        self.advance()
        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None

        return PrefixExpression(tok, str(tok), right)

    def parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        tok = self.current
        precedence = self.cur_precedence()
        self.advance()
        self.skip_newlines()

        # binding at the operator's own level keeps same-precedence chains left-associative
        right = self.parse_expression(precedence)
        if right is None:
            return None

        return InfixExpression(tok, left, str(tok), right)

    def parse_call(self, function: Expression) -> Optional[Expression]:
        tok = self.current
        arguments = self.parse_expression_list(TT.RPAR)
        if arguments is None:
            return None

        return FunctionCall(tok, function, arguments)

    def parse_expression_list(self, end: TT) -> Optional[Tuple[Expression, ...]]:
        items: List[Expression] = []

        if self.peek_is(end):
            self.advance()
            return ()

        while True:
            self.advance()
            item = self.parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

            if not self.peek_is(TT.COMMA):
                break
            self.advance()

        if not self.expect_peek(end, "to close argument list"):
            return None

        return tuple(items)

    def parse_if_expression(self) -> Optional[Expression]:
        """if cond { ... } [else { ... } | else if ...]"""
        tok = self.current
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        if not self.expect_peek(TT.LBRACE, "after if condition"):
            return None
        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative: Optional[BlockStatement] = None

        if self._else_follows():
            while self.peek_is(TT.NEWLINE):
                self.advance()
            self.advance()

            if self.peek_is(TT.IF):
                self.advance()
                nested = self.parse_if_expression()
                if nested is None:
                    return None
                alternative = BlockStatement(nested.token, (ExpressionStatement(nested.token, nested),))
            else:
                if not self.expect_peek(TT.LBRACE, "after 'else'"):
                    return None
                alternative = self.parse_block_statement()
                if alternative is None:
                    return None

        return IfExpression(tok, condition, consequence, alternative)

    def _else_follows(self) -> bool:
        offset = 1
        while self.peek(offset).type == TT.NEWLINE:
            offset += 1
        return self.peek(offset).type == TT.ELSE

    def parse_anonymous_function(self) -> Optional[Expression]:
        """fn(params) { body }"""
        tok = self.current
        if not self.expect_peek(TT.LPAR, "after 'fn'"):
            return None
        params = self.parse_parameters()
        if params is None:
            return None

        if not self.expect_peek(TT.LBRACE, "before function body"):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None

        return AnonymousFunction(tok, params, body)

    def parse_for_loop(self) -> Optional[Expression]:
        """for cond { body }"""
        tok = self.current
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        if not self.expect_peek(TT.LBRACE, "after for condition"):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None

        return ForLoop(tok, condition, body)


def parse_source(source: str) -> Tuple[Program, List[str]]:
    """Tokenize and parse; lexical failures are folded into the error list"""
    try:
        tokens = tokenize(source)
    except LexError as exc:
        logger.debug("lexing failed: %s", exc)
        return Program(), [str(exc)]

    parser = Parser(tokens)
    program = parser.parse_program()
    return program, parser.errors
