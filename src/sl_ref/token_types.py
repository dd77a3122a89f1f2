"""
Token Types for the SL parser

Shared between lexer and parser to avoid circular dependencies.
Tokens themselves are lark Tokens: a str subclass carrying the literal
text plus `type`, `line`, `column` and `start_pos`.
"""

from enum import Enum
from typing import Optional

from lark import Token
from typing_extensions import TypeAlias

Tok: TypeAlias = Token


class TT(str, Enum):
    """Token Types"""

    # Literals
    IDENT = "IDENT"
    NUMBER = "NUMBER"
    STRING = "STRING"
    ILLEGAL = "ILLEGAL"

    # Keywords
    VAR = "VAR"
    RETURN = "RETURN"
    FN = "FN"
    IF = "IF"
    ELSE = "ELSE"
    FOR = "FOR"
    TRUE = "TRUE"
    FALSE = "FALSE"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    BANG = "BANG"
    ASSIGN = "ASSIGN"

    # Comparison
    EQ = "EQ"
    NEQ = "NEQ"
    LT = "LT"
    GT = "GT"

    # Punctuation
    LPAR = "LPAR"
    RPAR = "RPAR"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    COMMA = "COMMA"
    SEMI = "SEMI"

    # Special
    NEWLINE = "NEWLINE"
    EOF = "EOF"

    def __str__(self) -> str:
        return self.value


def make_token(kind: TT, value: str, pos: int = 0, line: int = 1, column: int = 1,
               end_pos: Optional[int] = None) -> Tok:
    """Build a token at the given source position."""
    if end_pos is None:
        end_pos = pos + len(value)
    return Token(kind, value, pos, line, column, None, None, end_pos)


def describe(tok: Tok) -> str:
    """Human-readable token description for diagnostics."""
    if tok.type == TT.EOF:
        return "end of input"
    if tok.type == TT.NEWLINE:
        return "line break"
    return f"{tok.type} {str(tok)!r}"
