"""
Lexer for SL

Tokenizes SL source code into a stream of tokens.

Features:
- Single-pass tokenization
- Line breaks are significant except inside parentheses
- Position tracking (offset, line, column)
- Unknown characters become ILLEGAL tokens so the parser reports them
"""

from typing import List

from .token_types import TT, Tok, make_token

# ============================================================================
# Lexer Implementation
# ============================================================================

# ASCII only: str.isdigit/isalpha also accept other scripts and superscripts.
def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_ident_start(ch: str) -> bool:
    return ch == '_' or (ch.isascii() and ch.isalpha())


def is_ident_char(ch: str) -> bool:
    return is_ident_start(ch) or is_digit(ch)


class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, col {column}")


class Lexer:
    """
    SL lexer.

    Tracks a stack of open brackets: a line break directly inside `(` is
    layout, everywhere else it ends a statement.
    """

    KEYWORDS = {
        'var': TT.VAR,
        'return': TT.RETURN,
        'fn': TT.FN,
        'if': TT.IF,
        'else': TT.ELSE,
        'for': TT.FOR,
        'true': TT.TRUE,
        'false': TT.FALSE,
    }

    # Longest matches first
    OPERATORS = [
        ('==', TT.EQ),
        ('!=', TT.NEQ),

        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('!', TT.BANG),
        ('=', TT.ASSIGN),
        ('<', TT.LT),
        ('>', TT.GT),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        (',', TT.COMMA),
        (';', TT.SEMI),
    ]

    ESCAPES = {
        'n': '\n',
        't': '\t',
        '"': '"',
        '\\': '\\',
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []
        self.brackets: List[TT] = []

        # start of the token being scanned
        self.tok_pos = 0
        self.tok_line = 1
        self.tok_column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        self.mark()
        self.emit(TT.EOF, '')
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        if self.skip_whitespace():
            return

        if self.peek() == '#':
            self.skip_comment()
            return

        self.mark()

        if self.peek() in ('\n', '\r'):
            self.scan_newline()
            return

        if self.peek() == '"':
            self.scan_string()
            return

        if is_digit(self.peek()):
            self.scan_number()
            return

        if is_ident_start(self.peek()):
            self.scan_identifier()
            return

        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_newline(self):
        """Scan newline character"""
        if self.peek() == '\r' and self.peek(1) == '\n':
            self.advance(2)
        else:
            self.advance()

        if not self.brackets or self.brackets[-1] != TT.LPAR:
            self.emit(TT.NEWLINE, '\n')

        self.line += 1
        self.column = 1

    def scan_string(self):
        """Scan string literal: "..." (value is the unescaped content)"""
        self.advance()
        content = ''

        while self.pos < len(self.source) and self.peek() != '"':
            ch = self.advance()
            if ch == '\\':
                if self.pos >= len(self.source):
                    break
                esc = self.advance()
                if esc not in self.ESCAPES:
                    raise LexError(f"Unknown escape '\\{esc}'", self.line, self.column - 2)
                content += self.ESCAPES[esc]
                continue
            if ch == '\n':
                self.line += 1
                self.column = 1
            content += ch

        if self.pos >= len(self.source):
            raise LexError("Unterminated string", self.tok_line, self.tok_column)

        self.advance()
        self.emit(TT.STRING, content)

    def scan_number(self):
        """Scan integer literal"""
        value = ''
        while is_digit(self.peek()):
            value += self.advance()

        self.emit(TT.NUMBER, value)

    def scan_identifier(self):
        """Scan identifier or keyword"""
        value = ''
        while is_ident_char(self.peek()):
            value += self.advance()

        self.emit(self.KEYWORDS.get(value, TT.IDENT), value)

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.track_bracket(op_type)
                self.emit(op_type, op_str)
                return

        self.emit(TT.ILLEGAL, self.advance())

    def track_bracket(self, op_type: TT):
        if op_type in (TT.LPAR, TT.LBRACE):
            self.brackets.append(op_type)
        elif op_type in (TT.RPAR, TT.RBRACE) and self.brackets:
            self.brackets.pop()

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = ''
        for _ in range(n):
            ch = self.source[self.pos] if self.pos < len(self.source) else '\0'
            result += ch
            self.pos += 1
            self.column += 1
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace (not newlines), return True if any skipped"""
        skipped = False
        while self.peek() in (' ', '\t'):
            self.advance()
            skipped = True
        return skipped

    def skip_comment(self):
        """Skip comment until end of line"""
        while self.peek() not in ('\n', '\r', '\0'):
            self.advance()

    def mark(self):
        self.tok_pos = self.pos
        self.tok_line = self.line
        self.tok_column = self.column

    def emit(self, token_type: TT, value: str):
        """Emit a token positioned at the last mark"""
        self.tokens.append(make_token(token_type, value, self.tok_pos, self.tok_line, self.tok_column, self.pos))


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
