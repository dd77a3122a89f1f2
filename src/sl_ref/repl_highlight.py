"""prompt_toolkit lexer for live SL syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as SlTokenizer, LexError
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_TT_GROUP = {
    TT.VAR: "keyword",
    TT.RETURN: "keyword",
    TT.FN: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.FOR: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.ILLEGAL: "error",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.BANG: "operator",
    TT.ASSIGN: "operator",
    TT.EQ: "operator",
    TT.NEQ: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.SEMI: "punctuation",
}

_LAYOUT = {TT.NEWLINE, TT.EOF}


def _gap_spans(gap: str) -> StyleAndTextTuples:
    """Whitespace between tokens; a '#' there can only start a comment."""
    idx = gap.find("#")
    if idx < 0:
        return [("", gap)]

    spans: StyleAndTextTuples = []
    if idx > 0:
        spans.append(("", gap[:idx]))
    spans.append((GROUP_STYLE["comment"], gap[idx:]))
    return spans


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = SlTokenizer(text).tokenize()
    except LexError:
        return [("", text)]

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type in _LAYOUT:
            continue

        start, end = tok.start_pos, tok.end_pos
        if start > pos:
            result.extend(_gap_spans(text[pos:start]))

        group = _TT_GROUP.get(tok.type, "")
        # an identifier directly followed by '(' is a call or declaration
        if tok.type == TT.IDENT and i + 1 < len(tokens) and tokens[i + 1].type == TT.LPAR:
            group = "function"

        result.append((GROUP_STYLE.get(group, ""), text[start:end]))
        pos = end

    if pos < len(text):
        result.extend(_gap_spans(text[pos:]))

    return result if result else [("", text)]


class SlLexer(Lexer):
    """prompt_toolkit Lexer that highlights SL source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
