"""Interactive REPL for SL, powered by prompt_toolkit."""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass, field

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import Lexer, LexError, tokenize
from .repl_highlight import SlLexer
from .runner import repl_eval
from .token_types import TT
from .types import EvalLimits, Environment, ParseError, SlError, SlNoValue
from .utils import default_limits, log_level_from_env

logger = logging.getLogger(__name__)

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => description.
_SLASH_CMDS = {
    "/ast": "Toggle printing the parsed tree before evaluation",
    "/clear": "Clear the terminal screen",
    "/reset": "Reset the REPL environment",
}

_DEPTH_OPEN = {TT.LPAR, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAR, TT.RBRACE}

_WORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class ReplState:
    """Everything a slash command may swap out between prompts."""

    env: Environment = field(default_factory=Environment)
    show_ast: bool = False
    limits: EvalLimits = field(default_factory=default_limits)


def needs_more_input(text: str) -> bool:
    """Return True while *text* still has an open '(' or '{', or an open string."""
    try:
        tokens = tokenize(text)
    except LexError as exc:
        return exc.message == "Unterminated string"

    depth = 0
    for tok in tokens:
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth = max(depth - 1, 0)

    return depth > 0


class _ReplCompleter(Completer):
    """Slash commands on an empty prompt, otherwise keywords and bound names."""

    def __init__(self, state: ReplState):
        self.state = state

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if text.startswith("/"):
            for cmd, desc in _SLASH_CMDS.items():
                if cmd.startswith(text):
                    yield Completion(cmd, start_position=-len(text), display_meta=desc)
            return

        match = _WORD_RE.search(text)
        if match is None:
            return

        word = match.group(0)
        for kw in sorted(Lexer.KEYWORDS):
            if kw.startswith(word) and kw != word:
                yield Completion(kw, start_position=-len(word), display_meta="keyword")

        for name in self.state.env.names():
            if name.startswith(word) and name != word:
                value = self.state.env.lookup(name)
                meta = value.kind.lower() if value is not None else ""
                yield Completion(name, start_position=-len(word), display_meta=meta)


def handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    cmd = stripped.split(None, 1)[0]

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/ast":
        state.show_ast = not state.show_ast
        print(f"AST dump: {'on' if state.show_ast else 'off'}")
        return True

    if cmd == "/reset":
        state.env = Environment()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_chunk(text: str, state: ReplState) -> None:
    """Evaluate one submitted chunk and print its result or error."""
    try:
        result, program = repl_eval(text, state.env, state.limits)
    except ParseError as exc:
        for message in exc.errors:
            print(f"Error: {message}", file=sys.stderr)
        return

    if state.show_ast:
        print(program.render(), end="")

    if isinstance(result, SlError):
        print(f"Error: {result.message}", file=sys.stderr)
        return

    if not isinstance(result, SlNoValue):
        print(result.inspect())


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    state = ReplState()

    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer

        # Keep reading while a bracket or string is still open.
        if needs_more_input(buf.text):
            buf.insert_text("\n")
            return

        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=SlLexer(),
        completer=_ReplCompleter(state),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("sl repl, Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, state):
            continue

        eval_chunk(text, state)


def main() -> int:
    logging.basicConfig(level=log_level_from_env(), format="%(levelname)s %(name)s: %(message)s")
    logger.debug("starting repl")
    repl()
    return 0


if __name__ == "__main__":
    sys.exit(main())
