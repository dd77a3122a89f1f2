from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .evaluator import eval_expr
from .parser_rd import parse_source
from .tree import Program
from .types import EvalLimits, Environment, InitError, ParseError, SlError, SlNoValue, SlValue
from .utils import DEFAULT_MAX_CALL_DEPTH, default_limits, log_level_from_env

logger = logging.getLogger(__name__)

# frames of host stack used per SL call, with slack for deep expressions
_FRAMES_PER_CALL = 20

class Runner:
    """A parsed program ready to evaluate.

    Build one with `from_source` or `from_program`; both refuse to produce a
    runner without a tree, so evaluation never starts on a malformed program.
    """

    def __init__(self, program: Optional[Program], limits: Optional[EvalLimits] = None):
        if program is None:
            raise InitError("submitted an empty (None) program")

        self.program = program
        self.limits = limits if limits is not None else default_limits()

    @classmethod
    def from_source(cls, source: str, limits: Optional[EvalLimits] = None) -> Runner:
        program, errors = parse_source(source)

        if errors:
            logger.debug("rejecting source with %d parse error(s)", len(errors))
            raise ParseError(errors)

        return cls(program, limits)

    @classmethod
    def from_program(cls, program: Optional[Program], limits: Optional[EvalLimits] = None) -> Runner:
        return cls(program, limits)

    def eval_program(self, env: Optional[Environment] = None) -> SlValue:
        """Evaluate against `env`, or a fresh empty environment."""
        if env is None:
            env = Environment()

        logger.debug("evaluating %d statement(s) with %r", len(self.program.statements), self.limits)
        ensure_recursion_headroom(self.limits)
        return eval_expr(self.program, env, self.limits)

def run(src: str, env: Optional[Environment] = None, limits: Optional[EvalLimits] = None) -> SlValue:
    return Runner.from_source(src, limits).eval_program(env)

def repl_eval(src: str, env: Environment, limits: Optional[EvalLimits] = None) -> Tuple[SlValue, Program]:
    """Evaluate one REPL chunk; bindings persist in `env` across calls."""
    runner = Runner.from_source(src, limits)
    return runner.eval_program(env), runner.program

def ensure_recursion_headroom(limits: EvalLimits) -> None:
    """Raise the host recursion limit to fit the configured call depth.

    Unlimited or small depth limits still get room for the default depth.
    """
    depth = max(limits.max_call_depth or 0, DEFAULT_MAX_CALL_DEPTH)
    needed = depth * _FRAMES_PER_CALL + 200
    if needed > sys.getrecursionlimit():
        sys.setrecursionlimit(needed)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def _limit_arg(flag: str, token: str, it: Iterator[str]) -> Optional[int]:
    if token.startswith(f"{flag}="):
        raw = token.split("=", 1)[1]
    else:
        try:
            raw = next(it)
        except StopIteration:
            raise SystemExit(f"{flag} flag requires a value") from None

    try:
        value = int(raw)
    except ValueError:
        raise SystemExit(f"{flag} expects an integer, got {raw!r}") from None

    return value if value > 0 else None

def main(argv: Optional[List[str]] = None) -> int:
    defaults = default_limits()
    max_call_depth = defaults.max_call_depth
    max_steps = defaults.max_steps
    dump_ast = False
    debug = False
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--ast":
            dump_ast = True
            continue

        if token == "--debug":
            debug = True
            continue

        if token == "--max-call-depth" or token.startswith("--max-call-depth="):
            max_call_depth = _limit_arg("--max-call-depth", token, it)
            continue

        if token == "--max-steps" or token.startswith("--max-steps="):
            max_steps = _limit_arg("--max-steps", token, it)
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    logging.basicConfig(
        level=logging.DEBUG if debug else log_level_from_env(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    limits = EvalLimits(max_call_depth=max_call_depth, max_steps=max_steps)
    source = _load_source(arg or "-")

    try:
        runner = Runner.from_source(source, limits)
    except ParseError as exc:
        for message in exc.errors:
            print(f"parse error: {message}", file=sys.stderr)
        return 1

    if dump_ast:
        print(runner.program.render(), end="")

    result = runner.eval_program()

    if isinstance(result, SlError):
        print(f"error: {result.message}", file=sys.stderr)
        return 1

    if not isinstance(result, SlNoValue):
        print(result.inspect())

    return 0

if __name__ == "__main__":
    sys.exit(main())
