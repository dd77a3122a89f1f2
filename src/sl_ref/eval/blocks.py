from __future__ import annotations

from typing import Sequence

from ..tree import Statement
from ..types import NO_VALUE, Environment, SlError, SlReturn, SlValue, is_signal
from .common import EvalFunc

def eval_program(statements: Sequence[Statement], env: Environment, eval_func: EvalFunc) -> SlValue:
    """Run top-level statements; a return ends the run with its value."""
    result: SlValue = NO_VALUE

    for stmt in statements:
        result = eval_func(stmt, env)

        match result:
            case SlReturn(value=value):
                return value
            case SlError():
                return result

    return result

def eval_block(statements: Sequence[Statement], env: Environment, eval_func: EvalFunc) -> SlValue:
    """Run a block in the current scope; Return and Error leave it unmodified."""
    result: SlValue = NO_VALUE

    for stmt in statements:
        result = eval_func(stmt, env)
        if is_signal(result):
            return result

    return result
