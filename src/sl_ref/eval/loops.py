from __future__ import annotations

from ..tree import ForLoop, IfExpression
from ..types import NO_VALUE, Environment, SlBool, SlValue, is_false, is_signal, is_true, new_error
from .common import EvalFunc

def eval_if_expr(node: IfExpression, env: Environment, eval_func: EvalFunc) -> SlValue:
    condition = eval_func(node.condition, env)
    if is_signal(condition):
        return condition

    if not isinstance(condition, SlBool):
        return new_error("type mismatch: if condition must be BOOLEAN, got %s %s", condition.kind, condition.inspect())

    if is_true(condition):
        return eval_func(node.consequence, env)

    if node.alternative is not None:
        return eval_func(node.alternative, env)

    return NO_VALUE

def eval_for_loop(node: ForLoop, env: Environment, eval_func: EvalFunc) -> SlValue:
    """Re-check the condition before every pass; the body shares the enclosing scope."""
    result: SlValue = NO_VALUE

    while True:
        condition = eval_func(node.condition, env)
        if is_signal(condition):
            return condition

        if not isinstance(condition, SlBool):
            return new_error("type mismatch: for condition must be BOOLEAN, got %s %s", condition.kind, condition.inspect())

        if is_false(condition):
            return result

        result = eval_func(node.body, env)
        if is_signal(result):
            return result
