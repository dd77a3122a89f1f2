from __future__ import annotations

from ..tree import ReturnStatement, VarStatement
from ..types import NO_VALUE, Environment, SlReturn, SlValue, is_signal
from .common import EvalFunc

def eval_return_stmt(node: ReturnStatement, env: Environment, eval_func: EvalFunc) -> SlValue:
    if node.value is None:
        return SlReturn(NO_VALUE)

    value = eval_func(node.value, env)
    if is_signal(value):
        return value

    return SlReturn(value)

def eval_var_stmt(node: VarStatement, env: Environment, eval_func: EvalFunc) -> SlValue:
    value = eval_func(node.value, env)
    if is_signal(value):
        return value

    return env.define(node.name.value, value)
