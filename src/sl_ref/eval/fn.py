from __future__ import annotations

from typing import Callable, List

from ..tree import AnonymousFunction, FunctionCall, FunctionStatement, Identifier
from ..types import Environment, SlFn, SlReturn, SlValue, is_signal, new_error
from .common import EvalFunc, eval_in_order

ApplyFunc = Callable[[SlFn, List[SlValue]], SlValue]

def eval_fn_def(node: FunctionStatement, env: Environment) -> SlFn:
    name = node.name.value
    params = tuple(p.value for p in node.parameters)
    fn_value = SlFn(params=params, body=node.body, env=env, name=name)
    env.define(name, fn_value)

    return fn_value

def eval_anonymous_fn(node: AnonymousFunction, env: Environment) -> SlFn:
    params = tuple(p.value for p in node.parameters)
    return SlFn(params=params, body=node.body, env=env)

def eval_call(node: FunctionCall, env: Environment, eval_func: EvalFunc, apply_func: ApplyFunc) -> SlValue:
    callee_node = node.function

    if isinstance(callee_node, Identifier):
        callee = env.lookup(callee_node.value)
    else:
        callee = eval_func(callee_node, env)
        if is_signal(callee):
            return callee

    if not isinstance(callee, SlFn):
        return new_error("function not found: %s", callee_node)

    if len(node.arguments) != len(callee.params):
        return new_error(
            "wrong number of arguments: %s expects %d, got %d",
            callee.name or callee_node,
            len(callee.params),
            len(node.arguments),
        )

    args = eval_in_order(list(node.arguments), env, eval_func)
    if not isinstance(args, list):
        return args

    return apply_func(callee, args)

def apply_function(fn: SlFn, args: List[SlValue], eval_func: EvalFunc) -> SlValue:
    """Run the body in a fresh scope parented to the function's captured environment."""
    call_env = fn.env.enclosed()

    for name, value in zip(fn.params, args):
        call_env.define(name, value)

    result = eval_func(fn.body, call_env)

    # a return ends this call only
    if isinstance(result, SlReturn):
        return result.value

    return result
