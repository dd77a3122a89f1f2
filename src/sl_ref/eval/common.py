from __future__ import annotations

from typing import Callable, List, Union

from ..tree import Node
from ..types import Environment, SlError, SlReturn, SlValue, is_signal

EvalFunc = Callable[[Node, Environment], SlValue]

def eval_in_order(nodes: List[Node], env: Environment, eval_func: EvalFunc) -> Union[List[SlValue], SlError, SlReturn]:
    """Evaluate left to right, stopping at the first Return or Error."""
    values: List[SlValue] = []

    for node in nodes:
        value = eval_func(node, env)
        if is_signal(value):
            return value
        values.append(value)

    return values
