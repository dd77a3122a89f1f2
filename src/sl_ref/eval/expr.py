from __future__ import annotations

from ..tree import InfixExpression, PrefixExpression
from ..types import Environment, SlBool, SlInteger, SlValue, is_signal, native_bool, new_error
from ..utils import sl_equals
from .common import EvalFunc

def eval_prefix(node: PrefixExpression, env: Environment, eval_func: EvalFunc) -> SlValue:
    right = eval_func(node.right, env)
    if is_signal(right):
        return right

    match node.operator:
        case '!':
            if not isinstance(right, SlBool):
                return new_error("type mismatch: '!' expects BOOLEAN, got %s %s", right.kind, right.inspect())
            return native_bool(not right.value)
        case '-':
            if not isinstance(right, SlInteger):
                return new_error("type mismatch: '-' expects INTEGER, got %s %s", right.kind, right.inspect())
            return SlInteger(-right.value)
        case _:
            return new_error("unknown operator: %s%s", node.operator, right.kind)

def eval_infix(node: InfixExpression, env: Environment, eval_func: EvalFunc) -> SlValue:
    """The left operand's kind picks the path; the right side is evaluated only after that."""
    left = eval_func(node.left, env)
    if is_signal(left):
        return left

    match left:
        case SlInteger():
            return _eval_integer_infix(node, left, env, eval_func)
        case SlBool():
            return _eval_boolean_infix(node, left, env, eval_func)
        case _:
            return new_error("unsupported operand: %s %s (left side must be INTEGER or BOOLEAN)", left.kind, node.operator)

def _eval_integer_infix(node: InfixExpression, left: SlInteger, env: Environment, eval_func: EvalFunc) -> SlValue:
    right = eval_func(node.right, env)
    if is_signal(right):
        return right

    if not isinstance(right, SlInteger):
        return new_error("type mismatch: INTEGER %s %s (right side must be INTEGER)", node.operator, right.kind)

    a, b = left.value, right.value

    match node.operator:
        case '+':
            return SlInteger(a + b)
        case '-':
            return SlInteger(a - b)
        case '*':
            return SlInteger(a * b)
        case '/':
            if b == 0:
                return new_error("division by zero: %d / 0", a)
            return SlInteger(truncating_div(a, b))
        case '<':
            return native_bool(a < b)
        case '>':
            return native_bool(a > b)
        case '==':
            return native_bool(a == b)
        case '!=':
            return native_bool(a != b)
        case _:
            return new_error("unknown operator: INTEGER %s INTEGER", node.operator)

def _eval_boolean_infix(node: InfixExpression, left: SlBool, env: Environment, eval_func: EvalFunc) -> SlValue:
    right = eval_func(node.right, env)
    if is_signal(right):
        return right

    if not isinstance(right, SlBool):
        return new_error("type mismatch: BOOLEAN %s %s (right side must be BOOLEAN)", node.operator, right.kind)

    match node.operator:
        case '==':
            return native_bool(sl_equals(left, right))
        case '!=':
            return native_bool(not sl_equals(left, right))
        case _:
            return new_error("unknown operator: BOOLEAN %s BOOLEAN", node.operator)

def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q
