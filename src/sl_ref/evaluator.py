from __future__ import annotations

import logging
from typing import List, Optional

from typing_extensions import assert_never

from .tree import (
    AnonymousFunction,
    BlockStatement,
    Boolean,
    ExpressionStatement,
    ForLoop,
    FunctionCall,
    FunctionStatement,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
    VarStatement,
)
from .types import (
    EvalLimits,
    Environment,
    SlFn,
    SlInteger,
    SlString,
    SlValue,
    native_bool,
    new_error,
)
from .eval.blocks import eval_block, eval_program
from .eval.control import eval_return_stmt, eval_var_stmt
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import apply_function, eval_anonymous_fn, eval_call, eval_fn_def
from .eval.loops import eval_for_loop, eval_if_expr

logger = logging.getLogger(__name__)

# ---------------- Public API ----------------

def eval_expr(ast: Node, env: Optional[Environment] = None, limits: Optional[EvalLimits] = None) -> SlValue:
    """Evaluate a tree against `env` (a fresh one when omitted)."""
    if env is None:
        env = Environment()

    evaluator = TreeEvaluator(limits)

    try:
        return evaluator.eval(ast, env)
    except RecursionError:
        logger.debug("host recursion limit hit at call depth %d", evaluator.call_depth)
        return new_error("maximum nesting depth exceeded")

# ---------------- Core evaluator ----------------

class TreeEvaluator:
    """Recursive dispatcher over AST nodes.

    Holds only the counters for the optional limits, so one instance per run
    keeps evaluation free of process-wide state.
    """

    def __init__(self, limits: Optional[EvalLimits] = None):
        self.limits = limits or EvalLimits()
        self.call_depth = 0
        self.steps = 0

    def eval(self, node: Node, env: Environment) -> SlValue:
        max_steps = self.limits.max_steps
        if max_steps is not None:
            self.steps += 1
            if self.steps > max_steps:
                logger.debug("step budget of %d exhausted", max_steps)
                return new_error("step budget exhausted after %d steps", max_steps)

        match node:
            # statements
            case Program(statements=statements):
                return eval_program(statements, env, self.eval)
            case BlockStatement(statements=statements):
                return eval_block(statements, env, self.eval)
            case ExpressionStatement(expression=expression):
                return self.eval(expression, env)
            case VarStatement():
                return eval_var_stmt(node, env, self.eval)
            case ReturnStatement():
                return eval_return_stmt(node, env, self.eval)
            case FunctionStatement():
                return eval_fn_def(node, env)

            # expressions
            case Identifier(value=name):
                value = env.lookup(name)
                if value is None:
                    return new_error("cannot resolve identifier: %s", name)
                return value
            case IntegerLiteral(value=value):
                return SlInteger(value)
            case StringLiteral(value=value):
                return SlString(value)
            case Boolean(value=value):
                return native_bool(value)
            case PrefixExpression():
                return eval_prefix(node, env, self.eval)
            case InfixExpression():
                return eval_infix(node, env, self.eval)
            case IfExpression():
                return eval_if_expr(node, env, self.eval)
            case ForLoop():
                return eval_for_loop(node, env, self.eval)
            case AnonymousFunction():
                return eval_anonymous_fn(node, env)
            case FunctionCall():
                return eval_call(node, env, self.eval, self.apply)
            case _:
                assert_never(node)

    def apply(self, fn: SlFn, args: List[SlValue]) -> SlValue:
        max_depth = self.limits.max_call_depth
        if max_depth is not None and self.call_depth >= max_depth:
            logger.debug("call depth limit %d reached calling %r", max_depth, fn)
            return new_error("maximum call depth exceeded (%d) calling %s", max_depth, fn.name or "anonymous fn")

        self.call_depth += 1
        try:
            return apply_function(fn, args, self.eval)
        finally:
            self.call_depth -= 1
