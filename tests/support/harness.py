from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from sl_ref.lexer_rd import LexError, Lexer
from sl_ref.parser_rd import parse_source
from sl_ref.runner import run as run_program
from sl_ref.tree import Program
from sl_ref.types import (
    EvalLimits,
    Environment,
    InitError,
    ParseError,
    SlBool,
    SlError,
    SlFn,
    SlInteger,
    SlNoValue,
    SlString,
)

RuntimeExpectation = Optional[Tuple[str, object]]

KEYWORDS = Lexer.KEYWORDS


def parse_ok(code: str) -> Program:
    """Parse code that must be free of syntax errors."""
    program, errors = parse_source(code)
    assert errors == [], f"unexpected parse errors: {errors}"
    return program


def parse_errors(code: str) -> List[str]:
    """Parse code that must fail and return the collected messages."""
    _, errors = parse_source(code)
    assert errors, f"expected parse errors for {code!r}"
    return errors


def render_first(code: str) -> str:
    """Source-like rendering of the first statement of `code`."""
    program = parse_ok(code)
    assert program.statements, "program has no statements"
    return str(program.statements[0])


def verify_result(value: object, kind: str, expected: object) -> None:
    """Assert runtime result shape/value compatibility with expectations."""
    match kind:
        case "integer":
            assert isinstance(
                value, SlInteger
            ), f"expected SlInteger, got {type(value).__name__}: {value!r}"
            assert value.value == expected, f"expected {expected}, got {value.value}"
            return
        case "bool":
            assert isinstance(
                value, SlBool
            ), f"expected SlBool, got {type(value).__name__}: {value!r}"
            assert value.value is bool(
                expected
            ), f"expected {expected}, got {value.value}"
            return
        case "string":
            assert isinstance(
                value, SlString
            ), f"expected SlString, got {type(value).__name__}: {value!r}"
            assert (
                value.value == expected
            ), f"expected {expected!r}, got {value.value!r}"
            return
        case "error":
            assert isinstance(
                value, SlError
            ), f"expected SlError, got {type(value).__name__}: {value!r}"
            assert (
                str(expected) in value.message
            ), f"expected {expected!r} in {value.message!r}"
            return
        case "novalue":
            assert isinstance(
                value, SlNoValue
            ), f"expected NO_VALUE, got {type(value).__name__}: {value!r}"
            return
        case "function":
            assert isinstance(
                value, SlFn
            ), f"expected SlFn, got {type(value).__name__}: {value!r}"
            assert value.params == tuple(
                expected
            ), f"expected params {expected!r}, got {value.params!r}"
            return
        case _:
            raise AssertionError(f"unknown expectation kind {kind}")


def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
    limits: Optional[EvalLimits] = None,
) -> None:
    """Execute one runtime scenario with optional expected exception."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            run_program(source, limits=limits)
        return

    result = run_program(source, limits=limits)
    if expectation is not None:
        verify_result(result, expectation[0], expectation[1])


__all__ = [
    "Environment",
    "EvalLimits",
    "InitError",
    "KEYWORDS",
    "LexError",
    "ParseError",
    "RuntimeExpectation",
    "parse_errors",
    "parse_ok",
    "render_first",
    "run_program",
    "run_runtime_case",
    "verify_result",
]
