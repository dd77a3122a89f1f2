from __future__ import annotations

import pytest

from tests.support.harness import run_runtime_case
from sl_ref.types import FALSE, NO_VALUE, TRUE, SlBool, SlInteger, SlString, is_false, is_true

SCENARIOS = [
    pytest.param("5", ("integer", 5), None, id="integer-literal"),
    pytest.param("-5", ("integer", -5), None, id="negate"),
    pytest.param("--5", ("integer", 5), None, id="double-negate"),
    pytest.param("5 + 5 + 5 + 5 - 10", ("integer", 10), None, id="sum-chain"),
    pytest.param("2 * 2 * 2 * 2 * 2", ("integer", 32), None, id="product-chain"),
    pytest.param("-50 + 100 + -50", ("integer", 0), None, id="negative-operands"),
    pytest.param("5 + 2 * 10", ("integer", 25), None, id="product-over-sum"),
    pytest.param("20 + 2 * -10", ("integer", 0), None, id="prefix-in-product"),
    pytest.param("2 * (5 + 10)", ("integer", 30), None, id="grouping"),
    pytest.param("(5 + 10 * 2 + 15 / 3) * 2 + -10", ("integer", 50), None, id="mixed"),
    pytest.param("8 - 4 - 2", ("integer", 2), None, id="sub-left-assoc"),
    pytest.param("100 / 10 / 5", ("integer", 2), None, id="div-left-assoc"),
    pytest.param("7 / 2", ("integer", 3), None, id="div-truncates"),
    pytest.param("-7 / 2", ("integer", -3), None, id="div-truncates-toward-zero"),
    pytest.param("7 / -2", ("integer", -3), None, id="div-negative-divisor"),
    pytest.param("-7 / -2", ("integer", 3), None, id="div-both-negative"),
    pytest.param("7 / 0", ("error", "division by zero"), None, id="div-by-zero"),
    pytest.param(
        "9223372036854775807 + 1",
        ("integer", -9223372036854775808),
        None,
        id="add-wraps-int64",
    ),
    pytest.param(
        "-9223372036854775807 - 2",
        ("integer", 9223372036854775807),
        None,
        id="sub-wraps-int64",
    ),
    pytest.param(
        "4611686018427387904 * 2",
        ("integer", -9223372036854775808),
        None,
        id="mul-wraps-int64",
    ),
    pytest.param("true", ("bool", True), None, id="true-literal"),
    pytest.param("!true", ("bool", False), None, id="not-true"),
    pytest.param("!!false", ("bool", False), None, id="double-not"),
    pytest.param("1 < 2", ("bool", True), None, id="lt"),
    pytest.param("1 > 2", ("bool", False), None, id="gt"),
    pytest.param("1 == 1", ("bool", True), None, id="int-eq"),
    pytest.param("1 != 1", ("bool", False), None, id="int-neq"),
    pytest.param("true == true", ("bool", True), None, id="bool-eq"),
    pytest.param("true != false", ("bool", True), None, id="bool-neq"),
    pytest.param("(1 < 2) == true", ("bool", True), None, id="compare-then-eq"),
    pytest.param("(1 > 2) == true", ("bool", False), None, id="compare-then-eq-false"),
    pytest.param('"hello world"', ("string", "hello world"), None, id="string-literal"),
    pytest.param("!5", ("error", "type mismatch"), None, id="not-integer"),
    pytest.param("-true", ("error", "type mismatch"), None, id="negate-boolean"),
    pytest.param("5 + true", ("error", "type mismatch"), None, id="int-plus-bool"),
    pytest.param("true == 1", ("error", "type mismatch"), None, id="bool-eq-int"),
    pytest.param("true + false", ("error", "unknown operator: BOOLEAN + BOOLEAN"), None, id="bool-plus"),
    pytest.param("true < false", ("error", "unknown operator: BOOLEAN < BOOLEAN"), None, id="bool-lt"),
    pytest.param('"a" + "b"', ("error", "unsupported operand"), None, id="string-infix"),
    pytest.param("5 + missing", ("error", "cannot resolve identifier: missing"), None, id="unresolved-operand"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_operators(source, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_error_in_left_operand_skips_right() -> None:
    # the right side would report a different error if it ran
    run_runtime_case("(1 / 0) + nope", ("error", "division by zero"), None)


def test_error_short_circuits_remaining_statements() -> None:
    run_runtime_case("var a = 1; 5 + true; var a = 99; a", ("error", "type mismatch"), None)


@pytest.mark.parametrize(
    "value, truthy, falsy",
    [
        pytest.param(TRUE, True, False, id="true"),
        pytest.param(SlBool(True), True, False, id="fresh-true"),
        pytest.param(FALSE, False, True, id="false"),
        pytest.param(SlInteger(1), False, False, id="integer"),
        pytest.param(SlString(""), False, False, id="string"),
        pytest.param(NO_VALUE, False, False, id="no-value"),
    ],
)
def test_only_booleans_are_true_or_false(value, truthy, falsy) -> None:
    assert is_true(value) is truthy
    assert is_false(value) is falsy
