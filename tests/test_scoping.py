from __future__ import annotations

import pytest

from tests.support.harness import Environment, run_program, run_runtime_case, verify_result
from sl_ref.types import NO_VALUE, SlInteger

SCENARIOS = [
    pytest.param("var a = 5; a", ("integer", 5), None, id="bind-and-read"),
    pytest.param("var a = 5 * 5; a", ("integer", 25), None, id="bind-expression"),
    pytest.param("var a = 5; var b = a; b", ("integer", 5), None, id="bind-from-binding"),
    pytest.param(
        "var a = 5; var b = a; var c = a + b + 5; c",
        ("integer", 15),
        None,
        id="bind-chain",
    ),
    pytest.param("var a = 1; var a = a + 1; a", ("integer", 2), None, id="rebind-same-scope"),
    pytest.param("var a = 5", ("integer", 5), None, id="var-yields-bound-value"),
    pytest.param("foobar", ("error", "cannot resolve identifier: foobar"), None, id="unbound"),
    pytest.param(
        "var a = missing; a",
        ("error", "cannot resolve identifier: missing"),
        None,
        id="failed-binding-stops-program",
    ),
    pytest.param(
        "var x = 1; fn f() { var x = 2; x }; f() + x",
        ("integer", 3),
        None,
        id="function-local-shadows",
    ),
    pytest.param(
        "var x = 1; fn f() { x + 1 }; f()",
        ("integer", 2),
        None,
        id="function-reads-global",
    ),
    pytest.param(
        "fn f() { var hidden = 1; hidden }; f(); hidden",
        ("error", "cannot resolve identifier: hidden"),
        None,
        id="function-locals-do-not-leak",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_scoping(source, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_environment_lookup_walks_parents() -> None:
    outer = Environment()
    outer.define("x", SlInteger(1))
    inner = outer.enclosed()
    inner.define("y", SlInteger(2))

    assert inner.lookup("x") == SlInteger(1)
    assert inner.lookup("y") == SlInteger(2)
    assert outer.lookup("y") is None
    assert "x" in inner and "y" not in outer
    assert inner.names() == ["x", "y"]


def test_inner_definition_shadows_without_touching_outer() -> None:
    outer = Environment()
    outer.define("x", SlInteger(1))
    inner = outer.enclosed()
    inner.define("x", SlInteger(2))

    assert inner.lookup("x") == SlInteger(2)
    assert outer.lookup("x") == SlInteger(1)


def test_no_value_is_distinct_from_unresolved() -> None:
    env = Environment()
    run_program("var nothing = if false { 1 }", env=env)

    assert env.lookup("nothing") is NO_VALUE
    assert env.lookup("absent") is None
    verify_result(run_program("nothing", env=env), "novalue", None)


def test_environment_persists_across_runs() -> None:
    env = Environment()
    run_program("var counter = 1; fn bump() { counter + 1 }", env=env)

    verify_result(run_program("bump()", env=env), "integer", 2)


def test_fresh_environments_give_identical_results() -> None:
    source = "fn sq(x) { x * x }; var a = sq(7); a - 9"

    first = run_program(source, env=Environment())
    second = run_program(source, env=Environment())

    assert first == second == SlInteger(40)
