import random

import pytest
from sympy import diff, symbols

from Expressions import InvalidVariableName, Value, parse
from Expressions.differentiator import Differentiator
from generate_expression import generate_random_expression


class TestRules:
    def test_constant(self):
        assert parse("3").differentiate("x") == Value(0)

    def test_variable(self):
        assert parse("x").differentiate("x") == Value(1)
        assert parse("y").differentiate("x") == Value(0)

    def test_square(self):
        assert parse("x*x").differentiate("x") == parse("x+x")

    def test_sum_of_products(self):
        assert parse("x*y + 3*x").differentiate("x") == parse("y + 3")

    def test_sum_grouping_is_kept(self):
        assert parse("x*y + (x + x)").differentiate("x") == parse("y + 2")
        assert parse("x*y + x + x").differentiate("x") == parse("y + 1 + 1")

    def test_case_sensitive(self):
        assert parse("X*x").differentiate("X") == parse("x")

    def test_free_of_variable(self):
        assert parse("y*z + 4").differentiate("x") == Value(0)

    def test_result_is_simplified(self):
        result = parse("x*x*x").differentiate("x")
        assert result == parse("(x + x)*x + x*x")

    @pytest.mark.parametrize("bad", ["", "x1", "d x"])
    def test_bad_variable(self, bad):
        with pytest.raises(InvalidVariableName):
            parse("x").differentiate(bad)


class TestSteps:
    def test_trace_of_product_rule(self):
        differentiator = Differentiator("x")
        result = differentiator.run(parse("x*x"))

        rules = [step["rule"] for step in differentiator.steps]
        assert rules[0] == "initial_expression"
        assert "productRule_start" in rules
        assert "productRule_result" in rules
        assert rules[-1] == "final_derivative"
        assert differentiator.steps[-1]["expression"] == str(result) == "x + x"

    def test_step_ids_are_unique(self):
        differentiator = Differentiator("x")
        differentiator.run(parse("x*y + x"))
        ids = [step["id"] for step in differentiator.steps]
        assert len(ids) == len(set(ids))

    def test_trace_can_be_turned_off(self):
        differentiator = Differentiator("x", trace=False)
        assert differentiator.run(parse("x*x")) == parse("x + x")
        assert differentiator.steps == []


class TestLongSums:
    def test_long_sum_of_variables(self):
        e = parse(" + ".join(["x"] * 4000))
        assert e.differentiate("x") == Value(4000)

    def test_long_sum_of_products(self):
        e = parse(" + ".join(["x*y"] * 3000))
        assert e.differentiate("x") == parse(" + ".join(["y"] * 3000))
        assert e.differentiate("z") == Value(0)


@pytest.mark.parametrize("seed", range(40))
def test_matches_sympy_on_random_polynomials(seed):
    x, y = symbols("x y")
    expr_sym, text, _ = generate_random_expression(
        ["x", "y"], num_terms=3, max_depth=3, rng=random.Random(seed)
    )
    point = {"x": 2, "y": 3}

    derivative = parse(text).differentiate("x").substitute(point)
    expected = float(diff(expr_sym, x).subs({x: 2, y: 3}))

    assert isinstance(derivative, Value)
    assert derivative.num == pytest.approx(expected)


@pytest.mark.parametrize("seed", range(40))
def test_substitution_matches_sympy(seed):
    x, y = symbols("x y")
    expr_sym, text, _ = generate_random_expression(
        ["x", "y"], num_terms=3, max_depth=3, rng=random.Random(seed)
    )

    value = parse(text).substitute({"x": 2, "y": 3})

    assert isinstance(value, Value)
    assert value.num == pytest.approx(float(expr_sym.subs({x: 2, y: 3})))
