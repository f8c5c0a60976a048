import random

import pytest

from Expressions import Addition, Multiplication, Value, Variable, parse
from Expressions.equality import expressions_equal, flatten_sum, nodes_equal, sums_equal
from generate_expression import generate_random_expression

a, b, c, x, y = (Variable(n) for n in "abcxy")


def test_flatten_sum_unfolds_left_to_right():
    node = Addition(Addition(a, b), Addition(c, Multiplication(x, y)))
    assert flatten_sum(node) == [a, b, c, Multiplication(x, y)]


def test_flatten_sum_of_non_sum_is_itself():
    node = Multiplication(Addition(a, b), c)
    assert flatten_sum(node) == [node]


class TestSums:
    def test_constant_sums_reassociate(self):
        assert parse("(3+4)+5") == parse("3+(4+5)")

    def test_symbolic_sums_reassociate(self):
        assert parse("(a+b)+c") == parse("a+(b+c)")
        assert Addition(Addition(a, b), c) == Addition(a, Addition(b, c))

    def test_sums_do_not_commute(self):
        assert parse("b+a+c") != parse("a+b+c")

    def test_different_lengths(self):
        assert not sums_equal(Addition(a, b), Addition(a, Addition(b, c)))

    def test_sum_against_single_term(self):
        assert Addition(x, y) != x
        assert x != Addition(x, y)
        assert sums_equal(x, x)

    def test_sums_nested_inside_products(self):
        left = Multiplication(Addition(Addition(a, b), c), x)
        right = Multiplication(Addition(a, Addition(b, c)), x)
        assert left == right


class TestProducts:
    def test_grouping_matters(self):
        assert parse("x*(2*y)") != parse("(x*2)*y")

    def test_order_matters(self):
        assert parse("x*y") != parse("y*x")

    def test_same_structure(self):
        assert nodes_equal(Multiplication(x, y), Multiplication(x, y))


class TestLeaves:
    def test_values_compare_to_five_places(self):
        assert Value(1.000001) == Value(1.0)
        assert Value(1.00001) != Value(1.0)

    def test_variables_are_case_sensitive(self):
        assert Variable("x") != Variable("X")

    def test_value_never_equals_variable(self):
        assert not expressions_equal(Value(1), x)
        assert not nodes_equal(x, Value(1))


class TestHash:
    def test_equal_leaves_hash_equal(self):
        assert hash(Value(1.000001)) == hash(Value(1.0))
        assert hash(Variable("x")) == hash(Variable("x"))

    def test_regrouped_sums_hash_equal(self):
        left = Addition(Addition(a, b), c)
        right = Addition(a, Addition(b, c))
        assert hash(left) == hash(right)

    @pytest.mark.parametrize("seed", range(150))
    def test_random_regroupings_are_equal_and_hash_equal(self, seed, regroup):
        _, text, _ = generate_random_expression(
            ["x", "y", "z"], num_terms=4, max_depth=3, rng=random.Random(seed)
        )
        original = parse(text)
        regrouped = regroup(original, seed)
        assert regrouped == original
        assert original == regrouped
        assert hash(regrouped) == hash(original)


class TestLongChains:
    def test_left_and_right_deep_products_differ(self):
        left_deep = right_deep = x
        for _ in range(3000):
            left_deep = Multiplication(left_deep, x)
            right_deep = Multiplication(x, right_deep)
        assert left_deep != right_deep
        assert left_deep == parse("*".join(["x"] * 3001))

    def test_long_sums_regrouped(self):
        left_deep = right_deep = x
        for _ in range(5000):
            left_deep = Addition(left_deep, x)
            right_deep = Addition(x, right_deep)
        assert left_deep == right_deep
        assert hash(left_deep) == hash(right_deep)
