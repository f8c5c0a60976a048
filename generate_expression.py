import random
from sympy import symbols, S, Add, Mul, latex


def generate_random_expression(variables, num_terms=3, max_depth=2, rng=None):
    """Build a random polynomial of + and * over ``variables``.

    The polynomial is built twice in lockstep: as a SymPy expression and as
    text in the grammar accepted by ``Expressions.parse``.
    """
    rng = rng or random

    # Keep the variable names for the text and SymPy symbols for the expression
    names = [str(v) for v in variables]
    sym_vars = {name: symbols(name) for name in names}

    operators = ["add", "mul"]

    def create_leaf():
        if rng.random() < 0.7:
            name = rng.choice(names)  # variable
            return sym_vars[name], name
        else:
            value = rng.randint(1, 10)  # constant
            return S(value), str(value)

    def create_node(current_depth):
        if current_depth >= max_depth or rng.random() < 0.4:
            return create_leaf()

        choice = rng.choice(operators)

        # operator node
        left_sym, left_text = create_node(current_depth + 1)
        right_sym, right_text = create_node(current_depth + 1)

        if choice == "add":
            return Add(left_sym, right_sym), f"({left_text} + {right_text})"

        elif choice == "mul":
            return Mul(left_sym, right_sym), f"({left_text})*({right_text})"

    terms = [create_node(0) for _ in range(num_terms)]
    expr = Add(*[term_sym for term_sym, _ in terms])
    expr_str = " + ".join(term_text for _, term_text in terms)

    # Return the SymPy expression, its string in our grammar, and its LaTeX representation
    return expr, expr_str, latex(expr)


if __name__ == '__main__':
    expr, expr_str, expr_latex = generate_random_expression(['x', 'y'], num_terms=2, max_depth=3)
    print(f"Generated Expression: {expr}")
    print(f"Generated Expression String: {expr_str}")
    print(f"Generated Expression LaTeX: {expr_latex}")
