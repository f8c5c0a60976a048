import logging

from Expressions.nodes import Addition, Expression, Multiplication, Value, Variable
from Expressions.numeric import check_variable_name
from Expressions.serializer import to_latex, to_string
from Expressions.simplifier import Simplifier

logger = logging.getLogger(__name__)


# --- Derivative Computation with Step-by-Step Logging ---
class Differentiator:
    """Differentiates an expression with respect to one variable.

    With ``trace`` on, every rule application is recorded in ``steps`` for
    display; ``Expression.differentiate`` turns it off.
    """

    def __init__(self, variable: str, trace: bool = True):
        self.variable = check_variable_name(variable)
        self.trace = trace
        self.steps = []

    def _add_step(self, node, rule_key, explanation, prefix="= "):
        if not self.trace:
            return
        self.steps.append({
            "id": f"step_{len(self.steps)}_{rule_key}",
            "rule": rule_key,
            "prefix": prefix,
            "expression": to_string(node),
            "latex": to_latex(node),
            "explanation_text": explanation,
        })

    def run(self, node: Expression) -> Expression:
        self._add_step(node, "initial_expression", "Differentiating the expression:",
                       prefix=f"\\frac{{d}}{{d{self.variable}}}")
        result = self._differentiate(node)
        self._add_step(result, "final_derivative", "The final derivative is:")
        logger.debug(f"d/d{self.variable} of {node}: {result}")
        return result

    def _differentiate(self, root: Expression) -> Expression:
        # Simplified forms of every subtree, for the untouched factors of the
        # product rule. Derivatives coming out of the loop are already
        # simplified, so combining them only needs the local fold.
        simplifier = Simplifier()
        simplifier.run(root)

        derivatives = {}
        stack = [(root, False)]
        while stack:
            node, expanded = stack.pop()
            if id(node) in derivatives:
                continue

            if isinstance(node, Value):
                self._add_step(node, "constantRule", "The derivative of a constant is 0.")
                derivatives[id(node)] = Value(0.0)

            elif isinstance(node, Variable):
                if node.name == self.variable:
                    self._add_step(node, "variableRule", f"The derivative of {self.variable} is 1.")
                    derivatives[id(node)] = Value(1.0)
                else:
                    self._add_step(node, "constantRule", f"{node.name} does not depend on {self.variable}.")
                    derivatives[id(node)] = Value(0.0)

            elif isinstance(node, (Addition, Multiplication)):
                is_sum = isinstance(node, Addition)
                if not expanded:
                    if is_sum:
                        self._add_step(node, "sumRule_start", "Applying the Sum Rule.")
                    else:
                        self._add_step(node, "productRule_start", "Applying the Product Rule: ")
                    stack.append((node, True))
                    stack.append((node.right, False))
                    stack.append((node.left, False))
                    continue

                du = derivatives[id(node.left)]
                dv = derivatives[id(node.right)]
                if is_sum:
                    result_node = simplifier.fold(Addition(du, dv))
                    self._add_step(result_node, "sumRule_result", "Result of the Sum Rule.")
                else:
                    u = simplifier.run(node.left)
                    v = simplifier.run(node.right)
                    result_node = simplifier.fold(Addition(
                        simplifier.fold(Multiplication(du, v)),
                        simplifier.fold(Multiplication(u, dv)),
                    ))
                    self._add_step(result_node, "productRule_result", "Result of the Product Rule.")
                derivatives[id(node)] = result_node

            else:
                raise TypeError(f"Differentiation rule for {type(node).__name__} not implemented")

        return derivatives[id(root)]
