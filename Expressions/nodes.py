import logging
from dataclasses import dataclass
from typing import Iterator, Mapping, Set

from Expressions.numeric import check_number, check_variable_name, is_zero

logger = logging.getLogger(__name__)


class Expression:
    """An immutable polynomial expression over + and *.

    Expression = Value(num: float)
               + Variable(name: str)
               + Addition(left: Expression, right: Expression)
               + Multiplication(left: Expression, right: Expression)

    Composition methods never modify ``self`` or their arguments; they return
    new nodes and may reuse unchanged subtrees.
    """

    def add_expr(self, e: 'Expression') -> 'Expression':
        """Append ``e`` with an addition.

        An empty ``e`` resets the result to the empty expression, and an ``e``
        structurally equal to ``self`` gives ``self * 2`` simplified. Anything
        else is returned as an unsimplified ``Addition(self, e)``.
        """
        from Expressions.simplifier import Simplifier

        if is_empty(e):
            return empty_expression()
        if self == e:
            return Simplifier().run(Multiplication(self, Value(2.0)))
        return Addition(self, e)

    def multiply_expr(self, e: 'Expression') -> 'Expression':
        """Append ``e`` as a factor. The product is not simplified."""
        if is_empty(e):
            return empty_expression()
        if e == Value(1.0):
            return self
        return Multiplication(self, e)

    def add_variable(self, name: str) -> 'Expression':
        return Addition(Variable(name), self)

    def multiply_variable(self, name: str) -> 'Expression':
        return Multiplication(Variable(name), self)

    def add_constant(self, num: float) -> 'Expression':
        """Put ``num`` in front of this expression with an addition.

        The result is unsimplified unless it would be the empty expression,
        which happens when both ``num`` and ``self`` are zero.
        """
        constant = Value(num)
        if is_empty(constant) and is_empty(self):
            return empty_expression()
        return Addition(constant, self)

    def append_coefficient(self, num: float) -> 'Expression':
        """Put ``num`` in front of this expression as a coefficient.

        Only the new product node is simplified: a coefficient of 0 gives the
        empty expression, 1 gives ``self`` back and a constant ``self`` is
        folded into a single Value.
        """
        from Expressions.simplifier import Simplifier

        return Simplifier().fold(Multiplication(Value(num), self))

    def substitute(self, environment: Mapping[str, float]) -> 'Expression':
        """Replace bound variables by their values and simplify.

        Variables missing from ``environment`` stay symbolic; names in
        ``environment`` that do not occur here are ignored. When no variable
        is left the result is a single Value.
        """
        from Expressions.simplifier import Simplifier

        bindings = {check_variable_name(name): check_number(num) for name, num in environment.items()}
        replaced = _replace_variables(self, bindings)
        result = Simplifier().run(replaced)
        logger.debug(f"Substituted {bindings} into {self}: {result}")
        return result

    def differentiate(self, variable: str) -> 'Expression':
        from Expressions.differentiator import Differentiator

        return Differentiator(variable, trace=False).run(self)

    def variables(self) -> Set[str]:
        names = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Variable):
                names.add(node.name)
            elif isinstance(node, (Addition, Multiplication)):
                stack.append(node.left)
                stack.append(node.right)
        return names

    def __str__(self):
        from Expressions.serializer import to_string

        return to_string(self)

    def __repr__(self):
        from Expressions.serializer import to_repr

        return to_repr(self)

    def __eq__(self, other):
        from Expressions.equality import expressions_equal

        if not isinstance(other, Expression):
            return NotImplemented
        return expressions_equal(self, other)

    def __hash__(self):
        from Expressions.equality import expression_hash

        return expression_hash(self)


@dataclass(frozen=True, eq=False, repr=False)
class Value(Expression):
    num: float

    def __post_init__(self):
        object.__setattr__(self, 'num', check_number(self.num))


@dataclass(frozen=True, eq=False, repr=False)
class Variable(Expression):
    name: str

    def __post_init__(self):
        check_variable_name(self.name)


@dataclass(frozen=True, eq=False, repr=False)
class Addition(Expression):
    left: Expression
    right: Expression


@dataclass(frozen=True, eq=False, repr=False)
class Multiplication(Expression):
    left: Expression
    right: Expression


def empty_expression() -> Expression:
    """The expression equal to parse("0")."""
    return Value(0.0)


def is_empty(e: Expression) -> bool:
    return isinstance(e, Value) and is_zero(e.num)


def walk_postorder(root: Expression) -> Iterator[Expression]:
    """Yield every distinct node under ``root``, children before parents.

    Uses an explicit stack, so long ``x + x + ... + x`` chains do not hit the
    interpreter's recursion limit.
    """
    seen = set()
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if id(node) in seen:
            continue
        if expanded or isinstance(node, (Value, Variable)):
            seen.add(id(node))
            yield node
        elif isinstance(node, (Addition, Multiplication)):
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
        else:
            raise TypeError(f"Unknown expression node: {type(node).__name__}")


def _replace_variables(root: Expression, bindings: Mapping[str, float]) -> Expression:
    replaced = {}
    for node in walk_postorder(root):
        if isinstance(node, Variable) and node.name in bindings:
            result = Value(bindings[node.name])
        elif isinstance(node, (Addition, Multiplication)):
            left, right = replaced[id(node.left)], replaced[id(node.right)]
            if left is node.left and right is node.right:
                result = node
            else:
                result = type(node)(left, right)
        else:
            result = node
        replaced[id(node)] = result
    return replaced[id(root)]
