import logging

from Expressions.nodes import Addition, Expression, Multiplication, Value, Variable, walk_postorder
from Expressions.numeric import is_one, is_zero

logger = logging.getLogger(__name__)


def _is_constant(node):
    return isinstance(node, Value)


class Simplifier:
    """Constant folding and identity elimination.

    ``run`` makes one bottom-up pass over a tree, ``fold`` applies the local
    rules to a single node whose children are left as they are. Sums and
    products are never reordered or re-associated, so ``x*y + y*x`` stays as
    it is.
    """

    def __init__(self):
        self.memo = {}

    def run(self, node: Expression) -> Expression:
        if id(node) in self.memo:
            return self.memo[id(node)]

        for current in walk_postorder(node):
            if id(current) in self.memo:
                continue
            if isinstance(current, (Addition, Multiplication)):
                left = self.memo[id(current.left)]
                right = self.memo[id(current.right)]
                if left is current.left and right is current.right:
                    result_node = self.fold(current)
                else:
                    result_node = self.fold(type(current)(left, right))
            else:
                result_node = current
            self.memo[id(current)] = result_node

        return self.memo[id(node)]

    def fold(self, node: Expression) -> Expression:
        if isinstance(node, (Value, Variable)):
            return node

        if isinstance(node, Addition):
            left, right = node.left, node.right
            if _is_constant(left) and _is_constant(right):
                return Value(left.num + right.num)
            if _is_constant(left) and is_zero(left.num):
                return right
            if _is_constant(right) and is_zero(right.num):
                return left
            return node

        if isinstance(node, Multiplication):
            left, right = node.left, node.right
            if (_is_constant(left) and is_zero(left.num)) or (_is_constant(right) and is_zero(right.num)):
                return Value(0.0)
            if _is_constant(left) and _is_constant(right):
                return Value(left.num * right.num)
            if _is_constant(left) and is_one(left.num):
                return right
            if _is_constant(right) and is_one(right.num):
                return left
            return node

        raise TypeError(f"Unknown expression node: {type(node).__name__}")
