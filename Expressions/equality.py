"""Structural equality and hashing for expressions.

Sums are compared through their flattened sum sequence, so ``(a+b)+c`` and
``a+(b+c)`` are equal while ``b+a+c`` is not. Every other node is compared
child by child, so products never re-associate: ``x*(2*y)`` and ``(x*2)*y``
are different expressions.
"""
from typing import List, Optional, Tuple

from Expressions.nodes import Addition, Expression, Multiplication, Value, Variable
from Expressions.numeric import number_key


def flatten_sum(node: Expression) -> List[Expression]:
    """Unfold nested Additions left to right into their non-sum terms."""
    terms = []
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Addition):
            # right is pushed first so left is unfolded first
            stack.append(current.right)
            stack.append(current.left)
        else:
            terms.append(current)
    return terms


def _sum_pairs(a: Expression, b: Expression) -> Optional[List[Tuple[Expression, Expression]]]:
    """Term pairs two sums must agree on, or None when their lengths differ."""
    left_terms = flatten_sum(a)
    right_terms = flatten_sum(b)
    if len(left_terms) != len(right_terms):
        return None
    return list(zip(left_terms, right_terms))


def _node_pairs(a: Expression, b: Expression) -> Optional[List[Tuple[Expression, Expression]]]:
    """Child pairs two non-sum nodes must agree on, or None when they already differ."""
    if isinstance(a, Value):
        if isinstance(b, Value) and number_key(a.num) == number_key(b.num):
            return []
        return None
    if isinstance(a, Variable):
        if isinstance(b, Variable) and a.name == b.name:
            return []
        return None
    if isinstance(a, Multiplication):
        if isinstance(b, Multiplication):
            return [(a.left, b.left), (a.right, b.right)]
        return None
    if isinstance(a, Addition):
        return None
    raise TypeError(f"Unknown expression node: {type(a).__name__}")


def _all_equal(pairs) -> bool:
    if pairs is None:
        return False
    pending = list(pairs)
    while pending:
        a, b = pending.pop()
        if a is b:
            continue
        if isinstance(a, Addition) or isinstance(b, Addition):
            children = _sum_pairs(a, b)
        else:
            children = _node_pairs(a, b)
        if children is None:
            return False
        pending.extend(children)
    return True


def sums_equal(a: Expression, b: Expression) -> bool:
    return _all_equal(_sum_pairs(a, b))


def nodes_equal(a: Expression, b: Expression) -> bool:
    """Compare two non-sum nodes without any re-association."""
    return _all_equal(_node_pairs(a, b))


def expressions_equal(a: Expression, b: Expression) -> bool:
    return _all_equal([(a, b)])


def expression_hash(node: Expression) -> int:
    # Hashes the token stream of the tree with every sum written as its
    # flattened terms, which is exactly what equality compares.
    tokens = []
    stack = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            tokens.append(item)
        elif isinstance(item, Value):
            tokens.append(('num', number_key(item.num)))
        elif isinstance(item, Variable):
            tokens.append(('var', item.name))
        elif isinstance(item, Addition):
            stack.append(')')
            stack.extend(reversed(flatten_sum(item)))
            stack.append('+(')
        elif isinstance(item, Multiplication):
            stack.extend((')', item.right, item.left, '*('))
        else:
            raise TypeError(f"Unknown expression node: {type(item).__name__}")
    return hash(tuple(tokens))
