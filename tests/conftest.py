import random
import sys
from pathlib import Path

import pytest

# Ensure the project root is importable when pytest starts from any directory
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from Expressions.equality import flatten_sum  # noqa: E402
from Expressions.nodes import Addition, Multiplication  # noqa: E402


def _build_sum(terms, rng):
    if len(terms) == 1:
        return terms[0]
    split = rng.randint(1, len(terms) - 1)
    return Addition(_build_sum(terms[:split], rng), _build_sum(terms[split:], rng))


def _regroup(node, rng):
    if isinstance(node, Addition):
        return _build_sum([_regroup(term, rng) for term in flatten_sum(node)], rng)
    if isinstance(node, Multiplication):
        return Multiplication(_regroup(node.left, rng), _regroup(node.right, rng))
    return node


@pytest.fixture
def regroup():
    """Rebuild every sum in an expression with a random grouping of the same terms."""
    def _do(node, seed):
        return _regroup(node, random.Random(seed))
    return _do
