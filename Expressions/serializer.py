from Expressions.nodes import Addition, Expression, Multiplication, Value, Variable
from Expressions.numeric import format_number


# Each renderer keeps a stack of pending nodes and literal strings, so that
# long chains of sums or products are written without recursion.

def to_string(node: Expression) -> str:
    """Parsable text for ``node``.

    Numbers carry exactly 5 decimals, sums are written ``l + r`` and both
    factors of a product are parenthesized: ``x*x*x`` -> ``((x)*(x))*(x)``.
    """
    parts = []
    stack = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Value):
            parts.append(format_number(item.num))
        elif isinstance(item, Variable):
            parts.append(item.name)
        elif isinstance(item, Addition):
            stack.extend((item.right, " + ", item.left))
        elif isinstance(item, Multiplication):
            stack.extend((")", item.right, ")*(", item.left, "("))
        else:
            raise TypeError(f"Unknown expression node: {type(item).__name__}")
    return "".join(parts)


def to_repr(node: Expression) -> str:
    parts = []
    stack = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Value):
            parts.append(f"Value({item.num!r})")
        elif isinstance(item, Variable):
            parts.append(f"Variable({item.name!r})")
        elif isinstance(item, (Addition, Multiplication)):
            stack.extend((")", item.right, ", ", item.left, f"{type(item).__name__}("))
        else:
            raise TypeError(f"Unknown expression node: {type(item).__name__}")
    return "".join(parts)


def _format_value_latex(num):
    return str(int(num)) if num.is_integer() else repr(num)


def _latex_factor(child):
    # + binds looser than *, so a sum factor needs parentheses
    if isinstance(child, Addition):
        return ["(", child, ")"]
    return [child]


def to_latex(node: Expression) -> str:
    parts = []
    stack = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Value):
            parts.append(_format_value_latex(item.num))
        elif isinstance(item, Variable):
            parts.append(item.name)
        elif isinstance(item, Addition):
            stack.extend((item.right, " + ", item.left))
        elif isinstance(item, Multiplication):
            left_child, right_child = item.left, item.right
            # Use implicit multiplication for a number and a variable or group (e.g., 4x)
            if isinstance(left_child, Value) and isinstance(right_child, (Variable, Addition)):
                separator = ""
            else:
                separator = " \\cdot "
            pieces = _latex_factor(left_child) + [separator] + _latex_factor(right_child)
            stack.extend(reversed(pieces))
        else:
            raise TypeError(f"Unknown expression node: {type(item).__name__}")
    return "".join(parts)
