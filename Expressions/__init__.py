"""Immutable polynomial expressions over + and *."""
from Expressions.errors import (
    ExpressionError,
    ExpressionSyntaxError,
    InvalidNumber,
    InvalidVariableName,
    MalformedNumber,
)
from Expressions.nodes import (
    Addition,
    Expression,
    Multiplication,
    Value,
    Variable,
    empty_expression,
)
from Expressions.parser import parse

__all__ = [
    'Addition', 'Expression', 'Multiplication', 'Value', 'Variable',
    'empty_expression', 'parse',
    'ExpressionError', 'ExpressionSyntaxError', 'InvalidNumber',
    'InvalidVariableName', 'MalformedNumber',
]
