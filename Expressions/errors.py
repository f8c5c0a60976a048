class ExpressionError(ValueError):
    """Base class for every error raised by the expression library."""


class ExpressionSyntaxError(ExpressionError):
    """The input text does not match the expression grammar."""


class MalformedNumber(ExpressionSyntaxError):
    """A number token that is not a non-negative decimal literal."""


class InvalidVariableName(ExpressionError):
    """A variable name that is empty or contains anything but ASCII letters."""


class InvalidNumber(ExpressionError):
    """A negative, NaN or infinite number."""
