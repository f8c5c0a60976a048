import logging
import math
import re
from typing import List, Optional, Tuple

from Expressions.errors import ExpressionSyntaxError, MalformedNumber
from Expressions.nodes import Addition, Expression, Multiplication, Value, Variable
from Expressions.simplifier import Simplifier

# --- Logger Setup ---
logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised by the tokenizer and grammar; ``parse`` reports it as ExpressionSyntaxError."""


# --- Parse Tree Node ---
PARSE_SUM = 'sum'
PARSE_PRODUCT = 'product'
PARSE_NUMBER = 'number'
PARSE_VARIABLE = 'variable'


class ParseNode:
    def __init__(self, kind: str, text: str = '', children: Optional[Tuple['ParseNode', ...]] = None):
        self.kind = kind
        self.text = text
        self.children = children or tuple()

    def __repr__(self):
        if not self.children:
            return f"{self.kind}({self.text!r})"
        return f"{self.kind}({', '.join(map(repr, self.children))})"


# --- Tokenizer: Breaking the Expression into Tokens ---
TOKEN_NUMBER = 'NUMBER'
TOKEN_SYMBOL = 'SYMBOL'
TOKEN_OPERATOR = 'OPERATOR'
TOKEN_LPAREN = 'LPAREN'
TOKEN_RPAREN = 'RPAREN'
TOKEN_EOF = 'EOF'


class Token:
    def __init__(self, type: str, value: str, position: int = 0):
        self.type = type
        self.value = value
        self.position = position

    def __repr__(self):
        return f"Token({self.type}, '{self.value}')"


class Tokenizer:
    # Runs of digits and dots are scanned as one token; their shape is checked
    # when the tree is turned into an expression.
    TOKEN_SPECS = [
        (r'[0-9.]+', TOKEN_NUMBER),
        (r'[a-zA-Z]+', TOKEN_SYMBOL),
        (r'[\+\*]', TOKEN_OPERATOR),
        (r'\(', TOKEN_LPAREN),
        (r'\)', TOKEN_RPAREN),
        (r'\s+', None),  # Skip whitespace
    ]
    _COMPILED_SPECS = [(re.compile(pattern), ttype) for pattern, ttype in TOKEN_SPECS]

    def __init__(self, text: str):
        self.text = text
        self.tokens = self._tokenize()
        self.index = 0

    def _tokenize(self) -> List[Token]:
        tokens = []
        pos = 0
        while pos < len(self.text):
            match_found = False
            for regex, ttype in self._COMPILED_SPECS:
                match = regex.match(self.text, pos)
                if match:
                    if ttype:
                        tokens.append(Token(ttype, match.group(0), pos))
                    pos = match.end()
                    match_found = True
                    break
            if not match_found:
                raise ParseError(f"Unexpected character at position {pos}: '{self.text[pos]}'")
        tokens.append(Token(TOKEN_EOF, "", pos))
        return tokens

    def next(self) -> Token:
        if self.index < len(self.tokens):
            token = self.tokens[self.index]
            self.index += 1
            return token
        return Token(TOKEN_EOF, "", len(self.text))


# --- Parser: Building the Parse Tree from Tokens ---
class Parser:
    """Recursive descent over

        sum       := product ('+' product)*
        product   := primitive ('*' primitive)*
        primitive := number | variable | '(' sum ')'
    """

    def __init__(self, tokenizer: Tokenizer):
        self.tokenizer = tokenizer
        self.current_token = self.tokenizer.next()

    def _eat(self, token_type: str):
        if self.current_token.type == token_type:
            self.current_token = self.tokenizer.next()
        else:
            raise ParseError(
                f"Expected {token_type}, got {self.current_token.type} "
                f"('{self.current_token.value}') at position {self.current_token.position}"
            )

    def _at_operator(self, symbol: str) -> bool:
        return self.current_token.type == TOKEN_OPERATOR and self.current_token.value == symbol

    def parse(self) -> ParseNode:
        if self.current_token.type == TOKEN_EOF:
            raise ParseError("Expression cannot be empty.")
        result = self._sum()
        if self.current_token.type != TOKEN_EOF:
            raise ParseError(
                f"Unexpected token '{self.current_token.value}' at position {self.current_token.position}"
            )
        return result

    def _sum(self) -> ParseNode:
        products = [self._product()]
        while self._at_operator('+'):
            self._eat(TOKEN_OPERATOR)
            products.append(self._product())
        return ParseNode(PARSE_SUM, children=tuple(products))

    def _product(self) -> ParseNode:
        primitives = [self._primitive()]
        while self._at_operator('*'):
            self._eat(TOKEN_OPERATOR)
            primitives.append(self._primitive())
        return ParseNode(PARSE_PRODUCT, children=tuple(primitives))

    def _primitive(self) -> ParseNode:
        token = self.current_token
        if token.type == TOKEN_NUMBER:
            self._eat(TOKEN_NUMBER)
            return ParseNode(PARSE_NUMBER, token.value)
        if token.type == TOKEN_SYMBOL:
            self._eat(TOKEN_SYMBOL)
            return ParseNode(PARSE_VARIABLE, token.value)
        if token.type == TOKEN_LPAREN:
            self._eat(TOKEN_LPAREN)
            node = self._sum()
            self._eat(TOKEN_RPAREN)
            return node
        raise ParseError(f"Unexpected token '{token.value}' at position {token.position}")


# --- Parse Tree -> Expression ---
NUMBER_PATTERN = re.compile(r'\d+(?:\.\d+)?|\.\d+')


class ExpressionBuilder:
    """Walks a parse tree and builds a simplified Expression.

    Every Addition and Multiplication is folded by the Simplifier as soon as
    it is built, so the finished tree is fully simplified.
    """

    def __init__(self):
        self.simplifier = Simplifier()

    def build(self, tree: ParseNode) -> Expression:
        kind = tree.kind
        if kind == PARSE_NUMBER:
            return self._number(tree.text)
        if kind == PARSE_VARIABLE:
            return Variable(tree.text)
        if kind in (PARSE_SUM, PARSE_PRODUCT):
            if not tree.children:
                raise ParseError(f"Empty {kind} in parse tree")
            node_type = Addition if kind == PARSE_SUM else Multiplication
            result = self.build(tree.children[0])
            for child in tree.children[1:]:
                result = self.simplifier.fold(node_type(result, self.build(child)))
            return result
        raise ParseError(f"Unknown parse tree node '{kind}'")

    def _number(self, text: str) -> Value:
        if not NUMBER_PATTERN.fullmatch(text):
            raise MalformedNumber(f"Malformed number '{text}'")
        num = float(text)
        if math.isinf(num):
            raise MalformedNumber(f"Number '{text}' is too large")
        return Value(num)


def parse(text: str) -> Expression:
    """Parse ``text`` into a fully simplified expression.

    Raises ExpressionSyntaxError (or its MalformedNumber subclass) when the
    text is not a valid expression, including empty text.
    """
    if not isinstance(text, str):
        raise ExpressionSyntaxError(f"Expected a string, got {type(text).__name__}")
    try:
        tree = Parser(Tokenizer(text)).parse()
        expression = ExpressionBuilder().build(tree)
    except ParseError as e:
        raise ExpressionSyntaxError(str(e)) from e
    except RecursionError as e:
        raise ExpressionSyntaxError("Expression is nested too deeply") from e
    logger.debug(f"Parsed '{text}' -> {expression}")
    return expression
