# Dicerolling.
# Lexer and parser for dice roll expressions like `(12d8 + 34) / 2`.

import logging
import re
import typing

from dice_config import (
    ARITHMETIC_OPERATORS,
    CLOSE_PAREN,
    DICE_BIND_POWER,
    DICE_OPERATOR,
    DICE_OPERATOR_ALIASES,
    OPEN_PAREN,
    PRODUCT_BIND_POWER,
    SUM_BIND_POWER,
)
from dice_details import RollLog
from dice_errors import (
    NestingTooDeep,
    NumberTooLong,
    ParseError,
    UnexpectedCharacter,
    UnexpectedToken,
)
from dice_tree import BinaryOp, Expression, Literal

log = logging.getLogger(__name__)

OPERATOR_SYMBOLS = ARITHMETIC_OPERATORS + OPEN_PAREN + CLOSE_PAREN

# fmt: off
TOKEN_SPEC = [
    ("NUMBER",   r"[0-9]+"),                                # Unsigned integer
    ("DICE",     f"[{DICE_OPERATOR_ALIASES}]"),             # Diceroll operator
    ("OP",       f"[{re.escape(OPERATOR_SYMBOLS)}]"),       # Arithmetic operators and parentheses
    ("SKIP",     r"\s+"),                                   # Whitespace anywhere is ignored
    ("MISMATCH", r"."),                                     # Any other character
]
TOKEN_PATTERN = re.compile(
    '|'.join(f"(?P<{pair[0]}>{pair[1]})" for pair in TOKEN_SPEC), re.DOTALL)
# fmt: on


class Token(typing.NamedTuple):
    # NUMBER, OP or END
    kind: str
    # int for NUMBER, operator character for OP, None for END
    value: typing.Any
    # index into the source text where the token starts
    position: int

    def describe(self) -> str:
        if self.kind == "NUMBER":
            return f"number {self.value}"
        if self.kind == "OP":
            return repr(self.value)
        return "end of input"

    def is_operator(self, symbol=None) -> bool:
        return self.kind == "OP" and (symbol is None or self.value == symbol)


# Finite token sequence, consumed front to back.
# Reading past the end keeps yielding the END token.
class TokenStream:
    def __init__(self, tokens: list[Token], end_position: int):
        self.token_list = tokens
        self.iter_pos = 0
        self.end = Token("END", None, end_position)

    def peek(self) -> Token:
        if self.iter_pos < len(self.token_list):
            return self.token_list[self.iter_pos]
        return self.end

    def next(self) -> Token:
        token = self.peek()
        if token is not self.end:
            self.iter_pos += 1
        return token

    def __repr__(self):
        return f"TokenStream({self.token_list[self.iter_pos:]!r})"


# Cut input text into tokens.
# https://docs.python.org/3/library/re.html#writing-a-tokenizer
def tokenize(intext: str) -> TokenStream:
    tokens = []
    for item in TOKEN_PATTERN.finditer(intext):
        kind = item.lastgroup
        value = item.group()

        if kind == "SKIP":
            continue
        elif kind == "MISMATCH":
            raise UnexpectedCharacter(value, item.start())
        elif kind == "NUMBER":
            try:
                value = int(value)
            except ValueError as err:
                # digit runs past sys.get_int_max_str_digits()
                raise NumberTooLong(len(value), item.start()) from err
        elif kind == "DICE":
            # `D` and `d` mean the same thing
            kind = "OP"
            value = DICE_OPERATOR

        token = Token(kind, value, item.start())
        log.debug("Token: %s", token)
        tokens.append(token)
    return TokenStream(tokens, len(intext))


class InfixOperator(typing.NamedTuple):
    symbol: str
    bind_power: int
    right_assoc: bool = False


# Static table of binary operators.
OPERATOR_TABLE: dict[str, InfixOperator] = {}


def register_infix(kind, bind_power, right_assoc=False):
    OPERATOR_TABLE[kind] = InfixOperator(kind, bind_power, right_assoc)
    return OPERATOR_TABLE[kind]


register_infix("+", SUM_BIND_POWER)
register_infix("-", SUM_BIND_POWER)
register_infix("*", PRODUCT_BIND_POWER)
register_infix("/", PRODUCT_BIND_POWER)
register_infix(DICE_OPERATOR, DICE_BIND_POWER)


# Based on Pratt top-down operator precedence.
# http://effbot.org/zone/simple-top-down-parsing.htm
class Parser:
    def __init__(self, tokens: TokenStream):
        self.tokens = tokens

    # Consume the next token, which must be the operator `expected`.
    def advance(self, expected, description):
        token = self.tokens.next()
        if not token.is_operator(expected):
            raise UnexpectedToken(description, token)
        return token

    # Number literal or parenthesized group.
    def primary(self) -> Expression:
        token = self.tokens.next()
        if token.kind == "NUMBER":
            return Literal(token.value)
        if token.is_operator(OPEN_PAREN):
            inner = self.expr()
            self.advance(CLOSE_PAREN, "closing parenthesis")
            return inner
        raise UnexpectedToken("a primary term", token)

    # Parse the longest expression whose operators bind tighter than
    # `right_bp`. Recursive.
    def expr(self, right_bp=0) -> Expression:
        left = self.primary()
        while True:
            token = self.tokens.peek()
            if token.kind == "END" or token.is_operator(CLOSE_PAREN):
                break
            infix = OPERATOR_TABLE.get(token.value) if token.kind == "OP" else None
            if infix is None:
                raise UnexpectedToken("an operator or end of input", token)
            if infix.bind_power <= right_bp:
                break
            self.tokens.next()
            right = self.expr(infix.bind_power - (1 if infix.right_assoc else 0))
            left = BinaryOp(infix.symbol, left, right)
        return left

    # Parse a whole expression; anything left over is an error.
    # Only parenthesized groups recurse, so only deep nesting can exhaust
    # the stack.
    def parse(self) -> Expression:
        try:
            tree = self.expr()
        except RecursionError as err:
            raise NestingTooDeep(self.tokens.peek().position) from err
        leftover = self.tokens.peek()
        if leftover.kind != "END":
            raise UnexpectedToken("end of input", leftover)
        return tree


def parse(text: str) -> Expression:
    """Parse dice expression text into an expression tree.

    Raises:
        UnexpectedCharacter: The text contains a character that isn't a
            digit, whitespace, `d`/`D`, an arithmetic operator or a parenthesis.
        UnexpectedToken: The tokens don't form a complete expression.
        NumberTooLong: A number has too many digits to convert to an int.
        NestingTooDeep: Parentheses nest deeper than the recursion limit.
    """
    try:
        tree = Parser(tokenize(text)).parse()
    except ParseError as err:
        log.debug("Rejected %r: %s", text, err)
        raise
    log.debug("Parsed %r as %r", text, tree)
    return tree


# Parse and evaluate `formula` in one step.
def roll(formula: str, roll_log: RollLog | None = None, rng=None) -> float:
    return parse(formula).evaluate(roll_log, rng)
