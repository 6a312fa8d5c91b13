# Error types raised while lexing, parsing and evaluating dice expressions.


class DiceError(ValueError):
    def __init__(self, reason):
        super().__init__(reason)


# Malformed input text. Deterministic, never worth retrying.
class ParseError(DiceError):
    pass


class UnexpectedCharacter(ParseError):
    """A character outside the supported alphabet.

    Args:
        char: The offending character.
        position: Zero-based index of the character in the input text.
    """

    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(f"Unexpected character {char!r} at position {position}")


class UnexpectedToken(ParseError):
    """A token that cannot appear at the current grammatical position.

    Args:
        expected: Description of what the parser was looking for.
        found: The token that was found instead.
    """

    def __init__(self, expected: str, found):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Expected {expected}, found {found.describe()} at position {found.position}"
        )


class NumberTooLong(ParseError):
    def __init__(self, digits: int, position: int):
        self.digits = digits
        self.position = position
        super().__init__(
            f"Number at position {position} is too long to convert ({digits} digits)"
        )


# Parentheses nested deeper than the interpreter's recursion limit allows.
class NestingTooDeep(ParseError):
    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Expression is nested too deeply at position {position}")


class EvalError(DiceError):
    pass


# Only reachable with hand-built trees; the parser never produces these.
class UnknownOperator(EvalError):
    def __init__(self, operator):
        self.operator = operator
        super().__init__(f"Unknown operator: {operator!r}")


class InvalidDiceSpecification(EvalError):
    def __init__(self, count, sides, reason: str):
        self.count = count
        self.sides = sides
        super().__init__(f"Can't roll {count}d{sides}: {reason}")
