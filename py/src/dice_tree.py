# Expression trees.
# Parsed dice expressions and their evaluation.
import math

from dice_config import DICE_OPERATOR
from dice_details import dice_roll
from dice_errors import UnknownOperator


# Float division that follows IEEE-754 for zero divisors instead of raising
# ZeroDivisionError: x/0 is a signed infinity, 0/0 is nan.
def _divide(x: float, y: float) -> float:
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


ARITHMETICS = {
    "+": lambda x, y: x + y,
    "-": lambda x, y: x - y,
    "*": lambda x, y: x * y,
    "/": _divide,
}


class Expression:
    """Base class for nodes of a parsed dice expression.

    Trees are built once by the parser and never modified by evaluation, so
    one tree can be evaluated any number of times.
    """

    def evaluate(self, roll_log=None, rng=None) -> float:
        """Compute the value of this expression.

        Args:
            roll_log: Optional sink with an ``append(values)`` method, such as
                a ``RollLog``. Each dice roll's individual results are appended
                to it in the order they were rolled.
            rng: Optional random source with a ``randint(lo, hi)`` method. The
                ``random`` module's shared generator is used when omitted.

        Raises:
            EvalError: An invalid dice roll or an unknown operator.
        """
        raise NotImplementedError("Evaluation missing for this expression.")

    @staticmethod
    def default() -> "Literal":
        return Literal(0)


# Leaf holding a non-negative integer.
class Literal(Expression):
    def __init__(self, value: int = 0):
        self.value = value

    # Exact for integers up to 2**53; OverflowError past the float range.
    def evaluate(self, roll_log=None, rng=None) -> float:
        return float(self.value)

    def __eq__(self, other):
        if not isinstance(other, Literal):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash((Literal, self.value))

    def __repr__(self):
        return str(self.value)


# Post-order walk with an explicit stack, so long operator chains don't hit
# the recursion limit. Leaves go through `leaf`, operator nodes through
# `combine(node, left_result, right_result)`. Left subtrees finish before
# right ones.
def _fold(root, leaf, combine):
    stack = [(root, False)]
    results = []
    while stack:
        node, children_done = stack.pop()
        if not isinstance(node, BinaryOp):
            results.append(leaf(node))
        elif children_done:
            right = results.pop()
            left = results.pop()
            results.append(combine(node, left, right))
        else:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
    return results.pop()


# Operator node with exactly two children.
class BinaryOp(Expression):
    def __init__(self, operator: str, left: Expression, right: Expression):
        self.operator = operator
        self.left = left
        self.right = right

    def evaluate(self, roll_log=None, rng=None) -> float:
        # rolls are logged in evaluation order
        return _fold(
            self,
            lambda node: node.evaluate(roll_log, rng),
            lambda node, lhs, rhs: node.apply(lhs, rhs, roll_log, rng),
        )

    # Combine already evaluated operands with this node's operator.
    def apply(self, lhs: float, rhs: float, roll_log=None, rng=None) -> float:
        if self.operator == DICE_OPERATOR:
            rolls = dice_roll(lhs, rhs, rng)
            if roll_log is not None:
                roll_log.append(rolls)
            return float(sum(rolls))

        try:
            arithmetic = ARITHMETICS[self.operator]
        except KeyError as err:
            raise UnknownOperator(self.operator) from err
        return arithmetic(lhs, rhs)

    def __eq__(self, other):
        if not isinstance(other, BinaryOp):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            mine, theirs = pairs.pop()
            if isinstance(mine, BinaryOp) and isinstance(theirs, BinaryOp):
                if mine.operator != theirs.operator:
                    return False
                pairs.append((mine.right, theirs.right))
                pairs.append((mine.left, theirs.left))
            elif isinstance(mine, BinaryOp) or isinstance(theirs, BinaryOp):
                return False
            elif mine != theirs:
                return False
        return True

    def __hash__(self):
        return _fold(
            self,
            hash,
            lambda node, left, right: hash((BinaryOp, node.operator, left, right)),
        )

    def __repr__(self):
        pieces = []
        pending = [self]
        while pending:
            item = pending.pop()
            if isinstance(item, str):
                pieces.append(item)
            elif isinstance(item, BinaryOp):
                pending.extend([">", item.right, " ", item.left, f"<{item.operator} "])
            else:
                pieces.append(repr(item))
        return "".join(pieces)
