# Dice details.
# Rolling dice and keeping track of the individual results.
import logging
import math
import random

from dice_config import DIE_MIN_FACE, ROLL_LOG_EMPTY, ROLL_LOG_SEPARATOR
from dice_errors import InvalidDiceSpecification

log = logging.getLogger(__name__)


# Ordered, append-only record of individual die results.
# Callers create one and hand it to `Expression.evaluate`; it accumulates
# across evaluations. Not safe to share between threads.
class RollLog:
    def __init__(self, values=None):
        self._values: list[int] = list(values) if values else []

    # Add rolled values to the end, keeping their order.
    def append(self, values):
        self._values.extend(values)

    def contents(self) -> list[int]:
        return list(self._values)

    def render(self) -> str:
        if not self._values:
            return ROLL_LOG_EMPTY
        return ROLL_LOG_SEPARATOR.join(str(value) for value in self._values)

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"RollLog({self._values!r})"

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __getitem__(self, index):
        return self._values[index]

    def __eq__(self, other):
        if isinstance(other, RollLog):
            return self._values == other._values
        if isinstance(other, list):
            return self._values == other
        return NotImplemented


# `rng` is anything with a `randint(lo, hi)` method, like `random.Random`.
def single_roll(sides, rng=None) -> int:
    source = rng if rng is not None else random
    return source.randint(DIE_MIN_FACE, sides)


# Truncate evaluated operands to a dice count and side count.
# Negative counts roll no dice. Sides below one can't be rolled.
def dice_parameters(count: float, sides: float) -> tuple[int, int]:
    if not math.isfinite(count):
        raise InvalidDiceSpecification(count, sides, "dice count must be finite")
    if not math.isfinite(sides):
        raise InvalidDiceSpecification(count, sides, "dice size must be finite")
    dice_count = max(math.trunc(count), 0)
    dice_sides = math.trunc(sides)
    if dice_sides < DIE_MIN_FACE:
        raise InvalidDiceSpecification(
            dice_count, dice_sides, f"dice need at least {DIE_MIN_FACE} side"
        )
    return dice_count, dice_sides


# Roll `count` dice of size `sides`, returning each result in roll order.
# The count has no upper bound; huge counts take proportionally long.
def dice_roll(count: float, sides: float, rng=None) -> list[int]:
    dice_count, dice_sides = dice_parameters(count, sides)
    rolls = [single_roll(dice_sides, rng) for _ in range(dice_count)]
    log.debug("Rolled %dd%d: %s", dice_count, dice_sides, rolls)
    return rolls
