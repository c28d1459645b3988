"""Numeric extension functions.

Every function takes the number it operates on as its first argument,
so the installer can bind it as a method (see installer.py).  Only
``cycle`` validates its input.  The rest are thin wrappers over the
math primitives and let their errors propagate.

Decision branches are annotated with their spec branch-IDs (see
spec.py BranchSpec) so white-box tests can trace coverage.
"""
from __future__ import annotations

import builtins
import math
import random as _random
from numbers import Integral, Real
from typing import Any, Sequence

__all__ = [
    "InvalidArgumentError",
    "is_whole",
    "cycle",
    "scale",
    "random",
    "floor",
    "round",
    "ceil",
    "clamp",
    "to_rad",
    "to_deg",
    "abs",
    "pow",
    "sqrt",
    "whole_center",
    "loop",
]


class InvalidArgumentError(ValueError):
    """Raised when an argument is not of the kind an operation accepts."""


def is_whole(value: Any) -> bool:
    """True for ints (but not bools) and for floats with no fractional part."""
    if isinstance(value, bool):
        return False
    if isinstance(value, Integral):
        return True
    return isinstance(value, Real) and float(value).is_integer()


def cycle(number: int, offset: int, between: Sequence[int]) -> int:
    """Move ``number`` by ``offset`` steps, wrapping around ``between``.

    ``between`` is an inclusive ``[lo, hi]`` pair (or a ``spec.Range``).
    Stepping past ``hi`` continues from ``lo`` and vice versa::

        >>> cycle(1, +1, [0, 3])
        2
        >>> cycle(1, +3, [0, 3])
        0
        >>> cycle(1, +4, [-3, 3])
        -2

    Typical use is carousel or result-list navigation, where ``-1`` in
    ``[-1, n - 1]`` can stand for "nothing selected".

    Raises InvalidArgumentError if ``offset`` is not a whole number.
    The range itself is not checked; ``lo > hi`` gives meaningless
    results.

    Branches: OFFSET-VALID, OFFSET-INVALID
    """
    if not is_whole(offset):                                     # OFFSET-INVALID
        raise InvalidArgumentError(
            f"Only integers are supported as offset, got {offset!r}"
        )

    lo, hi = between                                             # OFFSET-VALID
    span = hi - lo + 1
    return lo + (number + offset - lo) % span


def scale(number: float, lo: float, hi: float) -> float:
    """Map ``number`` from [0, 1] onto [lo, hi].

    Values outside [0, 1] extrapolate linearly.
    """
    return number * (hi - lo) + lo


def random(number: float, rng: _random.Random | None = None) -> float:
    """Uniform random value in [0, number).

    Draws from the shared ``random`` module unless an ``rng`` is given.
    """
    source = rng if rng is not None else _random
    return number * source.random()


def floor(number: float) -> int:
    return math.floor(number)


def round(number: float) -> int:
    """Built-in ``round``: halves go to the nearest even integer."""
    return builtins.round(number)


def ceil(number: float) -> int:
    return math.ceil(number)


def clamp(number: float, lo: float, hi: float) -> float:
    """Limit ``number`` to [lo, hi].  Assumes ``lo <= hi``."""
    return builtins.min(builtins.max(number, lo), hi)


def to_rad(number: float) -> float:
    """Degrees to radians."""
    return number * math.pi / 180


def to_deg(number: float) -> float:
    """Radians to degrees."""
    return number * 180 / math.pi


def abs(number: float) -> float:
    return builtins.abs(number)


def pow(number: float, power: float) -> float:
    return math.pow(number, power)


def sqrt(number: float) -> float:
    return math.sqrt(number)


def whole_center(number: float, use_floor: bool = False) -> int:
    """Whole-number half of ``number``.

    With ``use_floor`` the result suits 0-based indexes: the middle item
    of 5 is index 2.  Without it, rounds up (5 -> 3).

    Branches: CENTER-FLOOR, CENTER-CEIL
    """
    if isinstance(number, Integral):
        return number // 2 if use_floor else -(-number // 2)

    if use_floor:                                                # CENTER-FLOOR
        return math.floor(number / 2)
    return math.ceil(number / 2)                                 # CENTER-CEIL


def loop(number: float, maximum: float) -> float:
    """Loop ``number`` back into [0, maximum], e.g. degrees into [0, 360].

        >>> loop(400, 360)
        40
        >>> loop(-50, 360)
        310

    Uses the truncated remainder, so ``maximum == 0`` raises
    ZeroDivisionError.  Results for a negative ``maximum`` are not
    meaningful.

    Branches: LOOP-ABOVE, LOOP-BELOW, LOOP-INSIDE
    """
    mod = builtins.abs(number) % builtins.abs(maximum)

    if number > maximum:                                         # LOOP-ABOVE
        return mod

    if number < 0:                                               # LOOP-BELOW
        return maximum - mod

    return number                                                # LOOP-INSIDE
