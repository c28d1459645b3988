"""Formal specification for the number extensions.

Each operation is specified as a collection of:
- inputs: an exhaustive generator of valid argument tuples
- postconditions: what the output must satisfy given those inputs
- error conditions: inputs that must raise a specific exception
- algebraic properties: relationships between calls that must hold

The spec is machine-readable.  The factory and the validation tools
iterate over it to verify an implementation and to search for
counterexamples.

Layers
------
Range           inclusive integer interval used by ``cycle``
OperationSpec   per-operation contract (inputs/post/error/properties)
BranchSpec      every decision point that white-box tests must cover
ExtensionSpec   the full contract for one range
build_spec()    constructs an ExtensionSpec for a given range
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Callable, Iterable, Iterator

from number_extensions import InvalidArgumentError, is_whole


# ---------------------------------------------------------------------------
# Range
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Range:
    """Inclusive integer interval [lo, hi].

    Unpacks like a two-element sequence, so it can be passed wherever a
    plain ``[lo, hi]`` pair is accepted.
    """

    lo: int
    hi: int

    def __post_init__(self) -> None:
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    def __iter__(self) -> Iterator[int]:
        return iter((self.lo, self.hi))

    @property
    def span(self) -> int:
        """Number of integers in the range."""
        return self.hi - self.lo + 1

    def contains(self, v: Real) -> bool:
        return self.lo <= v <= self.hi

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def window(self) -> range:
        """The range plus one full span on either side."""
        return range(self.lo - self.span, self.hi + self.span + 1)

    def clamp(self, v: Real) -> Real:
        return max(self.lo, min(self.hi, v))

    def wrap(self, v: int) -> int:
        return self.lo + (v - self.lo) % self.span


# ---------------------------------------------------------------------------
# Spec building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type
    examples: tuple[tuple, ...] = ()


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    name: str
    inputs: Callable[[], Iterable[tuple]]
    call: Callable[..., Any]    # (ext, *inputs) -> result
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation this belongs to


@dataclass(frozen=True)
class ExtensionSpec:
    """Complete contract of the number extensions for one range."""

    rng: Range
    operations: dict[str, OperationSpec]
    branches: list[BranchSpec] = field(default_factory=list)

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out


# ---------------------------------------------------------------------------
# Helpers used inside the spec predicates
# ---------------------------------------------------------------------------

def close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=1e-12, abs_tol=1e-9)


# ---------------------------------------------------------------------------
# Spec builder
# ---------------------------------------------------------------------------

def build_spec(rng: Range) -> ExtensionSpec:
    """Construct the full specification of the extensions over ``rng``."""

    lo, hi, span = rng.lo, rng.hi, rng.span
    window = rng.window()
    offsets = range(-2 * span, 2 * span + 1)
    between = [lo, hi]

    # ---------------------------------------------------------------- cycle
    cycle_spec = OperationSpec(
        name="cycle",
        inputs=lambda: ((n, o) for n in window for o in offsets),
        call=lambda ext, n, o: ext.cycle(n, o, between),
        postconditions=[
            Postcondition(
                "result_in_range",
                "Result is within [lo, hi]",
                lambda n, o, result: rng.contains(result),
            ),
            Postcondition(
                "congruent",
                "Result differs from number + offset by a multiple of span",
                lambda n, o, result: (result - (n + o)) % span == 0,
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "non_integer_offset",
                "InvalidArgumentError when offset is not a whole number",
                lambda n, o: not is_whole(o),
                InvalidArgumentError,
                examples=(
                    (1, 3.4), (lo, 0.5), (hi, -1.25),
                    (0, float("nan")), (0, float("inf")),
                    (0, "1"), (0, None), (0, True),
                ),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "closure", "cycle(n, o) always in range", 2,
                lambda ext, n, o: rng.contains(ext.cycle(n, o, between)),
            ),
            AlgebraicProperty(
                "periodicity", "cycle(n, o) == cycle(n, o + span)", 2,
                lambda ext, n, o: (
                    ext.cycle(n, o, between) == ext.cycle(n, o + span, between)
                ),
            ),
            AlgebraicProperty(
                "zero_offset", "cycle(n, 0) == n exactly when n is in range", 1,
                lambda ext, n: (
                    (ext.cycle(n, 0, between) == n) == rng.contains(n)
                ),
            ),
            AlgebraicProperty(
                "inverse", "cycle(cycle(n, o), -o) == wrap(n)", 2,
                lambda ext, n, o: (
                    ext.cycle(ext.cycle(n, o, between), -o, between)
                    == rng.wrap(n)
                ),
            ),
        ],
    )

    # ---------------------------------------------------------------- clamp
    clamp_spec = OperationSpec(
        name="clamp",
        inputs=lambda: ((v,) for v in window),
        call=lambda ext, v: ext.clamp(v, lo, hi),
        postconditions=[
            Postcondition(
                "result_in_range",
                "Result is within [lo, hi]",
                lambda v, result: rng.contains(result),
            ),
            Postcondition(
                "result_correct",
                "Result equals the nearest value in range",
                lambda v, result: result == rng.clamp(v),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "idempotent", "clamp(clamp(v)) == clamp(v)", 1,
                lambda ext, v: (
                    ext.clamp(ext.clamp(v, lo, hi), lo, hi)
                    == ext.clamp(v, lo, hi)
                ),
            ),
            AlgebraicProperty(
                "monotonic", "a <= b implies clamp(a) <= clamp(b)", 2,
                lambda ext, a, b: (
                    a > b or ext.clamp(a, lo, hi) <= ext.clamp(b, lo, hi)
                ),
            ),
        ],
    )

    # ---------------------------------------------------------------- scale
    fractions = [k / 10 for k in range(11)]
    scale_spec = OperationSpec(
        name="scale",
        inputs=lambda: ((t,) for t in fractions),
        call=lambda ext, t: ext.scale(t, lo, hi),
        postconditions=[
            Postcondition(
                "result_in_range",
                "A fraction in [0, 1] scales into [lo, hi]",
                lambda t, result: lo <= result <= hi,
            ),
            Postcondition(
                "result_correct",
                "Result equals t * (hi - lo) + lo",
                lambda t, result: close(result, t * (hi - lo) + lo),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "endpoints", "scale(0) == lo and scale(1) == hi", 1,
                lambda ext, _: (
                    ext.scale(0, lo, hi) == lo and ext.scale(1, lo, hi) == hi
                ),
            ),
            AlgebraicProperty(
                "extrapolates", "scale is linear outside [0, 1] too", 1,
                lambda ext, v: close(ext.scale(v, lo, hi), v * (hi - lo) + lo),
            ),
        ],
    )

    # ----------------------------------------------------------------- loop
    limit = span
    loop_inputs = range(-2 * limit, 3 * limit + 1)
    loop_spec = OperationSpec(
        name="loop",
        inputs=lambda: ((n,) for n in loop_inputs),
        call=lambda ext, n: ext.loop(n, limit),
        postconditions=[
            Postcondition(
                "result_in_range",
                "Result is within [0, max]",
                lambda n, result: 0 <= result <= limit,
            ),
            Postcondition(
                "congruent",
                "Result differs from number by a multiple of max",
                lambda n, result: (result - n) % limit == 0,
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "inside_unchanged", "loop(n) == n for 0 <= n <= max", 1,
                lambda ext, n: not (0 <= n <= limit) or ext.loop(n, limit) == n,
            ),
        ],
    )

    # --------------------------------------------------------- whole_center
    center_spec = OperationSpec(
        name="whole_center",
        inputs=lambda: ((n, f) for n in window for f in (True, False)),
        call=lambda ext, n, f: ext.whole_center(n, f),
        postconditions=[
            Postcondition(
                "result_correct",
                "Floor or ceiling of half the number",
                lambda n, f, result: result == (n // 2 if f else -(-n // 2)),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "floor_ceil_gap",
                "ceil variant exceeds floor variant by n mod 2", 1,
                lambda ext, n: (
                    ext.whole_center(n, False) - ext.whole_center(n, True)
                    == n % 2
                ),
            ),
            AlgebraicProperty(
                "ceil_is_default", "whole_center(n) == whole_center(n, False)", 1,
                lambda ext, n: ext.whole_center(n) == ext.whole_center(n, False),
            ),
        ],
    )

    # --------------------------------------------------------------- angles
    angle_spec = OperationSpec(
        name="to_rad",
        inputs=lambda: ((d,) for d in window),
        call=lambda ext, d: ext.to_rad(d),
        postconditions=[
            Postcondition(
                "result_correct",
                "Result equals degrees * pi / 180",
                lambda d, result: close(result, d * math.pi / 180),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "round_trip", "to_deg(to_rad(d)) == d", 1,
                lambda ext, d: close(ext.to_deg(ext.to_rad(d)), d),
            ),
            AlgebraicProperty(
                "reverse_round_trip", "to_rad(to_deg(r)) == r", 1,
                lambda ext, r: close(ext.to_rad(ext.to_deg(r)), r),
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        BranchSpec(
            "OFFSET-VALID",
            "Offset is a whole number",
            "is_whole(offset)",
            "cycle",
        ),
        BranchSpec(
            "OFFSET-INVALID",
            "InvalidArgumentError raised",
            "not is_whole(offset)",
            "cycle",
        ),
        BranchSpec(
            "LOOP-ABOVE",
            "Number above max, remainder returned",
            "number > max",
            "loop",
        ),
        BranchSpec(
            "LOOP-BELOW",
            "Negative number, max minus remainder returned",
            "number < 0",
            "loop",
        ),
        BranchSpec(
            "LOOP-INSIDE",
            "Number already within [0, max], returned unchanged",
            "0 <= number <= max",
            "loop",
        ),
        BranchSpec(
            "CENTER-FLOOR",
            "Half the number rounded down",
            "use_floor",
            "whole_center",
        ),
        BranchSpec(
            "CENTER-CEIL",
            "Half the number rounded up",
            "not use_floor",
            "whole_center",
        ),
    ]

    return ExtensionSpec(
        rng=rng,
        operations={
            "cycle": cycle_spec,
            "clamp": clamp_spec,
            "scale": scale_spec,
            "loop": loop_spec,
            "whole_center": center_spec,
            "to_rad": angle_spec,
        },
        branches=branches,
    )
