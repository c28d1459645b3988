"""Counterexample search: discovers gaps in implementation or tests.

This module runs independently of the test suite.  For every operation
in ``spec.build_spec`` it systematically searches for:

1. Postcondition violations: inputs where the implementation doesn't
   match the spec's expected output.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some
   input combination.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import sys
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

import number_extensions
from spec import ExtensionSpec, Range, build_spec

SHOWN_PER_CATEGORY = 5


@dataclass(frozen=True)
class Counterexample:
    """One failing input: which check broke and what actually happened."""

    category: str
    operation: str
    check: str
    inputs: tuple
    detail: str

    def __str__(self) -> str:
        return f"{self.category}: {self.operation}.{self.check} at {self.inputs} ({self.detail})"


@dataclass
class SearchReport:
    rng: Range
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return not self.counterexamples

    def by_category(self) -> Counter:
        return Counter(cx.category for cx in self.counterexamples)

    def summary(self) -> str:
        head = (
            f"[{self.rng.lo}, {self.rng.hi}]: {self.checks_run} checks, "
            f"{len(self.counterexamples)} counterexample(s)"
        )
        if self.passed:
            return head

        lines = [head]
        for category, count in sorted(self.by_category().items()):
            lines.append(f"  {category} x{count}")
            shown = [cx for cx in self.counterexamples if cx.category == category]
            lines.extend(f"    {cx}" for cx in shown[:SHOWN_PER_CATEGORY])
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    impl: Any,
    spec: ExtensionSpec,
) -> tuple[list[Counterexample], int]:
    """Exhaustively verify postconditions for every generated input."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_spec in spec.operations.items():
        for inputs in op_spec.inputs():
            checks += 1
            try:
                result = op_spec.call(impl, *inputs)
            except Exception as e:
                cxs.append(Counterexample(
                    "unexpected_error", op_name, "call", inputs,
                    f"{type(e).__name__}: {e}",
                ))
                continue

            cxs.extend(
                Counterexample(
                    "postcondition_violation", op_name, post.name, inputs,
                    f"result={result!r}",
                )
                for post in op_spec.postconditions
                if not post.check(*inputs, result)
            )

    return cxs, checks


def search_error_condition_violations(
    impl: Any,
    spec: ExtensionSpec,
) -> tuple[list[Counterexample], int]:
    """Verify every error condition example raises the declared exception."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_spec in spec.operations.items():
        for ec in op_spec.error_conditions:
            expected = ec.exception.__name__
            for inputs in ec.examples:
                if not ec.trigger(*inputs):
                    continue
                checks += 1
                try:
                    result = op_spec.call(impl, *inputs)
                except ec.exception:
                    continue
                except Exception as e:
                    cxs.append(Counterexample(
                        "wrong_error", op_name, ec.name, inputs,
                        f"expected {expected}, got {type(e).__name__}: {e}",
                    ))
                    continue
                cxs.append(Counterexample(
                    "missing_error", op_name, ec.name, inputs,
                    f"expected {expected}, returned {result!r}",
                ))

    return cxs, checks


def search_property_violations(
    impl: Any,
    spec: ExtensionSpec,
) -> tuple[list[Counterexample], int]:
    """Exhaustively check every algebraic property over the range's window."""
    cxs: list[Counterexample] = []
    checks = 0
    window = spec.rng.window()

    for op_name, prop in spec.all_properties:
        if prop.arity == 2:
            combos = [(a, b) for a in window for b in window]
        else:
            combos = [(a,) for a in window]

        for combo in combos:
            checks += 1
            if not prop.check(impl, *combo):
                cxs.append(Counterexample(
                    "property_violation", op_name, prop.name, combo,
                    prop.description,
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(rng: Range, impl: Any = number_extensions) -> SearchReport:
    """Run complete counterexample search for one range."""
    spec = build_spec(rng)
    report = SearchReport(rng=rng)

    for search_fn in (
        search_postcondition_violations,
        search_error_condition_violations,
        search_property_violations,
    ):
        cxs, checks = search_fn(impl, spec)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


RANGES = [
    Range(0, 1),        # single pair
    Range(0, 5),        # zero-based
    Range(-3, 3),       # symmetric
    Range(-1, 9),       # -1 as "nothing selected"
    Range(5, 12),       # all positive
    Range(-20, -11),    # all negative
    Range(4, 4),        # single value
]


def main() -> None:
    """Run counterexample search across several ranges."""
    reports = [run_search(rng) for rng in RANGES]
    for report in reports:
        print(report.summary())

    failed = [r for r in reports if not r.passed]
    if failed:
        print(f"{len(failed)} of {len(reports)} ranges had counterexamples")
        sys.exit(1)
    print(f"ALL RANGES PASSED ({sum(r.checks_run for r in reports)} checks)")


if __name__ == "__main__":
    main()
