"""Verifying factory for range-bound cyclers.

The factory does not just construct a ``Cycler``; it first checks the
``cycle`` implementation against every postcondition, error condition
and property in ``spec.build_spec`` for the requested range.  Only a
passing implementation is handed out.

Flow:
  1. Caller requests a cycler for a given Range.
  2. Factory builds the spec for that range.
  3. Factory runs the ``cycle`` contract against the implementation.
  4. Pass -> return the Cycler.  Fail -> raise VerificationError.
"""
from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Iterable

import number_extensions
from spec import AlgebraicProperty, ExtensionSpec, OperationSpec, Range, build_spec

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Cycler
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Cycler:
    """Steps positions around a fixed range, e.g. carousel slide indexes.

    With ``Range(-1, n - 1)`` the position ``-1`` can mean "nothing
    selected" in an autocomplete result list.
    """

    between: Range

    def step(self, position: int, offset: int) -> int:
        return number_extensions.cycle(position, offset, self.between)

    def next(self, position: int) -> int:
        return self.step(position, 1)

    def prev(self, position: int) -> int:
        return self.step(position, -1)


# ---------------------------------------------------------------------------
# Verification results
# ---------------------------------------------------------------------------

@dataclass
class VerificationResult:
    """Outcome of verifying one postcondition, error condition or property."""

    check_name: str
    passed: bool
    counterexample: tuple | None = None
    tests_run: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        ce = f"  counterexample={self.counterexample}" if self.counterexample else ""
        return f"[{status}] {self.check_name} ({self.tests_run} tests){ce}"


@dataclass
class VerificationReport:
    """Aggregate result of verifying one operation's contract."""

    spec_name: str
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def tests_run(self) -> int:
        return sum(r.tests_run for r in self.results)

    def summary(self) -> str:
        lines = [f"--- {self.spec_name} ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "ALL PASSED" if self.passed else "FAILED"
        lines.append(f"  => {status}")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when an implementation fails its spec."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Verification failed:\n{report.summary()}")


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class CyclerFactory:
    """
    Produces Cycler instances whose ``cycle`` is proven for their range.

    Small ranges are verified exhaustively over ``Range.window()``.
    Larger ones fall back to edge cases plus random samples.
    """

    EXHAUSTIVE_THRESHOLD = 32   # max span for brute-force check
    SAMPLE_COUNT = 2_000

    @classmethod
    def create(
        cls, between: Range, implementation: Any = number_extensions
    ) -> Cycler:
        """Build, verify, and return a Cycler for ``between``."""
        report = cls.verify(between, implementation)
        if not report.passed:
            raise VerificationError(report)
        return Cycler(between=between)

    @classmethod
    def verify(
        cls, between: Range, implementation: Any = number_extensions
    ) -> VerificationReport:
        spec = build_spec(between)
        report = cls._verify_operation(spec, spec.operations["cycle"], implementation)
        logger.debug(
            "Verified cycle over [%d, %d]: %s after %d tests",
            between.lo, between.hi,
            "passed" if report.passed else "failed", report.tests_run,
        )
        return report

    # -- internal ---------------------------------------------------------

    @classmethod
    def _verify_operation(
        cls, spec: ExtensionSpec, op: OperationSpec, impl: Any
    ) -> VerificationReport:
        report = VerificationReport(spec_name=f"{op.name} [{spec.rng.lo}, {spec.rng.hi}]")
        exhaustive = spec.rng.span <= cls.EXHAUSTIVE_THRESHOLD

        inputs = op.inputs() if exhaustive else _generate_samples(spec.rng, 2, cls.SAMPLE_COUNT)
        inputs = list(inputs)

        for post in op.postconditions:
            report.results.append(_run_checks(
                post.name,
                ((combo, lambda c=combo: post.check(*c, op.call(impl, *c))) for combo in inputs),
            ))

        for ec in op.error_conditions:
            report.results.append(_run_checks(
                ec.name,
                ((combo, lambda c=combo, e=ec: _raises(e.exception, op.call, impl, *c))
                 for combo in ec.examples),
            ))

        for prop in op.properties:
            combos = _property_inputs(spec.rng, prop, exhaustive, cls.SAMPLE_COUNT)
            report.results.append(_run_checks(
                prop.name,
                ((combo, lambda c=combo, p=prop: p.check(impl, *c)) for combo in combos),
            ))

        return report


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _run_checks(name: str, checks: Iterable[tuple[tuple, Any]]) -> VerificationResult:
    tests_run = 0
    for combo, check in checks:
        tests_run += 1
        try:
            ok = check()
        except Exception as exc:
            logger.debug("%s raised %s for %r", name, type(exc).__name__, combo)
            ok = False
        if not ok:
            return VerificationResult(
                check_name=name,
                passed=False,
                counterexample=combo,
                tests_run=tests_run,
            )
    return VerificationResult(check_name=name, passed=True, tests_run=tests_run)


def _raises(exception: type, fn: Any, *args: Any) -> bool:
    try:
        fn(*args)
    except exception:
        return True
    return False


def _property_inputs(
    rng: Range, prop: AlgebraicProperty, exhaustive: bool, count: int
) -> Iterable[tuple[int, ...]]:
    if exhaustive:
        return itertools.product(rng.window(), repeat=prop.arity)
    return _generate_samples(rng, prop.arity, count)


def _generate_samples(rng: Range, arity: int, count: int) -> list[tuple[int, ...]]:
    """Generate edge-case + random samples from the range's window."""
    window = rng.window()
    edge_values = [
        window.start, rng.lo - 1, rng.lo, rng.lo + 1,
        -1, 0, 1,
        rng.hi - 1, rng.hi, rng.hi + 1, window.stop - 1,
    ]
    edge_values = sorted({v for v in edge_values if v in window})

    samples: list[tuple[int, ...]] = list(itertools.product(edge_values, repeat=arity))

    while len(samples) < count:
        samples.append(tuple(
            random.randint(window.start, window.stop - 1) for _ in range(arity)
        ))

    return samples
