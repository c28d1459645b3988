"""Spec conformance tests.

These tests are *driven by* the spec: they iterate over every
postcondition, error condition, and algebraic property defined in
``spec.build_spec`` and verify the implementation satisfies them.

If the spec changes (e.g. a new postcondition is added), these tests
automatically cover it - no manual test authoring required for the
new predicate.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis.strategies import integers

import number_extensions as ext
from spec import Range, build_spec

# ---------------------------------------------------------------------------
# Configuration - small ranges so exhaustive checks are fast
# ---------------------------------------------------------------------------

RANGES = [Range(0, 1), Range(0, 5), Range(-3, 3), Range(5, 12), Range(-20, -11)]
SPEC = build_spec(Range(-3, 3))
nearby = integers(min_value=-10, max_value=10)


def _ids(r: Range) -> str:
    return f"[{r.lo},{r.hi}]"


# ===================================================================
# POSTCONDITIONS - exhaustive over each operation's inputs
# ===================================================================

class TestPostconditions:
    """Every postcondition in the spec holds for every generated input."""

    @pytest.mark.parametrize("rng", RANGES, ids=_ids)
    def test_all_postconditions(self, rng):
        spec = build_spec(rng)
        for op_name, op in spec.operations.items():
            for inputs in op.inputs():
                result = op.call(ext, *inputs)
                for post in op.postconditions:
                    assert post.check(*inputs, result), (
                        f"Postcondition '{post.name}' failed: "
                        f"{op_name}{inputs} = {result}"
                    )


# ===================================================================
# ERROR CONDITIONS
# ===================================================================

class TestErrorConditions:
    """Every error condition example raises the declared exception."""

    def test_error_examples_raise(self):
        for op_name, op in SPEC.operations.items():
            for ec in op.error_conditions:
                for inputs in ec.examples:
                    assert ec.trigger(*inputs)
                    with pytest.raises(ec.exception):
                        op.call(ext, *inputs)

    def test_cycle_error_is_invalid_argument(self):
        ec = SPEC.operations["cycle"].error_conditions[0]
        for inputs in ec.examples:
            with pytest.raises(ext.InvalidArgumentError):
                SPEC.operations["cycle"].call(ext, *inputs)

    def test_valid_inputs_never_trigger(self):
        for op in SPEC.operations.values():
            for ec in op.error_conditions:
                assert not any(ec.trigger(*inputs) for inputs in op.inputs())


# ===================================================================
# ALGEBRAIC PROPERTIES - property-based
# ===================================================================

class TestAlgebraicProperties:
    """Every algebraic property in the spec holds for random inputs."""

    @given(a=nearby, b=nearby)
    @settings(max_examples=300)
    def test_binary_properties(self, a, b):
        for op_name, prop in SPEC.all_properties:
            if prop.arity != 2:
                continue
            assert prop.check(ext, a, b), (
                f"Property '{prop.name}' failed for {op_name}({a}, {b})"
            )

    @given(a=nearby)
    @settings(max_examples=300)
    def test_unary_properties(self, a):
        for op_name, prop in SPEC.all_properties:
            if prop.arity != 1:
                continue
            assert prop.check(ext, a), (
                f"Property '{prop.name}' failed for {op_name}({a})"
            )


# ===================================================================
# SPEC SHAPE
# ===================================================================

class TestSpecShape:

    def test_operations_covered(self):
        assert set(SPEC.operations) == {
            "cycle", "clamp", "scale", "loop", "whole_center", "to_rad",
        }

    def test_branch_ids_unique(self):
        ids = [b.id for b in SPEC.branches]
        assert len(ids) == len(set(ids))

    def test_cycle_input_count(self):
        """Sanity: window (3 spans) times offsets (4 spans + 1)."""
        span = SPEC.rng.span
        assert len(list(SPEC.operations["cycle"].inputs())) == (3 * span) * (4 * span + 1)

    def test_all_postconditions_listed(self):
        names = [(op, post.name) for op, post in SPEC.all_postconditions]
        assert ("cycle", "result_in_range") in names
        assert ("loop", "congruent") in names
