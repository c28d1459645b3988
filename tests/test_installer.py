"""Tests for the installer and the extended numeric types."""
from __future__ import annotations

import logging
import random

import pytest
from pydantic import ValidationError

from installer import (
    EXTENSIONS,
    ExtendedFloat,
    ExtendedInt,
    InstallOptions,
    extended,
    install,
)


@pytest.fixture
def target() -> type:
    """A fresh float subclass per test so installs don't leak."""

    class Num(float):
        def clamp(self, lo, hi):
            return "own clamp"

    return Num


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class TestInstallOptions:

    def test_defaults(self):
        opts = InstallOptions()
        assert opts.overwrite_globals is False
        assert opts.names is None
        assert opts.selected() == list(EXTENSIONS)

    def test_subset(self):
        opts = InstallOptions(names=["cycle", "loop"])
        assert opts.selected() == ["cycle", "loop"]

    def test_unknown_name_rejected(self):
        with pytest.raises(ValidationError, match="Unknown extension"):
            InstallOptions(names=["cycle", "teleport"])

    def test_registry_has_every_extension(self):
        assert list(EXTENSIONS) == [
            "cycle", "scale", "random", "floor", "round", "ceil", "clamp",
            "to_rad", "to_deg", "abs", "pow", "sqrt", "whole_center", "loop",
        ]


# ---------------------------------------------------------------------------
# install()
# ---------------------------------------------------------------------------

class TestInstall:

    def test_installs_every_function(self, target):
        attached = install(target, overwrite_globals=True)
        assert attached == list(EXTENSIONS)
        for name in EXTENSIONS:
            assert callable(getattr(target, name))

    def test_existing_attribute_kept_without_overwrite(self, target):
        attached = install(target)
        assert "clamp" not in attached
        assert target(400).clamp(0, 100) == "own clamp"

    def test_existing_attribute_replaced_with_overwrite(self, target):
        attached = install(target, InstallOptions(overwrite_globals=True))
        assert "clamp" in attached
        assert target(400).clamp(0, 100) == 100

    def test_second_install_is_noop(self, target):
        first = install(target)
        second = install(target)
        assert first
        assert second == []

    def test_overrides_merge_into_options(self, target):
        opts = InstallOptions(names=["clamp"])
        assert install(target, opts) == []
        assert install(target, opts, overwrite_globals=True) == ["clamp"]

    def test_overrides_are_validated(self, target):
        with pytest.raises(ValidationError):
            install(target, InstallOptions(), names=["nope"])

    def test_builtin_types_refuse(self):
        with pytest.raises(TypeError):
            install(int, overwrite_globals=True)

    def test_logs_installed_names(self, target, caplog):
        with caplog.at_level(logging.DEBUG, logger="installer"):
            install(target, names=["cycle", "clamp"])
        assert "Skipping Num.clamp" in caplog.text
        assert "Installed 1 extension(s) on Num: cycle" in caplog.text


# ---------------------------------------------------------------------------
# Extended numbers
# ---------------------------------------------------------------------------

class TestExtendedNumbers:

    def test_wrap_types(self):
        assert isinstance(extended(1), ExtendedInt)
        assert isinstance(extended(1.5), ExtendedFloat)
        assert extended(True) is True
        assert extended("1") == "1"

    def test_cycle_method(self):
        assert extended(1).cycle(+1, [0, 3]) == 2
        assert extended(1).cycle(+4, [-3, 3]) == -2

    def test_chaining(self):
        value = extended(0.5).scale(50, 150).clamp(0, 90).to_rad()
        assert value == pytest.approx(1.5707963267948966)

    def test_results_stay_extended(self):
        assert isinstance(extended(3.5).floor(), ExtendedInt)
        assert isinstance(extended(16).sqrt(), ExtendedFloat)
        assert isinstance(extended(400).loop(360), ExtendedInt)

    def test_method_examples(self):
        assert extended(40.6).floor() == 40
        assert extended(40.6).round() == 41
        assert extended(40.6).ceil() == 41
        assert extended(-1).abs() == 1
        assert extended(2).pow(3) == 8
        assert extended(16).sqrt() == 4
        assert extended(5).whole_center(True) == 2
        assert extended(5).whole_center() == 3
        assert extended(-50).loop(360) == 310
        assert extended(90).to_rad().to_deg() == pytest.approx(90)

    def test_random_method_takes_source(self):
        value = extended(50).random(rng=random.Random(7))
        assert 0 <= value < 50

    def test_invalid_offset_propagates(self):
        from number_extensions import InvalidArgumentError

        with pytest.raises(InvalidArgumentError):
            extended(1).cycle(3.4, [-3, 3])

    def test_still_plain_numbers(self):
        assert extended(2) + 3 == 5
        assert extended(2.5) * 2 == 5.0
