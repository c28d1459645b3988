"""Installer that binds the number extensions as methods on a class.

Python's built-in ``int`` and ``float`` do not accept new attributes, so
the installer targets classes the caller owns.  ``ExtendedInt`` and
``ExtendedFloat`` ship with every extension already installed, and
``extended()`` turns a plain number into one of them::

    >>> extended(1).cycle(+1, [0, 3])
    2
    >>> extended(0.75).scale(50, 150)
    125.0

Installed methods return extended numbers, so calls chain.
"""
from __future__ import annotations

import functools
import logging
from numbers import Integral, Real
from typing import Any, Callable

from pydantic import BaseModel, Field, field_validator

import number_extensions as ext

logger = logging.getLogger(__name__)


EXTENSIONS: dict[str, Callable[..., Any]] = {
    "cycle": ext.cycle,
    "scale": ext.scale,
    "random": ext.random,
    "floor": ext.floor,
    "round": ext.round,
    "ceil": ext.ceil,
    "clamp": ext.clamp,
    "to_rad": ext.to_rad,
    "to_deg": ext.to_deg,
    "abs": ext.abs,
    "pow": ext.pow,
    "sqrt": ext.sqrt,
    "whole_center": ext.whole_center,
    "loop": ext.loop,
}


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class InstallOptions(BaseModel):
    """What :func:`install` attaches and whether it may replace attributes."""

    overwrite_globals: bool = Field(
        default=False,
        description="Replace attributes that already exist on the target",
    )
    names: list[str] | None = Field(
        default=None,
        description="Extensions to install; all of them when omitted",
    )

    @field_validator("names")
    @classmethod
    def names_are_known(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        unknown = [name for name in v if name not in EXTENSIONS]
        if unknown:
            raise ValueError(f"Unknown extension name(s): {', '.join(unknown)}")
        return v

    def selected(self) -> list[str]:
        return list(EXTENSIONS) if self.names is None else list(self.names)


# ---------------------------------------------------------------------------
# Installation
# ---------------------------------------------------------------------------

def _as_method(fn: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(fn)
    def method(self, *args: Any, **kwargs: Any) -> Any:
        return extended(fn(self, *args, **kwargs))

    return method


def install(
    target: type,
    options: InstallOptions | None = None,
    **overrides: Any,
) -> list[str]:
    """Attach the selected extensions to ``target`` as methods.

    Keyword ``overrides`` are merged into ``options`` and validated the
    same way.  Without ``overwrite_globals`` an attribute already present
    on ``target`` (own or inherited) is left as it is, which makes a
    repeated install a no-op.  Returns the names actually attached.

    Classes that refuse new attributes, such as ``int``, raise TypeError.
    """
    if options is None:
        options = InstallOptions(**overrides)
    elif overrides:
        options = InstallOptions(**{**options.model_dump(), **overrides})

    attached: list[str] = []
    for name in options.selected():
        if hasattr(target, name) and not options.overwrite_globals:
            logger.debug("Skipping %s.%s: already defined", target.__name__, name)
            continue
        setattr(target, name, _as_method(EXTENSIONS[name]))
        attached.append(name)

    logger.debug(
        "Installed %d extension(s) on %s: %s",
        len(attached), target.__name__, ", ".join(attached) or "-",
    )
    return attached


# ---------------------------------------------------------------------------
# Extended numeric types
# ---------------------------------------------------------------------------

class ExtendedInt(int):
    """An ``int`` carrying the number extensions as methods."""


class ExtendedFloat(float):
    """A ``float`` carrying the number extensions as methods."""


def extended(value: Any) -> Any:
    """Wrap a number into ExtendedInt / ExtendedFloat.

    Booleans and non-real values are returned untouched.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, Integral):
        return ExtendedInt(value)
    if isinstance(value, Real):
        return ExtendedFloat(value)
    return value


install(ExtendedInt)
install(ExtendedFloat)
