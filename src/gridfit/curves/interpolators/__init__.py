"""
Interpolator registry.

Interpolators are looked up by short tag; the class returned by
:func:`get` is a factory whose ``create()`` gives a fit driven through
``update(count, arguments, values, state)``.

Built-in tags
-------------
linear   – C⁰ piece-wise linear, local
cubic    – C² common cubic spline with natural / clamped / not-a-knot ends, global
bessel   – C¹ Bessel (Hermite) cubic spline, local

Third-party schemes subclass :class:`~gridfit.curves.base.Interpolator` and
call :func:`register`; the built-in modules each expose their class under the
module-level name ``Interpolator``.
"""

from importlib import import_module
from types import MappingProxyType
from typing import Dict, Type

from ..base import Interpolator as _InterpolatorBase

# ---------------------------------------------------------------- registry

_REGISTRY: Dict[str, Type[_InterpolatorBase]] = {}


def register(tag: str, cls: Type[_InterpolatorBase]) -> Type[_InterpolatorBase]:
    """
    Make ``cls`` available under ``tag``; returns ``cls``.

    Raises
    ------
    TypeError   if `cls` is not an Interpolator subclass.
    ValueError  if `tag` is taken.
    """
    if not (isinstance(cls, type) and issubclass(cls, _InterpolatorBase)):
        raise TypeError(f"{cls!r} is not an Interpolator subclass")
    if tag in _REGISTRY:
        raise ValueError(f"Interpolator '{tag}' already registered")
    _REGISTRY[tag] = cls
    return cls


def get(tag: str) -> Type[_InterpolatorBase]:
    """Interpolator class registered under ``tag``."""
    if tag not in _REGISTRY:
        raise KeyError(f"Unknown interpolator '{tag}'. Available: {list(_REGISTRY)}")
    return _REGISTRY[tag]


def create(tag: str, **kwargs) -> _InterpolatorBase:
    """Instantiate by tag, e.g. ``create("cubic", boundary="not-a-knot")``."""
    return get(tag)(**kwargs)


# ---------------------------------------------------------------- built-ins

for _tag in ("linear", "cubic", "bessel"):
    register(_tag, import_module(f".{_tag}", __name__).Interpolator)

from .bessel import BesselCubicSpline  # noqa: E402
from .cubic import CommonCubicSpline  # noqa: E402
from .linear import LinearInterpolation  # noqa: E402

available = MappingProxyType(_REGISTRY)

__all__ = [
    "register",
    "get",
    "create",
    "available",
    "LinearInterpolation",
    "CommonCubicSpline",
    "BesselCubicSpline",
]
