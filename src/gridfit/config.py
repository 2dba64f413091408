"""
config.py
=========

Declarative description of curve and surface fits.

A :class:`CurveConfig` names a fitting method from the registries and the
extrapolation on both sides; a :class:`SurfaceConfig` combines a horizontal
and a vertical curve with a construction order.  Both are frozen dataclasses
built from plain mappings (e.g. a parsed YAML file, see
:func:`gridfit.utils.data.load_config`):

.. code-block:: yaml

    order: horizontal-vertical
    horizontal: {method: cubic, boundary: natural, left: constant, right: linear}
    vertical:   {method: bessel, left: constant, right: constant}
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from .curves import interpolators
from .curves.boundary import get_boundary
from .curves.curve import CurveFactory
from .curves.extrapolators import get_extrapolator
from .curves.parametrizations import available as _parametrizations
from .curves.parametrizations import get_parametrization
from .curves.state import BuildingDirection
from .surfaces.replenishment import get_replenishment
from .surfaces.surface import ConstructionOrder

__all__ = ["CurveConfig", "SurfaceConfig", "DEFAULT_SURFACE"]


def _known(cls, data: Mapping[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = set(data) - names
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} key(s): {sorted(unknown)}")
    return dict(data)


@dataclass(frozen=True)
class CurveConfig:
    """One-dimensional fit.

    Parameters
    ----------
    method : Registered interpolator (``linear``, ``cubic``, ``bessel``) or
             parametrization (``polynomial``) name.
    boundary : Boundary condition of the ``cubic`` method.
    first_derivative, last_derivative : End slopes of a ``clamped`` boundary.
    left, right : Extrapolator names (``constant``, ``linear``, ``none``);
                  ignored for parametrizations.
    degree : Polynomial degree of the ``polynomial`` method.
    """

    method: str = "cubic"
    boundary: str = "natural"
    first_derivative: float = 0.0
    last_derivative: float = 0.0
    left: str = "constant"
    right: str = "constant"
    degree: int = 2

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "CurveConfig":
        return cls(**_known(cls, data or {}))

    def to_factory(self) -> CurveFactory:
        if self.method in _parametrizations:
            return CurveFactory(get_parametrization(self.method, degree=self.degree))

        interpolator_cls = interpolators.get(self.method)
        if self.method == "cubic":
            kwargs = {}
            if self.boundary == "clamped":
                kwargs = {"first_derivative": self.first_derivative, "last_derivative": self.last_derivative}
            interpolator = interpolator_cls(boundary=get_boundary(self.boundary, **kwargs))
        else:
            interpolator = interpolator_cls()
        return CurveFactory(
            interpolator,
            get_extrapolator(self.left, BuildingDirection.FIRST),
            get_extrapolator(self.right, BuildingDirection.LAST),
        )


@dataclass(frozen=True)
class SurfaceConfig:
    """Two-stage surface: horizontal (x) fit, vertical (y) fit, order.

    ``replenishment`` (``x-axis`` or ``weighted``) fills missing cells by
    linear interpolation between nearest valid neighbours before the lines
    are built; ``replenishment_weight`` is the y-axis share of ``weighted``.
    """

    horizontal: CurveConfig = field(default_factory=CurveConfig)
    vertical: CurveConfig = field(default_factory=CurveConfig)
    order: ConstructionOrder = ConstructionOrder.HORIZONTAL_VERTICAL
    replenishment: str | None = None
    replenishment_weight: float = 0.5

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "SurfaceConfig":
        data = _known(cls, data or {})
        return cls(
            horizontal=CurveConfig.from_mapping(data.get("horizontal")),
            vertical=CurveConfig.from_mapping(data.get("vertical")),
            order=ConstructionOrder(data.get("order", ConstructionOrder.HORIZONTAL_VERTICAL)),
            replenishment=data.get("replenishment"),
            replenishment_weight=float(data.get("replenishment_weight", 0.5)),
        )

    def build(self, matrix):
        """Surface over ``matrix`` (a :class:`~gridfit.surfaces.LabelMatrix`)."""
        from .surfaces.surface import create_surface

        fill = None
        if self.replenishment is not None:
            kwargs = {"weight": self.replenishment_weight} if self.replenishment == "weighted" else {}
            fill = get_replenishment(self.replenishment, **kwargs)
        return create_surface(
            matrix, self.horizontal.to_factory(), self.vertical.to_factory(), self.order, replenishment=fill
        )


DEFAULT_SURFACE = SurfaceConfig()
