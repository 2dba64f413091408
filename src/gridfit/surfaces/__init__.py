"""
Two-dimensional grid point surfaces.

Public interface
----------------
* **LabelMatrix**, **OrderOfInput** – labelled column-major input matrix.
* **create_surface(matrix, horizontal, vertical, order, replenishment)** –
  standard construction from two :class:`~gridfit.curves.CurveFactory`
  objects.
* **create_surface_from_lines(matrix, line_factory, transversal, order,
  replenishment)** – per-line curve factories.
* **HorizontalVerticalSurface**, **VerticalHorizontalSurface**,
  **ConstructionOrder**.
* **get_replenishment(name)** – ``x-axis`` or ``weighted`` filling of
  missing cells.
"""

from .label_matrix import LabelMatrix, OrderOfInput
from .replenishment import (
    AlongXAxisReplenishment,
    MissingValueReplenishment,
    WeightedNearestReplenishment,
    get_replenishment,
)
from .surface import (
    ConstructionOrder,
    HorizontalVerticalSurface,
    TwoStageSurface,
    VerticalHorizontalSurface,
    create_surface,
    create_surface_from_lines,
)

__all__ = [
    "LabelMatrix",
    "OrderOfInput",
    "ConstructionOrder",
    "TwoStageSurface",
    "HorizontalVerticalSurface",
    "VerticalHorizontalSurface",
    "create_surface",
    "create_surface_from_lines",
    "MissingValueReplenishment",
    "AlongXAxisReplenishment",
    "WeightedNearestReplenishment",
    "get_replenishment",
]
