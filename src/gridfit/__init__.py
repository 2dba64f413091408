"""
gridfit
=======

Grid-point curve and surface fitting.

Sub-packages
------------
curves    – 1-D fits (splines, linear, polynomial), extrapolation, curves
surfaces  – labelled matrices and two-stage 2-D surfaces
utils     – pandas I/O and matplotlib helpers
cli       – command line entry points
"""

from .config import CurveConfig, SurfaceConfig
from .curves import (
    BuildingDirection,
    CurveFactory,
    FittingQuality,
    GridPointCurve,
    UpdateState,
)
from .errors import (
    BuildingDirectionError,
    DegenerateSurfaceError,
    GridFitError,
    NotOperableError,
    OutOfDomainError,
    ReplenishmentError,
    SingularSystemError,
)
from .surfaces import (
    ConstructionOrder,
    LabelMatrix,
    OrderOfInput,
    create_surface,
    create_surface_from_lines,
)

__version__ = "0.1.0"

__all__ = [
    "CurveConfig",
    "SurfaceConfig",
    "BuildingDirection",
    "CurveFactory",
    "FittingQuality",
    "GridPointCurve",
    "UpdateState",
    "GridFitError",
    "BuildingDirectionError",
    "DegenerateSurfaceError",
    "NotOperableError",
    "OutOfDomainError",
    "ReplenishmentError",
    "SingularSystemError",
    "ConstructionOrder",
    "LabelMatrix",
    "OrderOfInput",
    "create_surface",
    "create_surface_from_lines",
]
