"""
gridfit.errors
==============

Exception hierarchy shared by curves and surfaces.

Every class derives from :class:`GridFitError` *and* from the builtin a caller
would naturally catch (``ValueError`` for bad input, ``RuntimeError`` for
state problems, ``LinAlgError`` for singular systems), so existing
``except ValueError`` blocks keep working.
"""

from __future__ import annotations

import numpy as np

__all__ = [
    "GridFitError",
    "BuildingDirectionError",
    "NotOperableError",
    "OutOfDomainError",
    "DegenerateSurfaceError",
    "SingularSystemError",
    "ReplenishmentError",
]

# --------------------------------------------------------------------------- #
# message templates
# --------------------------------------------------------------------------- #

BDE_LEFT = "Left/above extrapolation must be built from the first grid point, got {direction!r}."
BDE_RIGHT = "Right/below extrapolation must be built from the last grid point, got {direction!r}."
NOE_EXTRAPOLATION = "No extrapolation defined: {x} is outside [{lower}, {upper}]."
NOE_DOMAIN = "{x} is outside the fitted domain [{lower}, {upper}]."
NOT_OPERABLE_LINE = "Curve along line {index} is not operable."
NOT_OPERABLE_TRANSVERSAL = "Only {count} valid grid points along the transversal line, {required} required."
DEGENERATE = "Only {count} valid line(s) available, at least 2 required."
SINGULAR = "Tridiagonal spline system is singular (LAPACK info = {info})."
REPLENISH = "Cannot replenish cell ({row}, {column}): no valid grid point along {axis}."


class GridFitError(Exception):
    """Base class of all package specific errors."""


class BuildingDirectionError(GridFitError, ValueError):
    """Extrapolator attached on the wrong side of a curve."""


class NotOperableError(GridFitError, RuntimeError):
    """Curve or fit is not ready for evaluation."""


class OutOfDomainError(GridFitError, ValueError):
    """Evaluation outside the domain where no extrapolation is defined."""


class DegenerateSurfaceError(GridFitError, ValueError):
    """Fewer than two operable lines remain after dropping invalid ones."""


class SingularSystemError(GridFitError, np.linalg.LinAlgError):
    """LAPACK reported a zero pivot in the spline system."""


class ReplenishmentError(GridFitError, ValueError):
    """A missing grid value has no valid neighbour to be estimated from."""
