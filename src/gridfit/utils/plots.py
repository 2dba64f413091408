"""
Plotting helpers for curves and surfaces.

Functions
---------
plot_curve(curve, *, ax=None, margin=0.1)        -> Figure
    Fitted curve (with extrapolated margins) plus grid point markers.

plot_surface(surface, *, ax=None, resolution=60) -> Figure
    Filled contour of a surface over its label range, grid points overlaid.

plot_slices(surface, *, ax=None)                 -> Figure
    Surface cut along every row label, i.e. ``x ↦ f(x, y_i)``.

surface_panel(surface, *, save_to=None)          -> Figure
    Two-row summary panel: contour + slices.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np

__all__ = ["plot_curve", "plot_surface", "plot_slices", "surface_panel"]

if TYPE_CHECKING:  # pragma: no cover – import only for static typing
    from gridfit.curves.curve import GridPointCurve
    from gridfit.surfaces.surface import TwoStageSurface

# --------------------------------------------------------------------------- #
# internal helper
# --------------------------------------------------------------------------- #


def _ax(ax):
    if ax is None:
        fig, ax_ = plt.subplots(figsize=(8, 4))
        return fig, ax_
    return ax.figure, ax


def _span(lo: float, hi: float, margin: float) -> tuple[float, float]:
    pad = margin * (hi - lo)
    return lo - pad, hi + pad


# --------------------------------------------------------------------------- #
# curves
# --------------------------------------------------------------------------- #


def plot_curve(curve: "GridPointCurve", *, ax=None, margin: float = 0.1, points: int = 400):
    """Curve on ``[lower, upper]`` widened by ``margin`` where it extrapolates."""
    fig, ax = _ax(ax)

    lo, hi = curve.lower_bound, curve.upper_bound
    wide_lo, wide_hi = _span(lo, hi, margin)
    if curve.left_extrapolator is None or curve.left_extrapolator.name == "none":
        wide_lo = lo
    if curve.right_extrapolator is None or curve.right_extrapolator.name == "none":
        wide_hi = hi

    grid = np.linspace(wide_lo, wide_hi, points)
    ax.plot(grid, [curve.get_value(x) for x in grid], lw=1.5, label=curve.fitting.name or "fit")
    ax.scatter(curve.arguments, curve.values, marker="o", s=30, zorder=3, label="Grid points")

    ax.set(xlabel="Argument", ylabel="Value", title=f"{type(curve.fitting).__name__}")
    ax.legend()
    ax.grid(True, ls="--", alpha=0.3)
    return fig


# --------------------------------------------------------------------------- #
# surfaces
# --------------------------------------------------------------------------- #


def plot_surface(surface: "TwoStageSurface", *, ax=None, resolution: int = 60, levels: int = 20):
    """Filled contour on the label rectangle of the surface matrix."""
    fig, ax = _ax(ax)
    m = surface.matrix
    xs = np.linspace(m.horizontal_double_labels[0], m.horizontal_double_labels[-1], resolution)
    ys = np.linspace(m.vertical_double_labels[0], m.vertical_double_labels[-1], resolution)
    X, Y = np.meshgrid(xs, ys)
    Z = surface.get_values(X, Y)

    cs = ax.contourf(X, Y, Z, levels=levels, cmap="viridis")
    fig.colorbar(cs, ax=ax)
    gx, gy = np.meshgrid(m.horizontal_double_labels, m.vertical_double_labels)
    defined = ~np.isnan(m.to_array())
    ax.scatter(gx[defined], gy[defined], marker="+", c="k", s=25, label="Grid points")

    ax.set(xlabel="x (horizontal)", ylabel="y (vertical)", title=type(surface).__name__)
    ax.legend(loc="upper right")
    return fig


def plot_slices(surface: "TwoStageSurface", *, ax=None, points: int = 200):
    """One line per row label: ``x ↦ f(x, y_i)``."""
    fig, ax = _ax(ax)
    m = surface.matrix
    xs = np.linspace(m.horizontal_double_labels[0], m.horizontal_double_labels[-1], points)
    for label, y in zip(m.vertical_labels, m.vertical_double_labels):
        ax.plot(xs, surface.get_values(xs, y), lw=1.2, label=f"y = {label}")

    ax.set(xlabel="x (horizontal)", ylabel="Value", title="Row slices")
    ax.legend(fontsize="small")
    ax.grid(True, ls="--", alpha=0.3)
    return fig


def surface_panel(surface: "TwoStageSurface", *, save_to: str | None = None):
    """Two-row summary panel consisting of contour and row slices."""
    fig, axes = plt.subplots(2, 1, figsize=(8, 8), sharex=False)

    plot_surface(surface, ax=axes[0])
    plot_slices(surface, ax=axes[1])

    fig.tight_layout()
    if save_to is not None:
        fig.savefig(save_to, dpi=150, bbox_inches="tight")
        plt.close(fig)
    return fig
