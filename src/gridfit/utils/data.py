"""
utils.data
==========

Thin I/O layer – keeps *all* external data access in one place so the curve
and surface code stays completely file-system agnostic.

Functions
---------

label_matrix_from_frame(df)          -> LabelMatrix
    DataFrame (index = vertical labels, columns = horizontal labels) ↦ matrix.

frame_from_label_matrix(matrix)      -> pd.DataFrame
    Inverse of the above.

load_grid_csv(path)                  -> LabelMatrix
    CSV whose first column holds the vertical labels, header the horizontal
    labels; empty cells become NaN.

load_points_csv(path)                -> pd.DataFrame
    CSV with ``x`` and ``y`` columns (evaluation points).

load_yaml(path)                      -> Any
    Load a YAML/JSON configuration file and return the parsed object.

load_config(path)                    -> SurfaceConfig
    ``load_yaml`` + :meth:`SurfaceConfig.from_mapping`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
import yaml

from ..config import SurfaceConfig
from ..surfaces.label_matrix import LabelMatrix, OrderOfInput

__all__ = [
    "label_matrix_from_frame",
    "frame_from_label_matrix",
    "load_grid_csv",
    "load_points_csv",
    "load_yaml",
    "load_config",
]

# --------------------------------------------------------------------------- #
# DataFrame <-> LabelMatrix
# --------------------------------------------------------------------------- #


def _as_float(labels) -> np.ndarray:
    return np.array([float(lbl) for lbl in labels])


def label_matrix_from_frame(df: pd.DataFrame, *, sort: bool = True) -> LabelMatrix:
    """
    Build a :class:`LabelMatrix` from a numeric frame.

    Column labels become horizontal labels, the index vertical labels; both
    must convert to ``float``.  With ``sort=True`` unordered labels are
    sorted, otherwise they must already be strictly increasing.
    """
    values = df.to_numpy(dtype=float)
    order = OrderOfInput.DISORDERED if sort else OrderOfInput.ASCENDING
    return LabelMatrix.from_array(
        values,
        list(df.columns),
        list(df.index),
        horizontal_double_labels=_as_float(df.columns),
        vertical_double_labels=_as_float(df.index),
        order=order,
        corner_label=df.index.name or "",
    )


def frame_from_label_matrix(matrix: LabelMatrix) -> pd.DataFrame:
    """Row-major frame with the matrix labels as index / columns."""
    df = pd.DataFrame(
        matrix.to_array(),
        index=pd.Index(matrix.vertical_labels, name=matrix.corner_label or None),
        columns=list(matrix.horizontal_labels),
    )
    return df


# --------------------------------------------------------------------------- #
# CSV loaders
# --------------------------------------------------------------------------- #


def load_grid_csv(path: str | Path) -> LabelMatrix:
    """
    Load a grid CSV into a :class:`LabelMatrix`.

    Expected layout::

        y\\x,1.1,2.7
        1.4,1,6
        2.0,2,
        ...

    Empty cells are read as ``NaN``.
    """
    df = pd.read_csv(Path(path).expanduser(), index_col=0)
    df.columns = _as_float(df.columns)
    df.index = _as_float(df.index)
    return label_matrix_from_frame(df.astype("float64"))


def load_points_csv(path: str | Path) -> pd.DataFrame:
    """Evaluation points; columns ``x`` and ``y`` – anything else is ignored."""
    df = pd.read_csv(Path(path).expanduser())
    missing = {"x", "y"} - set(df.columns)
    if missing:
        raise ValueError(f"Points file lacks column(s) {sorted(missing)}.")
    return df.loc[:, ["x", "y"]].astype("float64")


# --------------------------------------------------------------------------- #
# Lightweight YAML/JSON loader
# --------------------------------------------------------------------------- #


def load_yaml(path: str | Path) -> Any:
    """Parse a YAML or JSON file and return the deserialised object."""
    p = Path(path).expanduser().resolve()
    with p.open("r", encoding="utf-8") as fh:
        if p.suffix.lower() == ".json":
            return json.load(fh)
        return yaml.safe_load(fh)


def load_config(path: str | Path | None) -> SurfaceConfig:
    """Surface configuration from a file; defaults when ``path`` is ``None``."""
    if path is None:
        return SurfaceConfig()
    return SurfaceConfig.from_mapping(load_yaml(path) or {})
