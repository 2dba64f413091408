"""
surfaces.label_matrix
=====================

Labelled grid point matrix used as input of two-dimensional surfaces.

Layout
------
``row_count × column_count`` values stored **column-major**,
``data[row + row_count * column]``.  Columns carry *horizontal* labels
(x-axis), rows carry *vertical* labels (y-axis).  Labels can be arbitrary
sortable objects (e.g. tenor strings) paired with a float representation used
for fitting; by default the float representation is ``float(label)``.

Missing grid values are ``NaN``; :attr:`LabelMatrix.is_completely_defined`
tells whether there are any.

>>> m = LabelMatrix(2, 3, [1, 2, 3, 4, 5, 6], [0.5, 1.0, 2.0], [10.0, 20.0])
>>> m[1, 2]
6.0
>>> m.value(20.0, 1.0)
4.0
"""

from __future__ import annotations

from enum import IntFlag
from typing import Any, Iterator, Sequence

import numpy as np

__all__ = ["LabelMatrix", "OrderOfInput"]


class OrderOfInput(IntFlag):
    ASCENDING = 0
    DISORDERED_HORIZONTAL = 1
    DISORDERED_VERTICAL = 2
    DISORDERED = DISORDERED_HORIZONTAL | DISORDERED_VERTICAL


def _labels(labels: Sequence[Any], double_labels: Sequence[float] | None, size: int, what: str):
    if labels is None or len(labels) == 0:
        raise ValueError(f"`{what}_labels` must not be empty.")
    if len(labels) != size:
        raise ValueError(f"`{what}_labels` has {len(labels)} entries, expected {size}.")
    labels = list(labels)
    if double_labels is None:
        doubles = np.array([float(lbl) for lbl in labels])
    else:
        doubles = np.asarray(double_labels, dtype=float)
        if doubles.shape != (size,):
            raise ValueError(f"`{what}_double_labels` has {doubles.size} entries, expected {size}.")
    return labels, doubles.copy()


class LabelMatrix:
    """Column-major matrix with horizontal (column) and vertical (row) labels."""

    def __init__(
        self,
        row_count: int,
        column_count: int,
        data: Sequence[float],
        horizontal_labels: Sequence[Any],
        vertical_labels: Sequence[Any],
        horizontal_double_labels: Sequence[float] | None = None,
        vertical_double_labels: Sequence[float] | None = None,
        order: OrderOfInput = OrderOfInput.ASCENDING,
        corner_label: str = "",
    ) -> None:
        if row_count < 1 or column_count < 1:
            raise ValueError("`row_count` and `column_count` must be positive.")
        self.corner_label = corner_label

        h_labels, h_doubles = _labels(horizontal_labels, horizontal_double_labels, column_count, "horizontal")
        v_labels, v_doubles = _labels(vertical_labels, vertical_double_labels, row_count, "vertical")

        values = np.asarray(data, dtype=float).ravel()
        if values.size < row_count * column_count:
            raise ValueError(f"`data` has {values.size} entries, expected {row_count * column_count}.")
        grid = values[: row_count * column_count].reshape((row_count, column_count), order="F").copy()

        order = OrderOfInput(order)
        if order & OrderOfInput.DISORDERED_HORIZONTAL:
            perm = np.argsort(h_doubles, kind="stable")
            h_doubles = h_doubles[perm]
            h_labels = [h_labels[k] for k in perm]
            grid = grid[:, perm]
        if order & OrderOfInput.DISORDERED_VERTICAL:
            perm = np.argsort(v_doubles, kind="stable")
            v_doubles = v_doubles[perm]
            v_labels = [v_labels[k] for k in perm]
            grid = grid[perm, :]

        if np.any(np.diff(h_doubles) <= 0):
            raise ValueError("Horizontal labels must be strictly increasing.")
        if np.any(np.diff(v_doubles) <= 0):
            raise ValueError("Vertical labels must be strictly increasing.")

        self._row_count = row_count
        self._column_count = column_count
        self._data = grid.ravel(order="F")
        self._h_labels = tuple(h_labels)
        self._v_labels = tuple(v_labels)
        self._h_doubles = h_doubles
        self._v_doubles = v_doubles
        self._h_index = {lbl: k for k, lbl in enumerate(self._h_labels)}
        self._v_index = {lbl: k for k, lbl in enumerate(self._v_labels)}
        for arr in (self._data, self._h_doubles, self._v_doubles):
            arr.flags.writeable = False

        self.is_completely_defined = not bool(np.isnan(self._data).any())

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def from_array(
        cls,
        values,
        horizontal_labels: Sequence[Any],
        vertical_labels: Sequence[Any],
        **kwargs,
    ) -> "LabelMatrix":
        """Build from a row-major 2-D array of shape ``(rows, columns)``."""
        grid = np.asarray(values, dtype=float)
        if grid.ndim != 2:
            raise ValueError("`values` must be 2-D.")
        rows, cols = grid.shape
        return cls(rows, cols, grid.ravel(order="F"), horizontal_labels, vertical_labels, **kwargs)

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def column_count(self) -> int:
        return self._column_count

    @property
    def shape(self) -> tuple[int, int]:
        return self._row_count, self._column_count

    @property
    def data(self) -> np.ndarray:
        """Column-major values (read-only)."""
        return self._data

    @property
    def horizontal_labels(self) -> tuple:
        return self._h_labels

    @property
    def vertical_labels(self) -> tuple:
        return self._v_labels

    @property
    def horizontal_double_labels(self) -> np.ndarray:
        return self._h_doubles

    @property
    def vertical_double_labels(self) -> np.ndarray:
        return self._v_doubles

    @property
    def is_quadratic(self) -> bool:
        return self._row_count == self._column_count

    # ------------------------------------------------------------------ #
    # Access
    # ------------------------------------------------------------------ #

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, column = index
        row = range(self._row_count)[row]
        column = range(self._column_count)[column]
        return float(self._data[row + self._row_count * column])

    def horizontal_label_index(self, label: Any) -> int:
        try:
            return self._h_index[label]
        except KeyError as exc:
            raise KeyError(f"Unknown horizontal label {label!r}.") from exc

    def vertical_label_index(self, label: Any) -> int:
        try:
            return self._v_index[label]
        except KeyError as exc:
            raise KeyError(f"Unknown vertical label {label!r}.") from exc

    def value(self, vertical_label: Any, horizontal_label: Any) -> float:
        """Cell addressed by ``(row label, column label)``."""
        return self[self.vertical_label_index(vertical_label), self.horizontal_label_index(horizontal_label)]

    def row(self, index: int) -> np.ndarray:
        """Values of row ``index`` (view)."""
        return self._data[index :: self._row_count][: self._column_count]

    def column(self, index: int) -> np.ndarray:
        """Values of column ``index`` (view)."""
        start = index * self._row_count
        return self._data[start : start + self._row_count]

    def row_with_labels(self, index: int) -> Iterator[tuple[Any, float, float]]:
        """``(horizontal label, horizontal double label, value)`` along row ``index``."""
        return zip(self._h_labels, self._h_doubles.tolist(), self.row(index).tolist())

    def column_with_labels(self, index: int) -> Iterator[tuple[Any, float, float]]:
        """``(vertical label, vertical double label, value)`` along column ``index``."""
        return zip(self._v_labels, self._v_doubles.tolist(), self.column(index).tolist())

    def to_array(self) -> np.ndarray:
        """Row-major copy of shape ``(row_count, column_count)``."""
        return self._data.reshape((self._row_count, self._column_count), order="F").copy()

    def __repr__(self) -> str:
        return (
            f"LabelMatrix({self._row_count}x{self._column_count}, "
            f"complete={self.is_completely_defined})"
        )
