#!/usr/bin/env python3
"""
cli.evaluate
============

Evaluate a two-stage surface built from a grid CSV at a list of points.

    python -m gridfit.cli.evaluate grid.csv points.csv --config surface.yaml --out values.csv

The grid CSV carries the vertical labels in its first column and the
horizontal labels in its header; the points CSV has ``x`` and ``y`` columns.
The output repeats the points with an additional ``value`` column.  Points
outside the domain of a non-extrapolating fit yield ``NaN`` unless
``--strict`` is given.
"""
from __future__ import annotations

import argparse
import dataclasses
import pathlib
import sys
from typing import List

import numpy as np
from tqdm import tqdm

from gridfit import logger
from gridfit.errors import OutOfDomainError
from gridfit.surfaces import ConstructionOrder
from gridfit.utils import data as udata

log = logger.get_logger(__name__)

# --------------------------------------------------------------------------- #
# CLI helpers
# --------------------------------------------------------------------------- #


def _parse(argv: List[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="gridfit-evaluate",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Evaluate a grid point surface at arbitrary (x, y) points.",
    )

    p.add_argument("grid", type=pathlib.Path, help="Grid CSV (first column = vertical labels).")
    p.add_argument("points", type=pathlib.Path, help="CSV with x,y columns.")
    p.add_argument("--config", type=pathlib.Path, default=None, help="YAML/JSON surface configuration.")
    p.add_argument(
        "--order",
        choices=[o.value for o in ConstructionOrder],
        default=None,
        help="Override the construction order of the configuration.",
    )
    p.add_argument("--out", type=pathlib.Path, default=pathlib.Path("values.csv"), help="Output CSV.")
    p.add_argument("--strict", action="store_true", help="Fail on points outside the fitted domain.")
    p.add_argument("--quiet", action="store_true", help="Hide the progress bar.")
    p.add_argument("--log-level", default="INFO", help="Logging level.")

    return p.parse_args(argv)


# --------------------------------------------------------------------------- #
# driver
# --------------------------------------------------------------------------- #


def main(argv: List[str] | None = None) -> int:
    args = _parse(argv)
    logger.setup(args.log_level)

    config = udata.load_config(args.config)
    if args.order is not None:
        config = dataclasses.replace(config, order=ConstructionOrder(args.order))

    matrix = udata.load_grid_csv(args.grid)
    points = udata.load_points_csv(args.points)
    log.info("grid %dx%d, %d point(s), order %s", matrix.row_count, matrix.column_count, len(points), config.order.value)

    surface = config.build(matrix)

    values = np.empty(len(points))
    rows = zip(points["x"].to_numpy(), points["y"].to_numpy())
    for k, (x, y) in enumerate(tqdm(rows, total=len(points), desc="evaluating", unit="pt", disable=args.quiet)):
        try:
            values[k] = surface.get_value(float(x), float(y))
        except OutOfDomainError:
            if args.strict:
                raise
            log.warning("point (%g, %g) outside the fitted domain", x, y)
            values[k] = np.nan

    out = points.assign(value=values)
    args.out.parent.mkdir(parents=True, exist_ok=True)
    out.to_csv(args.out, index=False)
    log.info("values written to %s", args.out)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
