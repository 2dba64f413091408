"""
Thin wrapper around Python's ``logging`` module.

All package loggers live below the ``gridfit`` root logger so that a single
:func:`set_level` call controls the whole library.

>>> from gridfit.logger import get_logger
>>> log = get_logger(__name__)
>>> log.debug("factorized %d x %d system", 8, 8)
"""

import logging
import sys

ROOT_NAME = "gridfit"

logging.getLogger(ROOT_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``gridfit`` hierarchy.

    Module names that already start with ``gridfit`` are used verbatim,
    anything else is attached below the root logger.
    """
    if not name:
        return logging.getLogger(ROOT_NAME)
    if name == ROOT_NAME or name.startswith(ROOT_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_NAME}.{name}")


def set_level(level: int | str = logging.INFO) -> None:
    """Set the log level for *all* gridfit loggers at once."""
    if isinstance(level, str):
        level = level.upper()
    logging.getLogger(ROOT_NAME).setLevel(level)


def setup(level: int | str = logging.INFO, stream=None) -> None:
    """One-time setup: attach a stream handler with the gridfit format.

    Extra calls only change the level.
    """
    root = logging.getLogger(ROOT_NAME)
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s"))
        root.addHandler(handler)
    set_level(level)
