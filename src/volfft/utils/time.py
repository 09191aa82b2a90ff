# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2025 Synchrotron SOLEIL

"""
helper for measuring and reporting elapsed wall-clock time.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from time import ctime, time

logger = logging.getLogger(__name__)


def now():
    """
    Return the current wall-clock time.

    Returns:
        float: Current time in seconds since the epoch, as returned by time().
    """
    return time()


def time_stamp(argv: Sequence[str]) -> str:
    """
    Build a history line: the local date followed by the command line.

    Example:
        "Mon Oct 19 10:02:11 2026>>> volfft --magnitude mag.h5 in.h5"
    """
    return f"{ctime()}>>> {' '.join(argv)}"


def format_elapsed(delta_t: float) -> str:
    if delta_t < 1.0:
        return f"{delta_t * 1000.0:.2f} ms"

    hours, rem = divmod(delta_t, 3600.0)
    minutes, seconds = divmod(rem, 60.0)

    if hours >= 1.0:
        return f"{int(hours)} h {int(minutes)} min {seconds:.2f} s"
    if minutes >= 1.0:
        return f"{int(minutes)} min {seconds:.2f} s"
    return f"{seconds:.2f} s"


def elapsed_time(t_start: float, verbose: bool = True) -> float:
    """
    Compute and optionally log the elapsed wall-clock time.

    Parameters:
        t_start (float): Reference start time in seconds.
        verbose (bool): If True, log the formatted elapsed time at INFO level.
            If False, only return the elapsed time. Default is True.

    Returns:
        float: Elapsed time in seconds since t_start.
    """
    delta_t = time() - t_start

    if verbose:
        logger.info(">> Total elapsed time: %s", format_elapsed(delta_t))

    return delta_t
