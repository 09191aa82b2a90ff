# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

""" 
range (min max) calculations for numpy arrays
"""

from __future__ import annotations
import numpy as np


def running_minmax(values: np.ndarray) -> tuple[float, float]:
    """
    Exact (min, max) of every sample, as a strict running comparison would give.

    The running pair starts at (+inf, -inf) and is only updated on a strict
    `<` / `>` comparison, so NaN samples never contribute and an all-NaN or
    empty input returns (+inf, -inf).

    Parameters:
        values (np.ndarray): Array of any shape.

    Returns:
        tuple[float, float]: (vmin, vmax).
    """
    arr = np.asarray(values, dtype=np.float64).ravel()
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        return float(np.inf), float(-np.inf)
    return float(np.min(arr)), float(np.max(arr))


def slab_minmax(volume_data: np.ndarray) -> tuple[float, float]:
    """
    Same result as running_minmax(), accumulated one slab (axis 0) at a time.

    Parameters:
        volume_data (np.ndarray): 3D (N, H, W) or 4D (N, H, W, C) array.

    Returns:
        tuple[float, float]: (vmin, vmax) global over slabs.

    Raises:
        ValueError: If ndim is not 3/4.
    """
    if volume_data.ndim not in (3, 4):
        raise ValueError(f"Expected 3D or 4D array, got ndim={volume_data.ndim}")

    vmin = np.inf
    vmax = -np.inf
    for i in range(volume_data.shape[0]):
        lo, hi = running_minmax(volume_data[i])
        vmin = min(vmin, lo)
        vmax = max(vmax, hi)
    return float(vmin), float(vmax)
