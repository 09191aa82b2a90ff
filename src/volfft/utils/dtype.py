# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

"""
dtype conversions

Integer outputs use voxel scaling: the declared real range is mapped linearly
onto the full range of the integer type (the valid range). Readers recover real
values with from_stored().
"""

from __future__ import annotations

import numpy as np

_DTYPES = {
    ("byte", False): np.uint8,
    ("byte", True): np.int8,
    ("short", False): np.uint16,
    ("short", True): np.int16,
    ("long", False): np.uint32,
    ("long", True): np.int32,
    ("float", False): np.float32,
    ("float", True): np.float32,
    ("double", False): np.float64,
    ("double", True): np.float64,
}

OUTPUT_DTYPES = ("byte", "short", "long", "float", "double")


def resolve_dtype(name: str, signed: bool = False) -> np.dtype:
    """
    Map an output type name ("byte", "short", "long", "float", "double") to a numpy dtype.

    Raises:
        ValueError: If the name is unknown.
    """
    key = (str(name).strip().lower(), bool(signed))
    dt = _DTYPES.get(key)
    if dt is None:
        raise ValueError(f"Unsupported output dtype: {name!r}. Supported: {', '.join(OUTPUT_DTYPES)}")
    return np.dtype(dt)


def to_output_dtype(
    data: np.ndarray,
    dtype: str = "float",
    *,
    signed: bool = False,
    real_range: tuple[float, float] | None = None,
) -> tuple[np.ndarray, tuple[float, float] | None]:
    """
    Convert real-valued volume data to the requested storage type.

    Parameters:
        data (np.ndarray): Real values of any shape.
        dtype (str): One of "byte", "short", "long", "float", "double".
        signed (bool): Use the signed integer variant. Ignored for floats.
        real_range (tuple[float, float] | None): Real (min, max) mapped onto the
            integer range. If None, the finite min/max of data is used.

    Returns:
        tuple[np.ndarray, tuple[float, float] | None]:
            - converted array.
            - valid range (integer type min, max) for integer outputs, None for floats.
    """
    dt = resolve_dtype(dtype, signed)
    x = np.asarray(data, dtype=np.float64)

    if np.issubdtype(dt, np.floating):
        return x.astype(dt, copy=False), None

    info = np.iinfo(dt)
    vmin, vmax = float(info.min), float(info.max)

    if real_range is None:
        finite = x[np.isfinite(x)]
        rmin = float(finite.min()) if finite.size else 0.0
        rmax = float(finite.max()) if finite.size else 0.0
    else:
        rmin, rmax = float(real_range[0]), float(real_range[1])

    if not np.isfinite(rmin) or not np.isfinite(rmax) or rmax <= rmin:
        return np.full(x.shape, info.min, dtype=dt), (vmin, vmax)

    scale = (vmax - vmin) / (rmax - rmin)
    y = np.nan_to_num(x, nan=rmin, posinf=rmax, neginf=rmin)
    np.subtract(y, rmin, out=y)
    np.multiply(y, scale, out=y)
    np.add(y, vmin, out=y)
    np.rint(y, out=y)
    np.clip(y, vmin, vmax, out=y)

    return y.astype(dt), (vmin, vmax)


def from_stored(
    stored: np.ndarray,
    *,
    valid_range: tuple[float, float],
    real_range: tuple[float, float],
) -> np.ndarray:
    """
    Invert to_output_dtype() for integer data.

    Returns:
        np.ndarray: float64 real values.
    """
    vmin, vmax = float(valid_range[0]), float(valid_range[1])
    rmin, rmax = float(real_range[0]), float(real_range[1])
    x = np.asarray(stored, dtype=np.float64)
    if vmax <= vmin or rmax <= rmin:
        return np.full(x.shape, rmin, dtype=np.float64)
    return (x - vmin) * ((rmax - rmin) / (vmax - vmin)) + rmin
