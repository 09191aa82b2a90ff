# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

"""
In-memory volume container.

Conventions:
- Spatial volumes are 3D with NumPy shape (nz, ny, nx) and axes (z, y, x).
- Complex volumes are 4D with shape (nz, ny, nx, 2); the last axis holds the
  real (index REAL) and imaginary (index IMAG) channels.
- Geometry is stored per axis: start (world coordinate of voxel 0) and
  separation (step). Direction cosines are stored for the three spatial axes
  only; the channel axis of a complex volume carries none.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

REAL = 0
IMAG = 1

SPATIAL_DIMS = ("zspace", "yspace", "xspace")
COMPLEX_DIMS = SPATIAL_DIMS + ("vector_dimension",)


class Volume:
    """
    N-dimensional voxel array with world geometry and a declared real range.

    Parameters:
        data (np.ndarray):
            3D spatial array (nz, ny, nx) or 4D complex array (nz, ny, nx, 2).
        starts (Sequence[float] | None):
            World start per axis. Defaults to 0 on every axis.
        separations (Sequence[float] | None):
            Voxel step per axis. Defaults to 1 on every axis.
        direction_cosines (np.ndarray | None):
            (3, 3) array, one unit vector per spatial axis. Defaults to the
            identity with rows ordered (z, y, x).
        dimension_names (Sequence[str] | None):
            Axis names. Defaults to the MINC-style names.
        real_range (tuple[float, float] | None):
            Declared (min, max) of the real values. If None it is computed
            from the data.

    Raises:
        ValueError
    """

    def __init__(
        self,
        data: np.ndarray,
        *,
        starts: Sequence[float] | None = None,
        separations: Sequence[float] | None = None,
        direction_cosines: np.ndarray | None = None,
        dimension_names: Sequence[str] | None = None,
        real_range: tuple[float, float] | None = None,
    ) -> None:
        arr = np.asarray(data, dtype=np.float64)
        if arr.ndim not in (3, 4):
            raise ValueError(f"Volume data must be 3D or 4D, got ndim={arr.ndim}")
        if arr.ndim == 4 and arr.shape[3] != 2:
            raise ValueError(
                f"Complex volume must have a last axis of length 2, got shape {arr.shape}"
            )
        self.data = arr

        n = arr.ndim
        self.starts = _per_axis(starts, n, 0.0, "starts")
        self.separations = _per_axis(separations, n, 1.0, "separations")
        if n == 4:
            # channel axis is synthetic
            self.starts = self.starts[:3] + (0.0,)
            self.separations = self.separations[:3] + (1.0,)

        if direction_cosines is None:
            cosines = np.eye(3)[::-1].copy()
        else:
            cosines = np.array(direction_cosines, dtype=np.float64)
            if cosines.shape != (3, 3):
                raise ValueError(
                    f"direction_cosines must have shape (3, 3), got {cosines.shape}"
                )
        self.direction_cosines = cosines

        if dimension_names is None:
            names = COMPLEX_DIMS if n == 4 else SPATIAL_DIMS
        else:
            names = tuple(str(s) for s in dimension_names)
            if len(names) != n:
                raise ValueError(f"dimension_names must have {n} entries, got {len(names)}")
        self.dimension_names = tuple(names)

        if real_range is None:
            real_range = (float(np.min(arr)), float(np.max(arr))) if arr.size else (0.0, 0.0)
        self.real_range = (float(real_range[0]), float(real_range[1]))

    def __repr__(self) -> str:
        return (
            f"Volume(shape={self.sizes}, dims={self.dimension_names}, "
            f"range=[{self.real_range[0]:g}:{self.real_range[1]:g}])"
        )

    @property
    def ndim(self) -> int:
        return self.data.ndim

    @property
    def sizes(self) -> tuple[int, ...]:
        return tuple(int(s) for s in self.data.shape)

    @property
    def spatial_shape(self) -> tuple[int, int, int]:
        nz, ny, nx = self.data.shape[:3]
        return int(nz), int(ny), int(nx)

    @property
    def is_complex(self) -> bool:
        return self.data.ndim == 4

    def get_value(self, *coords: int) -> float:
        """Return the real value stored at voxel coordinates (one index per axis)."""
        self._check_coords(coords)
        return float(self.data[coords])

    def set_value(self, *args: float) -> None:
        """
        Store a real value at voxel coordinates.

        Usage: set_value(i, j, k, value) or set_value(i, j, k, c, value).
        """
        *coords, value = args
        self._check_coords(tuple(coords))
        self.data[tuple(int(c) for c in coords)] = value

    def set_real_range(self, vmin: float, vmax: float) -> None:
        self.real_range = (float(vmin), float(vmax))

    def voxel_to_world(self, i: float, j: float, k: float) -> np.ndarray:
        """World (x, y, z) position of a spatial voxel coordinate."""
        origin = np.zeros(3)
        for axis, idx in enumerate((i, j, k)):
            origin += (self.starts[axis] + idx * self.separations[axis]) * self.direction_cosines[axis]
        return origin

    def _check_coords(self, coords: tuple) -> None:
        if len(coords) != self.ndim:
            raise ValueError(f"Expected {self.ndim} coordinates, got {len(coords)}")
        for axis, (c, n) in enumerate(zip(coords, self.data.shape)):
            if not 0 <= int(c) < n:
                raise IndexError(f"Coordinate {c} out of bounds for axis {axis} (size {n})")


def _per_axis(values: Sequence[float] | None, n: int, default: float, name: str) -> tuple[float, ...]:
    if values is None:
        return (default,) * n
    vals = tuple(float(v) for v in values)
    # a 3-entry geometry is accepted for a complex volume
    if len(vals) == 3 and n == 4:
        vals = vals + (default,)
    if len(vals) != n:
        raise ValueError(f"{name} must have {n} entries, got {len(vals)}")
    return vals
