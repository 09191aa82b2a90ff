# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

"""
Reduction of complex volumes to scalar volumes.

Each projection reads the (real, imag) pair of every voxel and writes one real
value. The returned volume carries the exact (min, max) of the written values.

Log-magnitude clamping:
    MAGNITUDE_LN and MAGNITUDE_LOG10 replace small magnitudes with a fixed
    floor (-2.3 and -1, i.e. the log of 0.1). Two gates are available:

    - "current": clamp when the voxel's own magnitude is <= 0.1.
    - "previous": gate on the value written for the previous voxel in (z, y, x)
      order, as the historical mincfft tool does. The first voxel is gated on
      `stale_seed`. Both floors are <= 0.1, so once a voxel is clamped every
      following voxel is clamped too.
"""

from __future__ import annotations

import enum
import logging
from typing import Literal

import numpy as np

from ..utils.range import running_minmax, slab_minmax
from ..volume import IMAG, REAL, Volume

logger = logging.getLogger(__name__)

LogClamp = Literal["current", "previous"]

LOG_THRESHOLD = 0.1
LN_FLOOR = -2.3
LOG10_FLOOR = -1.0


class ProjectionKind(enum.IntEnum):
    REAL_AND_IMAG = 0
    REAL = 1
    IMAG = 2
    MAGNITUDE = 3
    MAGNITUDE_LN = 4
    MAGNITUDE_LOG10 = 5
    PHASE = 6
    POWER = 7

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ProjectionKind.REAL_AND_IMAG: "real+imag",
    ProjectionKind.REAL: "real",
    ProjectionKind.IMAG: "imag",
    ProjectionKind.MAGNITUDE: "magnitude",
    ProjectionKind.MAGNITUDE_LN: "magln",
    ProjectionKind.MAGNITUDE_LOG10: "mag10",
    ProjectionKind.PHASE: "phase",
    ProjectionKind.POWER: "power",
}


def project_values(
    real: np.ndarray,
    imag: np.ndarray,
    kind: ProjectionKind,
    *,
    log_clamp: LogClamp = "current",
    stale_seed: float = np.inf,
) -> np.ndarray:
    """
    Apply a projection formula to arrays of real and imaginary parts.

    Parameters:
        real (np.ndarray):
            Real parts.
        imag (np.ndarray):
            Imaginary parts, same shape as real.
        kind (ProjectionKind):
            Any kind except REAL_AND_IMAG.
        log_clamp ({"current", "previous"}):
            Gate used by the log-magnitude kinds (see module docstring).
        stale_seed (float):
            Gate value seen by the first voxel when log_clamp="previous".

    Returns:
        np.ndarray:
            float64 array with the shape of real.

    Raises:
        ValueError
    """
    kind = ProjectionKind(kind)
    re = np.asarray(real, dtype=np.float64)
    im = np.asarray(imag, dtype=np.float64)
    if re.shape != im.shape:
        raise ValueError(f"real and imag shapes differ: {re.shape} vs {im.shape}")

    if kind == ProjectionKind.REAL:
        return re.copy()
    if kind == ProjectionKind.IMAG:
        return im.copy()
    if kind == ProjectionKind.POWER:
        return re * re + im * im
    if kind == ProjectionKind.MAGNITUDE:
        return np.sqrt(re * re + im * im)
    if kind == ProjectionKind.PHASE:
        out = np.zeros_like(re)
        nz = re != 0.0
        out[nz] = np.arctan(im[nz] / re[nz])
        return out
    if kind in (ProjectionKind.MAGNITUDE_LN, ProjectionKind.MAGNITUDE_LOG10):
        mag = np.sqrt(re * re + im * im)
        if kind == ProjectionKind.MAGNITUDE_LN:
            log_fn, floor = np.log, LN_FLOOR
        else:
            log_fn, floor = np.log10, LOG10_FLOOR
        if log_clamp == "current":
            return _clamped_log_current(mag, log_fn, floor)
        if log_clamp == "previous":
            return _clamped_log_previous(mag, log_fn, floor, stale_seed)
        raise ValueError(f"Unsupported log_clamp: {log_clamp!r}. Supported: current, previous")

    raise ValueError(f"{kind.name} is not a scalar projection; use the complex volume directly")


def _clamped_log_current(mag: np.ndarray, log_fn, floor: float) -> np.ndarray:
    out = np.full_like(mag, floor)
    keep = mag > LOG_THRESHOLD
    out[keep] = log_fn(mag[keep])
    return out


def _clamped_log_previous(mag: np.ndarray, log_fn, floor: float, seed: float) -> np.ndarray:
    flat = mag.ravel()
    out = np.full_like(flat, floor)
    if flat.size == 0 or not seed > LOG_THRESHOLD:
        return out.reshape(mag.shape)

    # logs are evaluated until the first one that is <= threshold; that value is
    # still written and everything after it is clamped
    with np.errstate(divide="ignore"):
        logs = log_fn(flat)
    low = np.flatnonzero(~(logs > LOG_THRESHOLD))
    stop = int(low[0]) + 1 if low.size else flat.size
    out[:stop] = logs[:stop]
    return out.reshape(mag.shape)


def proj_volume(
    volume: Volume,
    kind: ProjectionKind | int,
    *,
    log_clamp: LogClamp = "current",
    stale_seed: float = np.inf,
    verbose: bool = False,
) -> Volume:
    """
    Project a complex volume onto a new scalar volume.

    Parameters:
        volume (Volume):
            4D complex volume (nz, ny, nx, 2). Not modified.
        kind (ProjectionKind | int):
            Output kind; REAL_AND_IMAG is rejected.
        log_clamp ({"current", "previous"}):
            Gate for the log-magnitude kinds. Default is "current".
        stale_seed (float):
            First-voxel gate for log_clamp="previous". Default is +inf.
        verbose (bool):
            If True, log the output range at INFO level.

    Returns:
        Volume:
            3D volume with the spatial geometry of the input and
            real_range set to the (min, max) of the written values.

    Raises:
        TypeError:
            If volume is not a complex Volume.
        ValueError:
            If kind is REAL_AND_IMAG or unknown.
    """
    if not isinstance(volume, Volume) or not volume.is_complex:
        raise TypeError("proj_volume expects a complex (4D) Volume")

    kind = ProjectionKind(kind)
    values = project_values(
        volume.data[..., REAL],
        volume.data[..., IMAG],
        kind,
        log_clamp=log_clamp,
        stale_seed=stale_seed,
    )

    vmin, vmax = running_minmax(values)

    out = Volume(
        values,
        starts=volume.starts[:3],
        separations=volume.separations[:3],
        direction_cosines=volume.direction_cosines,
        dimension_names=volume.dimension_names[:3],
        real_range=(vmin, vmax),
    )

    if verbose:
        logger.info("> %s projection | range: [%g:%g]", kind.label, vmin, vmax)

    return out


def complex_range(volume: Volume) -> tuple[float, float]:
    """
    Compute the (min, max) over both channels of a complex volume and record it.

    Parameters:
        volume (Volume):
            4D complex volume; its real_range is updated.

    Returns:
        tuple[float, float]:
            (vmin, vmax) over real and imaginary samples.

    Raises:
        TypeError
    """
    if not isinstance(volume, Volume) or not volume.is_complex:
        raise TypeError("complex_range expects a complex (4D) Volume")

    vmin, vmax = slab_minmax(volume.data)
    volume.set_real_range(vmin, vmax)
    return vmin, vmax
