# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

"""
Complex embedding and FFT of volumes.

Conventions:
- Volumes use NumPy shape (nz, ny, nx) and axes (z, y, x); complex volumes add
  a trailing (real, imag) channel axis.
- Rank 1 transforms every x row, rank 2 every (y, x) slice, rank 3 the whole
  volume.
- Centering multiplies the input by (-1)**(sum of transformed indices) so the
  zero frequency lands at the centre of the output. Only valid for even axes.
- The FFT primitive is unnormalized in both directions; inverse transforms are
  divided by the product of the transformed axis lengths here.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from ..errors import VolumeInputError
from ..utils import elapsed_time, now
from ..volume import IMAG, REAL, Volume
from .common import (
    OneD,
    ThreeD,
    TwoD,
    centre_modulate,
    divisor,
    resolve_transform_shape,
    run_primitive,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class Direction(enum.Enum):
    FORWARD = "forward"
    INVERSE = "inverse"


@dataclass(frozen=True)
class TransformRequest:
    """
    Parameters of a single FFT pass.

    Attributes:
        rank (int): Number of jointly transformed axes (1, 2 or 3).
        inverse (bool): If True, compute the normalized inverse transform.
        centre (bool): If True, centre the zero frequency (even axes only).
    """

    rank: int = 3
    inverse: bool = False
    centre: bool = False

    @property
    def direction(self) -> Direction:
        return Direction.INVERSE if self.inverse else Direction.FORWARD


def prep_volume(volume: Volume, *, verbose: bool = False) -> Volume:
    """
    Embed a real 3D volume into a new complex 4D volume.

    The real channel is a copy of the input, the imaginary channel is zero.
    Geometry, direction cosines and the declared real range are carried over;
    the appended channel axis has start 0 and separation 1.

    Parameters:
        volume (Volume):
            3D spatial volume.
        verbose (bool):
            If True, log a short summary at INFO level.

    Returns:
        Volume:
            4D complex volume of shape (nz, ny, nx, 2).

    Raises:
        VolumeInputError:
            If the input is not a 3D volume or its geometry cannot be read.
    """
    try:
        data = np.asarray(volume.data, dtype=np.float64)
        starts = tuple(volume.starts[:3])
        separations = tuple(volume.separations[:3])
        cosines = np.array(volume.direction_cosines, dtype=np.float64)
        real_range = volume.real_range
        names = tuple(volume.dimension_names[:3]) + ("vector_dimension",)
    except (AttributeError, TypeError, ValueError) as e:
        raise VolumeInputError(f"Cannot query source volume geometry: {e}") from e

    if data.ndim != 3:
        raise VolumeInputError(f"Expected a 3D spatial volume, got ndim={data.ndim}")

    out = np.zeros(data.shape + (2,), dtype=np.float64)
    out[..., REAL] = data

    cplx = Volume(
        out,
        starts=starts + (0.0,),
        separations=separations + (1.0,),
        direction_cosines=cosines,
        dimension_names=names,
        real_range=real_range,
    )

    if verbose:
        nz, ny, nx = data.shape
        logger.info("> prepared complex volume (%d x %d x %d x 2)", nz, ny, nx)

    return cplx


def transform(
    volume: Volume,
    request: TransformRequest,
    **kwargs,
) -> Volume:
    """Run fft_volume() with the parameters held by a TransformRequest."""
    return fft_volume(
        volume,
        inverse=request.inverse,
        rank=request.rank,
        centre=request.centre,
        **kwargs,
    )


def fft_volume(
    volume: Volume,
    *,
    inverse: bool = False,
    rank: int = 3,
    centre: bool = False,
    backend: str = "scipy",
    workers: int | None = None,
    progress: ProgressCallback | None = None,
    verbose: bool = False,
) -> Volume:
    """
    Fourier transform a complex volume in place.

    Parameters:
        volume (Volume):
            4D complex volume (nz, ny, nx, 2). Mutated in place.
        inverse (bool):
            If True, compute the inverse transform, divided by the product of
            the transformed axis lengths. Default is False.
        rank (int):
            1 (x rows), 2 (y-x slices) or 3 (whole volume). Default is 3.
        centre (bool):
            If True, shift the zero frequency to the array centre via
            checkerboard modulation of the input. Default is False.
        backend (str):
            FFT primitive, "scipy" (default) or "numpy".
        workers (int | None):
            Worker threads for the scipy backend.
        progress (Callable[[int, int], None] | None):
            Advisory callback receiving (done, total).
        verbose (bool):
            If True, log a timing summary at INFO level.

    Returns:
        Volume:
            The same volume, now holding the transformed data.

    Raises:
        TypeError:
            If volume is not a complex Volume.
        UnsupportedRankError:
            If rank is not 1, 2 or 3.
        CentringError:
            If centre is True and a transformed axis has odd length.
        TransformError:
            If the FFT primitive fails. The volume is left untouched.
    """
    if not isinstance(volume, Volume) or not volume.is_complex:
        raise TypeError("fft_volume expects a complex (4D) Volume; use prep_volume() first")

    shape = resolve_transform_shape(volume.spatial_shape, rank, centre=centre)

    t0 = now()
    direction = "inverse" if inverse else "forward"
    logger.debug("FFT pass: %s, rank %d, centre=%s, backend=%s", direction, shape.rank, centre, backend)

    if isinstance(shape, ThreeD):
        result = _fft_pass_3d(volume, shape, inverse=inverse, centre=centre,
                              backend=backend, workers=workers, progress=progress)
    else:
        result = _fft_pass_slab(volume, shape, inverse=inverse, centre=centre,
                                backend=backend, workers=workers, progress=progress)

    _write_back(volume, result, divisor(shape, inverse=inverse), progress=progress)

    if verbose:
        nz, ny, nx = volume.spatial_shape
        logger.info("> %s rank-%d FFT of (%d x %d x %d) volume", direction, shape.rank, nz, ny, nx)
        elapsed_time(t0)

    return volume


def _marshal(volume: Volume, i: int | slice) -> np.ndarray:
    src = volume.data[i]
    buf = np.empty(src.shape[:-1], dtype=np.complex128)
    buf.real = src[..., REAL]
    buf.imag = src[..., IMAG]
    return buf


def _fft_pass_slab(
    volume: Volume,
    shape: OneD | TwoD,
    *,
    inverse: bool,
    centre: bool,
    backend: str,
    workers: int | None,
    progress: ProgressCallback | None,
) -> np.ndarray:
    """Rank 1 and rank 2: transform one z slab at a time through a scratch buffer."""
    nz = volume.spatial_shape[0]
    total = 3 * nz
    # axes relative to a (ny, nx) slab
    slab_axes = tuple(a - 1 for a in shape.axes)
    result = np.empty(volume.spatial_shape, dtype=np.complex128)

    for i in range(nz):
        scratch = _marshal(volume, i)
        if centre:
            centre_modulate(scratch, shape.rank)
        if progress is not None:
            progress(2 * i + 1, total)
        result[i] = run_primitive(scratch, slab_axes, inverse=inverse,
                                  backend=backend, workers=workers)
        if progress is not None:
            progress(2 * i + 2, total)

    return result


def _fft_pass_3d(
    volume: Volume,
    shape: ThreeD,
    *,
    inverse: bool,
    centre: bool,
    backend: str,
    workers: int | None,
    progress: ProgressCallback | None,
) -> np.ndarray:
    nz = shape.nz
    total = 3 * nz

    scratch = _marshal(volume, slice(None))
    if centre:
        centre_modulate(scratch, 3)
    if progress is not None:
        progress(nz, total)

    result = run_primitive(scratch, shape.axes, inverse=inverse,
                           backend=backend, workers=workers)
    if progress is not None:
        progress(2 * nz, total)
    return result


def _write_back(
    volume: Volume,
    result: np.ndarray,
    div: float,
    *,
    progress: ProgressCallback | None,
) -> None:
    nz = volume.spatial_shape[0]
    for i in range(nz):
        volume.data[i, ..., REAL] = result[i].real / div
        volume.data[i, ..., IMAG] = result[i].imag / div
        if progress is not None:
            progress(2 * nz + i + 1, 3 * nz)
