# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

"""
common utilities to fft.py and projection.py modules
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Literal, Union

import numpy as np
import scipy.fft as sfft

from ..errors import CentringError, TransformError, UnsupportedRankError

Backend = Literal["scipy", "numpy"]
_Primitive = Callable[[np.ndarray, tuple[int, ...], bool, Union[int, None]], np.ndarray]
_PRIMITIVES: dict[str, _Primitive] = {}


def _register(name: str) -> Callable[[_Primitive], _Primitive]:
    name_norm = name.strip().lower()

    def _decorator(fn: _Primitive) -> _Primitive:
        _PRIMITIVES[name_norm] = fn
        return fn

    return _decorator


@_register("scipy")
def _scipy_fftn(buf: np.ndarray, axes: tuple[int, ...], inverse: bool, workers: int | None) -> np.ndarray:
    # norm="forward" leaves the inverse unscaled
    if inverse:
        return sfft.ifftn(buf, axes=axes, norm="forward", overwrite_x=True, workers=workers)
    return sfft.fftn(buf, axes=axes, norm="backward", overwrite_x=True, workers=workers)


@_register("numpy")
def _numpy_fftn(buf: np.ndarray, axes: tuple[int, ...], inverse: bool, workers: int | None) -> np.ndarray:
    if inverse:
        return np.fft.ifftn(buf, axes=axes, norm="forward")
    return np.fft.fftn(buf, axes=axes, norm="backward")


def get_primitive(backend: str) -> _Primitive:
    """
    Look up an unnormalized complex-to-complex N-D FFT primitive by name.

    Raises:
        ValueError: If the backend is not registered.
    """
    fn = _PRIMITIVES.get(str(backend).strip().lower())
    if fn is None:
        supported = ", ".join(sorted(_PRIMITIVES))
        raise ValueError(f"Unsupported FFT backend: {backend!r}. Supported: {supported}")
    return fn


def run_primitive(
    buf: np.ndarray,
    axes: tuple[int, ...],
    *,
    inverse: bool,
    backend: str = "scipy",
    workers: int | None = None,
) -> np.ndarray:
    """
    Execute the FFT primitive, reporting any failure as TransformError.
    """
    fn = get_primitive(backend)
    try:
        return fn(buf, axes, inverse, workers)
    except (MemoryError, ValueError, RuntimeError) as e:
        raise TransformError(f"FFT primitive '{backend}' failed on shape {buf.shape}: {e}") from e


# ****************************************************************************
# ********************** transform shape
# ****************************************************************************

@dataclass(frozen=True)
class OneD:
    """Column-wise transform along the innermost spatial axis."""

    nx: int

    rank = 1
    axes = (2,)

    @property
    def shape(self) -> tuple[int, ...]:
        return (self.nx,)


@dataclass(frozen=True)
class TwoD:
    """Slice-wise transform over the (y, x) plane of every z slice."""

    ny: int
    nx: int

    rank = 2
    axes = (1, 2)

    @property
    def shape(self) -> tuple[int, ...]:
        return (self.ny, self.nx)


@dataclass(frozen=True)
class ThreeD:
    """Whole-volume transform."""

    nz: int
    ny: int
    nx: int

    rank = 3
    axes = (0, 1, 2)

    @property
    def shape(self) -> tuple[int, ...]:
        return (self.nz, self.ny, self.nx)


TransformShape = Union[OneD, TwoD, ThreeD]


def divisor(shape: TransformShape, *, inverse: bool) -> float:
    """Normalization divisor: product of transformed lengths for inverse, 1 otherwise."""
    if not inverse:
        return 1.0
    return float(math.prod(shape.shape))


def resolve_transform_shape(
    spatial_shape: tuple[int, int, int],
    rank: int,
    *,
    centre: bool = False,
) -> TransformShape:
    """
    Resolve an integer rank into its transform shape and validate centering.

    Parameters:
        spatial_shape (tuple[int, int, int]):
            (nz, ny, nx) of the volume.
        rank (int):
            Number of jointly transformed axes (1, 2 or 3).
        centre (bool):
            If True, every transformed axis must have even length.

    Returns:
        TransformShape:
            OneD, TwoD or ThreeD.

    Raises:
        UnsupportedRankError:
            If rank is not 1, 2 or 3.
        CentringError:
            If centre is True and a transformed axis has odd length.
    """
    if isinstance(rank, bool) or rank not in (1, 2, 3):
        raise UnsupportedRankError(rank)

    nz, ny, nx = (int(s) for s in spatial_shape)
    if rank == 1:
        shape: TransformShape = OneD(nx)
    elif rank == 2:
        shape = TwoD(ny, nx)
    else:
        shape = ThreeD(nz, ny, nx)

    if centre:
        for axis, size in zip(shape.axes, shape.shape):
            if size % 2 != 0:
                raise CentringError(axis=axis, size=size, rank=rank)

    return shape


# ****************************************************************************
# ********************** centering
# ****************************************************************************

def checkerboard(shape: tuple[int, ...]) -> np.ndarray:
    """
    Alternating +1/-1 pattern: element (i, j, ...) is (-1)**(i + j + ...).

    Parameters:
        shape (tuple[int, ...]):
            Shape of the pattern.

    Returns:
        np.ndarray:
            float64 array of +1/-1 values.
    """
    if len(shape) == 0:
        return np.ones((), dtype=np.float64)
    parity = np.indices(shape).sum(axis=0) % 2
    return 1.0 - 2.0 * parity


def centre_modulate(array: np.ndarray, ndim: int) -> np.ndarray:
    """
    Multiply the trailing `ndim` axes of an array by the checkerboard pattern.

    For even lengths this moves the zero-frequency bin of the subsequent FFT
    to the array centre. Applying it twice returns the input exactly.

    Parameters:
        array (np.ndarray):
            Real or complex array; modified in place.
        ndim (int):
            Number of trailing axes the pattern spans.

    Returns:
        np.ndarray:
            The same array.

    Raises:
        ValueError
    """
    if ndim < 1 or ndim > array.ndim:
        raise ValueError(f"ndim must be in [1, {array.ndim}], got {ndim}")
    array *= checkerboard(array.shape[array.ndim - ndim:])
    return array
