# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

"""
Public volume I/O dispatchers.

This module provides:
    - read_volume(): reads HDF5 volumes based on file extension.
    - write_volume(): writes HDF5 volumes or TIFF slice stacks based on file extension.

TIFF is write-only here: it carries no geometry.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..utils import elapsed_time, now
from ..volume import Volume
from .h5 import read_h5_volume, save_h5_volume
from .tiff import save_tiff_volume

logger = logging.getLogger(__name__)

_READ_EXTS = {
    "h5": "h5",
    "hdf5": "h5",
}

_WRITE_EXTS = {
    "tif": "tiff",
    "tiff": "tiff",
    "h5": "h5",
    "hdf5": "h5",
}


def _normalize_extension(ext: str) -> str:
    ext = ext.lower().lstrip(".")
    return ext


def _infer_extension_from_path(path: str) -> str:
    suffix = Path(path).suffix
    if suffix == "":
        raise ValueError(
            "Cannot infer file extension from path (no suffix). "
            "Provide file_extension explicitly."
        )
    return _normalize_extension(suffix)


def read_volume(
    volume_path: str | Path,
    *,
    file_extension: str | None = None,
    verbose: bool = False,
) -> Volume:
    """
    Reads a volume from disk.

    Parameters:
        volume_path (str | Path):
            Path to a file.
        file_extension (str | None):
            Optional extension override ("h5", "hdf5").
        verbose (bool):
            If True, logs basic information about the loaded data.

    Returns:
        Volume:
            3D spatial or 4D complex volume.

    Raises:
        ValueError, VolumeInputError
    """
    t0 = now()
    path = str(volume_path)
    ext = _normalize_extension(file_extension) if file_extension else _infer_extension_from_path(path)

    kind = _READ_EXTS.get(ext)
    if kind is None:
        raise ValueError(f"Unsupported read extension: '{ext}'")

    if kind == "h5":
        volume = read_h5_volume(path)
    else:
        raise RuntimeError(f"Unhandled reader kind: {kind}")

    if verbose:
        mem_gb = volume.data.nbytes / (1024 ** 3)
        logger.info("> volume %s found, %.2f Gb in memory", " x ".join(map(str, volume.sizes)), mem_gb)
        elapsed_time(t0)

    return volume


def write_volume(
    volume: Volume,
    output_path: str | Path,
    *,
    file_extension: str | None = None,
    dtype: str = "float",
    signed: bool = False,
    clobber: bool = False,
    history: str | None = None,
    verbose: bool = False,
) -> None:
    """
    Writes a volume to disk.

    Parameters:
        volume (Volume):
            Volume to save (3D or 4D; TIFF accepts 3D only).
        output_path (str | Path):
            Output file path.
        file_extension (str | None):
            Optional extension override ("tif", "h5", ...).
        dtype (str):
            HDF5 storage type ("byte", "short", "long", "float", "double").
            TIFF output is always 16-bit.
        signed (bool):
            Signed integer HDF5 storage.
        clobber (bool):
            Overwrite existing files.
        history (str | None):
            HDF5 processing history. Not written to TIFF.
        verbose (bool):
            If True, logs a confirmation message after writing.

    Returns:
        None

    Raises:
        TypeError, ValueError, OSError
    """
    if not isinstance(volume, Volume):
        raise TypeError("volume must be a volfft Volume")

    out = Path(output_path)
    ext = _normalize_extension(file_extension) if file_extension else _infer_extension_from_path(str(out))
    kind = _WRITE_EXTS.get(ext)

    if kind is None:
        raise ValueError(f"Unsupported write extension: '{ext}'")

    if kind == "tiff":
        save_tiff_volume(volume, out, clobber=clobber)
    elif kind == "h5":
        save_h5_volume(volume, out, dtype=dtype, signed=signed, clobber=clobber, history=history)
    else:
        raise RuntimeError(f"Unhandled writer kind: {kind}")

    if verbose:
        logger.info("Data written successfully to '%s'", out)
