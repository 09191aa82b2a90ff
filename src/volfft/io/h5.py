# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

"""
Read and write of h5 volumes with their geometry
"""

from __future__ import annotations

from pathlib import Path

import h5py
import numpy as np

from ..errors import VolumeInputError
from ..utils.dtype import from_stored, to_output_dtype
from ..volume import Volume

DATASET_PATH = "entry_0000/measurement/data"


def _as_str(v) -> str:
    return v.decode() if isinstance(v, bytes) else str(v)


def read_h5_volume(volume_path: str | Path) -> Volume:
    """
    Reads a 3D spatial or 4D complex volume from an HDF5 file.

    Assumes the ESRF-style dataset location:
        /entry_0000/measurement/data

    Geometry is read from the dataset attributes "starts", "separations",
    "direction_cosines" and "dimension_names"; missing attributes fall back to
    the Volume defaults. Integer data stored with "valid_range" and
    "real_range" attributes is rescaled to real values.

    Parameters:
        volume_path (str | Path):
            Path to an HDF5 file.

    Returns:
        Volume

    Raises:
        VolumeInputError:
            If the file is missing or unreadable, the dataset is absent,
            or its shape is not (nz, ny, nx) or (nz, ny, nx, 2).
    """
    fp = Path(volume_path)
    if not fp.exists():
        raise VolumeInputError(f"HDF5 file not found: '{fp}'")

    try:
        with h5py.File(fp, "r") as f:
            if DATASET_PATH not in f:
                raise VolumeInputError(f"Dataset not found: '{DATASET_PATH}' in '{fp}'")
            dset = f[DATASET_PATH]
            arr = np.asarray(dset[()])
            attrs = {k: dset.attrs[k] for k in dset.attrs.keys()}
    except OSError as e:
        if isinstance(e, VolumeInputError):
            raise
        raise VolumeInputError(f"Failed to read HDF5 file: '{fp}'") from e

    if arr.ndim not in (3, 4) or (arr.ndim == 4 and arr.shape[3] != 2):
        raise VolumeInputError(
            f"Expected (nz, ny, nx) or (nz, ny, nx, 2) dataset at '{DATASET_PATH}', "
            f"got shape {arr.shape} in '{fp}'"
        )

    real_range = attrs.get("real_range")
    real_range = tuple(float(v) for v in real_range) if real_range is not None else None

    valid_range = attrs.get("valid_range")
    if np.issubdtype(arr.dtype, np.integer) and valid_range is not None and real_range is not None:
        data = from_stored(arr, valid_range=tuple(valid_range), real_range=real_range)
    else:
        data = arr.astype(np.float64)

    names = attrs.get("dimension_names")
    try:
        return Volume(
            data,
            starts=attrs.get("starts"),
            separations=attrs.get("separations"),
            direction_cosines=attrs.get("direction_cosines"),
            dimension_names=[_as_str(n) for n in names] if names is not None else None,
            real_range=real_range,
        )
    except ValueError as e:
        raise VolumeInputError(f"Invalid volume geometry in '{fp}': {e}") from e


def save_h5_volume(
    volume: Volume,
    output_path: str | Path,
    *,
    dtype: str = "float",
    signed: bool = False,
    clobber: bool = False,
    history: str | None = None,
) -> Path:
    """
    Saves a volume and its geometry to a single HDF5 file.

    Writes dataset to:
        /entry_0000/measurement/data

    Parameters:
        volume (Volume):
            Volume to save (3D or 4D).
        output_path (str | Path):
            Output file path.
            If suffix is not .h5/.hdf5, .h5 is used.
        dtype (str):
            Storage type: "byte", "short", "long", "float" (default) or "double".
        signed (bool):
            Signed integer storage.
        clobber (bool):
            Overwrite an existing file.
        history (str | None):
            Processing history stored as the "history" attribute of the
            entry group.

    Returns:
        Path: the written file.

    Raises:
        TypeError:
            If volume is not a Volume.
        ValueError:
            If output_path is invalid or dtype unknown.
        OSError:
            If the destination path does not exist or is not writable,
            or if the output file already exists and clobber is False.
    """
    if not isinstance(volume, Volume):
        raise TypeError("volume must be a volfft Volume")

    out = Path(output_path)

    if out.name == "":
        raise ValueError("output_path must include a filename")

    if not out.parent.exists():
        raise OSError(f"Invalid path: directory does not exist: {out.parent}")

    if not out.parent.is_dir():
        raise OSError(f"Invalid path: not a directory: {out.parent}")

    if out.suffix.lower() not in {".h5", ".hdf5"}:
        out = out.with_suffix(".h5")

    if out.exists() and not clobber:
        raise OSError(f"Refusing to overwrite existing file: {out} (use clobber)")

    stored, valid_range = to_output_dtype(
        volume.data, dtype, signed=signed, real_range=volume.real_range
    )

    try:
        with h5py.File(out, "w" if clobber else "x") as f:
            entry = f.require_group("entry_0000")
            meas = entry.require_group("measurement")

            entry.attrs.setdefault("NX_class", "NXentry")
            meas.attrs.setdefault("NX_class", "NXcollection")
            if history is not None:
                entry.attrs["history"] = history

            dset = meas.create_dataset(
                "data",
                data=stored,
                compression="gzip",
                compression_opts=4,
                chunks=True,
            )
            dset.attrs["starts"] = np.asarray(volume.starts, dtype=np.float64)
            dset.attrs["separations"] = np.asarray(volume.separations, dtype=np.float64)
            dset.attrs["direction_cosines"] = volume.direction_cosines
            dset.attrs.create("dimension_names", list(volume.dimension_names), dtype=h5py.string_dtype())
            dset.attrs["real_range"] = np.asarray(volume.real_range, dtype=np.float64)
            if valid_range is not None:
                dset.attrs["valid_range"] = np.asarray(valid_range, dtype=np.float64)
    except OSError as e:
        raise OSError(f"Failed to write HDF5 file: {out}") from e

    return out
