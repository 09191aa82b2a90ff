# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

""" 
Export of scalar volumes as tiff slice stacks
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from ..utils.dtype import to_output_dtype
from ..volume import Volume


def save_tiff_volume(volume: Volume, output_path: str | Path, *, clobber: bool = False) -> list[Path]:
    """
    Saves a 3D scalar volume as one 16-bit TIFF per z slice.

    Geometry is not preserved. Values are scaled from the volume's real range
    onto [0, 65535].

    Parameters:
        volume (Volume):
            3D scalar volume (nz, ny, nx).
        output_path (str | Path):
            Used as a base name; files are saved as
            "<stem>_0000.tif", "<stem>_0001.tif", ... in the same folder.
        clobber (bool):
            Overwrite existing slice files.

    Returns:
        list[Path]: written files.

    Raises:
        TypeError:
            If volume is not a Volume.
        ValueError:
            If volume is not 3D, or if output_path is invalid.
        OSError:
            If the destination path does not exist or is not writable,
            or a slice file exists and clobber is False.
    """
    if not isinstance(volume, Volume):
        raise TypeError("volume must be a volfft Volume")
    if volume.is_complex:
        raise ValueError("TIFF export supports 3D scalar volumes only; project the complex volume first")

    out = Path(output_path)

    if out.name == "":
        raise ValueError("output_path must include a filename")

    if not out.parent.exists():
        raise OSError(f"Invalid path: directory does not exist: {out.parent}")

    if not out.parent.is_dir():
        raise OSError(f"Invalid path: not a directory: {out.parent}")

    suffix = out.suffix.lower()
    if suffix not in {".tif", ".tiff"}:
        suffix = ".tif"

    img_u16, _ = to_output_dtype(volume.data, "short", signed=False, real_range=volume.real_range)

    base = out.with_suffix("")
    paths = [base.parent / f"{base.name}_{i:04d}{suffix}" for i in range(img_u16.shape[0])]
    if not clobber:
        for p in paths:
            if p.exists():
                raise OSError(f"Refusing to overwrite existing file: {p} (use clobber)")

    for frame, frame_path in zip(img_u16, paths):
        try:
            Image.fromarray(frame).save(frame_path)
        except OSError as e:
            raise OSError(f"Failed to write TIFF file: {frame_path}") from e

    return paths
