# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

from __future__ import annotations

from . import h5, tiff
from .rw import read_volume, write_volume

__all__ = [
    "h5",
    "tiff",
    "read_volume",
    "write_volume",
]
