# SPDX-License-Identifier: CECILL-2.1
from __future__ import annotations

from importlib.metadata import version as _version

__version__ = _version("volfft")

from .errors import (
    CentringError,
    ConfigurationError,
    ResourceError,
    TransformError,
    UnsupportedRankError,
    VolfftError,
    VolumeInputError,
)
from .io import read_volume, write_volume
from .signal import (
    ProjectionKind,
    TransformRequest,
    complex_range,
    fft_volume,
    prep_volume,
    proj_volume,
)
from .volume import IMAG, REAL, Volume
from . import signal
from . import utils

__all__ = [
    "__version__",
    "Volume",
    "REAL",
    "IMAG",
    "read_volume",
    "write_volume",
    "prep_volume",
    "fft_volume",
    "proj_volume",
    "complex_range",
    "ProjectionKind",
    "TransformRequest",
    "signal",
    "utils",
    "VolfftError",
    "ConfigurationError",
    "UnsupportedRankError",
    "CentringError",
    "ResourceError",
    "TransformError",
    "VolumeInputError",
]
