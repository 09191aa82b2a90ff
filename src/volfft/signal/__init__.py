# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

"""
Spectral processing primitives.
"""

from __future__ import annotations

# Embedding / FFT
from .fft import (
    Direction,
    TransformRequest,
    fft_volume,
    prep_volume,
    transform,
)

# Centering
from .common import (
    OneD,
    ThreeD,
    TwoD,
    checkerboard,
    centre_modulate,
    resolve_transform_shape,
)

# Projection
from .projection import (
    ProjectionKind,
    complex_range,
    proj_volume,
    project_values,
)

__all__ = [
    # fft.py
    "Direction",
    "TransformRequest",
    "prep_volume",
    "fft_volume",
    "transform",
    # common.py
    "OneD",
    "TwoD",
    "ThreeD",
    "checkerboard",
    "centre_modulate",
    "resolve_transform_shape",
    # projection.py
    "ProjectionKind",
    "proj_volume",
    "project_values",
    "complex_range",
]
