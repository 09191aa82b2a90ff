# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

"""
Exception hierarchy shared by the transform, projection and I/O layers.
"""

from __future__ import annotations


class VolfftError(Exception):
    """Base class for all volfft errors."""


class ConfigurationError(VolfftError, ValueError):
    """A transform was requested with parameters that can never succeed."""


class UnsupportedRankError(ConfigurationError):
    def __init__(self, rank: object) -> None:
        self.rank = rank
        super().__init__(f"Unsupported FFT rank: {rank!r}. Supported: 1, 2, 3")


class CentringError(ConfigurationError):
    """Centering requested on a transformed axis of odd length."""

    def __init__(self, axis: int, size: int, rank: int) -> None:
        self.axis = axis
        self.size = size
        self.rank = rank
        super().__init__(
            f"Cannot centre a rank-{rank} FFT: axis {axis} has odd length {size}. "
            "Centering requires every transformed axis to be even."
        )


class ResourceError(VolfftError, RuntimeError):
    """A pass could not complete; any partially written target is invalid."""


class TransformError(ResourceError):
    """The FFT primitive failed."""


class VolumeInputError(VolfftError, OSError):
    """The source volume or its geometry could not be read."""
