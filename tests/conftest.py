# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

import numpy as np
import pytest

from volfft import Volume


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def spatial_volume(rng):
    """Random real volume with non-trivial geometry."""
    cosines = np.array(
        [
            [0.0, 0.0, 1.0],
            [0.0, 1.0, 0.0],
            [1.0, 0.0, 0.0],
        ]
    )
    return Volume(
        rng.normal(size=(4, 6, 8)),
        starts=(-10.0, 5.0, 2.5),
        separations=(2.0, 0.5, 0.25),
        direction_cosines=cosines,
    )
