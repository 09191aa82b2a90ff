# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

import numpy as np
import pytest

from volfft import IMAG, REAL, Volume


class TestVolumeConstruction:
    def test_defaults_for_spatial_volume(self):
        vol = Volume(np.arange(24, dtype=float).reshape(2, 3, 4))

        assert vol.sizes == (2, 3, 4)
        assert vol.starts == (0.0, 0.0, 0.0)
        assert vol.separations == (1.0, 1.0, 1.0)
        assert vol.dimension_names == ("zspace", "yspace", "xspace")
        assert vol.real_range == (0.0, 23.0)
        assert not vol.is_complex

    def test_complex_channel_axis_is_synthetic(self):
        vol = Volume(
            np.zeros((2, 2, 2, 2)),
            starts=(1.0, 2.0, 3.0, 9.0),
            separations=(0.5, 0.5, 0.5, 7.0),
        )

        assert vol.is_complex
        assert vol.starts == (1.0, 2.0, 3.0, 0.0)
        assert vol.separations == (0.5, 0.5, 0.5, 1.0)
        assert vol.dimension_names[-1] == "vector_dimension"

    def test_three_entry_geometry_accepted_for_complex(self):
        vol = Volume(np.zeros((2, 2, 2, 2)), starts=(1.0, 2.0, 3.0))
        assert vol.starts == (1.0, 2.0, 3.0, 0.0)

    @pytest.mark.parametrize("shape", [(4, 4), (2, 2, 2, 3), (2, 2, 2, 2, 2)])
    def test_rejects_bad_shapes(self, shape):
        with pytest.raises(ValueError):
            Volume(np.zeros(shape))

    def test_rejects_bad_cosines(self):
        with pytest.raises(ValueError, match="direction_cosines"):
            Volume(np.zeros((2, 2, 2)), direction_cosines=np.eye(2))


class TestVolumeAccess:
    def test_get_and_set_value(self):
        vol = Volume(np.zeros((2, 3, 4, 2)))
        vol.set_value(1, 2, 3, IMAG, 5.5)

        assert vol.get_value(1, 2, 3, IMAG) == 5.5
        assert vol.get_value(1, 2, 3, REAL) == 0.0

    def test_coordinate_checks(self):
        vol = Volume(np.zeros((2, 3, 4)))
        with pytest.raises(IndexError):
            vol.get_value(2, 0, 0)
        with pytest.raises(ValueError):
            vol.get_value(0, 0)

    def test_voxel_to_world_uses_cosines(self):
        vol = Volume(
            np.zeros((2, 2, 2)),
            starts=(1.0, 2.0, 3.0),
            separations=(2.0, 2.0, 2.0),
        )
        # default cosines: z axis -> world z, y -> y, x -> x
        np.testing.assert_allclose(vol.voxel_to_world(1, 0, 0), [3.0, 2.0, 3.0])
        np.testing.assert_allclose(vol.voxel_to_world(0, 0, 1), [5.0, 2.0, 1.0])
