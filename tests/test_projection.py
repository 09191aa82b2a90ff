# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

import math

import numpy as np
import pytest

from volfft import (
    REAL,
    ProjectionKind,
    Volume,
    complex_range,
    fft_volume,
    prep_volume,
    proj_volume,
    read_volume,
    write_volume,
)
from volfft.signal import project_values


def _complex(real, imag):
    real = np.asarray(real, dtype=float)
    imag = np.asarray(imag, dtype=float)
    return Volume(np.stack([real, imag], axis=-1))


def _row(values_real, values_imag=None):
    re = np.asarray(values_real, dtype=float).reshape(1, 1, -1)
    im = np.zeros_like(re) if values_imag is None else np.asarray(values_imag, dtype=float).reshape(1, 1, -1)
    return _complex(re, im)


class TestFormulas:
    def test_real_and_imag(self, rng):
        re, im = rng.normal(size=(2, 3, 3, 3))
        vol = _complex(re, im)

        np.testing.assert_array_equal(proj_volume(vol, ProjectionKind.REAL).data, re)
        np.testing.assert_array_equal(proj_volume(vol, ProjectionKind.IMAG).data, im)

    def test_power_is_magnitude_squared(self, rng):
        re, im = rng.normal(scale=10.0, size=(2, 4, 4, 4))
        vol = _complex(re, im)

        mag = proj_volume(vol, ProjectionKind.MAGNITUDE).data
        power = proj_volume(vol, ProjectionKind.POWER).data
        np.testing.assert_allclose(power, mag ** 2, rtol=1e-12)
        np.testing.assert_allclose(mag, np.hypot(re, im), rtol=1e-12)

    def test_phase_is_arctan_of_ratio(self):
        vol = _row([1.0, -1.0, 2.0], [1.0, 1.0, 0.0])
        phase = proj_volume(vol, ProjectionKind.PHASE).data.ravel()
        np.testing.assert_allclose(phase, [math.pi / 4, -math.pi / 4, 0.0])

    def test_phase_zero_real_part_is_exactly_zero(self):
        vol = _row([0.0, 0.0, 0.0, -0.0], [5.0, -3.0, 1e300, 0.0])
        phase = proj_volume(vol, ProjectionKind.PHASE).data
        assert np.all(phase == 0.0)

    def test_accepts_integer_kind(self):
        vol = _row([3.0], [4.0])
        assert proj_volume(vol, 3).get_value(0, 0, 0) == pytest.approx(5.0)

    def test_rejects_real_and_imag(self):
        with pytest.raises(ValueError, match="REAL_AND_IMAG"):
            proj_volume(_row([1.0]), ProjectionKind.REAL_AND_IMAG)

    def test_rejects_spatial_volume(self):
        with pytest.raises(TypeError):
            proj_volume(Volume(np.zeros((2, 2, 2))), ProjectionKind.REAL)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            project_values(np.zeros(3), np.zeros(4), ProjectionKind.POWER)


class TestLogMagnitudeCurrentGate:
    def test_ln_clamps_small_magnitudes(self):
        vol = _row([10.0, 0.1, 0.05, 0.0, 0.5])
        out = proj_volume(vol, ProjectionKind.MAGNITUDE_LN).data.ravel()
        np.testing.assert_allclose(out, [math.log(10.0), -2.3, -2.3, -2.3, math.log(0.5)])

    def test_log10_clamps_small_magnitudes(self):
        vol = _row([0.05, 1.0, 1000.0], [0.0, 0.0, 0.0])
        out = proj_volume(vol, ProjectionKind.MAGNITUDE_LOG10).data.ravel()
        np.testing.assert_allclose(out, [-1.0, 0.0, 3.0])

    def test_no_infinite_values_for_zero_input(self):
        out = proj_volume(_row([0.0, 0.0]), ProjectionKind.MAGNITUDE_LN)
        assert np.all(np.isfinite(out.data))
        assert out.real_range == (-2.3, -2.3)


class TestLogMagnitudePreviousGate:
    """The legacy gate looks at the value written for the previous voxel."""

    def test_differs_from_current_gate_after_a_low_log(self):
        vol = _row([10.0, 100.0, 0.5, 10.0])

        current = proj_volume(vol, ProjectionKind.MAGNITUDE_LN).data.ravel()
        previous = proj_volume(vol, ProjectionKind.MAGNITUDE_LN, log_clamp="previous").data.ravel()

        np.testing.assert_allclose(current, np.log([10.0, 100.0, 0.5, 10.0]))
        # ln(0.5) < 0.1 is still written, then every later voxel is clamped
        np.testing.assert_allclose(previous, [math.log(10.0), math.log(100.0), math.log(0.5), -2.3])

    def test_latches_once_clamped(self):
        vol = _row([10.0, 1.0, 10.0, 10.0, 10.0])
        out = proj_volume(vol, ProjectionKind.MAGNITUDE_LOG10, log_clamp="previous").data.ravel()
        np.testing.assert_allclose(out, [1.0, 0.0, -1.0, -1.0, -1.0])

    def test_low_seed_clamps_everything(self):
        vol = _row([10.0, 100.0])
        out = proj_volume(vol, ProjectionKind.MAGNITUDE_LN, log_clamp="previous", stale_seed=0.0)
        np.testing.assert_array_equal(out.data, -2.3)

    def test_follows_zyx_order(self):
        re = np.full((2, 1, 2), 10.0)
        re[0, 0, 1] = 1.0  # first low log in C order
        vol = _complex(re, np.zeros_like(re))
        out = proj_volume(vol, ProjectionKind.MAGNITUDE_LOG10, log_clamp="previous").data

        assert out[0, 0, 0] == pytest.approx(1.0)
        assert out[0, 0, 1] == pytest.approx(0.0)
        np.testing.assert_array_equal(out[1], -1.0)

    def test_unknown_gate(self):
        with pytest.raises(ValueError, match="log_clamp"):
            proj_volume(_row([1.0]), ProjectionKind.MAGNITUDE_LN, log_clamp="next")


class TestRangeTracking:
    def test_range_matches_true_extrema(self, rng):
        re, im = rng.normal(size=(2, 5, 3, 4))
        out = proj_volume(_complex(re, im), ProjectionKind.REAL)
        assert out.real_range == (re.min(), re.max())

    def test_all_zero_volume_magnitude(self):
        cplx = fft_volume(prep_volume(Volume(np.zeros((4, 4, 4)))))
        out = proj_volume(cplx, ProjectionKind.MAGNITUDE)

        np.testing.assert_array_equal(out.data, 0.0)
        assert out.real_range == (0.0, 0.0)

    def test_constant_real_phase_is_zero(self):
        re = np.ones((2, 2, 2))
        out = proj_volume(_complex(re, np.zeros_like(re)), ProjectionKind.PHASE)

        np.testing.assert_array_equal(out.data, 0.0)
        assert out.real_range == (0.0, 0.0)

    def test_geometry_carried_to_scalar_volume(self, spatial_volume):
        cplx = prep_volume(spatial_volume)
        out = proj_volume(cplx, ProjectionKind.REAL)

        assert out.sizes == spatial_volume.sizes
        assert out.starts == spatial_volume.starts
        assert out.separations == spatial_volume.separations
        np.testing.assert_array_equal(out.direction_cosines, spatial_volume.direction_cosines)

    def test_axis_names_survive_file_round_trip(self, tmp_path):
        path = tmp_path / "xyz.h5"
        write_volume(Volume(np.ones((2, 4, 6)), dimension_names=("xspace", "yspace", "zspace")), path)

        cplx = fft_volume(prep_volume(read_volume(path)))
        out = proj_volume(cplx, ProjectionKind.MAGNITUDE)

        assert out.dimension_names == ("xspace", "yspace", "zspace")

    def test_complex_range_covers_both_channels(self):
        vol = _complex(np.full((2, 2, 2), 3.0), np.full((2, 2, 2), -4.0))
        vol.data[1, 1, 1, REAL] = 9.0

        assert complex_range(vol) == (-4.0, 9.0)
        assert vol.real_range == (-4.0, 9.0)

    def test_projection_does_not_modify_input(self, spatial_volume):
        cplx = fft_volume(prep_volume(spatial_volume))
        before = cplx.data.copy()
        for kind in list(ProjectionKind)[1:]:
            proj_volume(cplx, kind)
        np.testing.assert_array_equal(cplx.data, before)
