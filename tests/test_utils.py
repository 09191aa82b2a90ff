# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

import logging

import numpy as np
import pytest

from volfft.utils import elapsed_time, now
from volfft.utils.dtype import from_stored, resolve_dtype, to_output_dtype
from volfft.utils.range import running_minmax, slab_minmax
from volfft.utils.time import format_elapsed, time_stamp


class TestRunningMinmax:
    def test_exact_extrema(self):
        values = np.array([[3.0, -7.5], [12.25, 0.0]])
        assert running_minmax(values) == (-7.5, 12.25)

    def test_nan_never_wins_a_strict_comparison(self):
        assert running_minmax(np.array([np.nan, 2.0, -1.0])) == (-1.0, 2.0)

    def test_empty_keeps_initial_pair(self):
        vmin, vmax = running_minmax(np.array([]))
        assert vmin == np.inf and vmax == -np.inf

    def test_infinities_are_kept(self):
        assert running_minmax(np.array([-np.inf, 1.0])) == (-np.inf, 1.0)

    def test_slab_accumulation_agrees(self, rng):
        data = rng.normal(size=(3, 4, 5, 2))
        assert slab_minmax(data) == running_minmax(data)

    def test_slab_rejects_2d(self):
        with pytest.raises(ValueError):
            slab_minmax(np.zeros((2, 2)))


class TestOutputDtype:
    @pytest.mark.parametrize(
        "name, signed, expected",
        [
            ("byte", False, np.uint8),
            ("byte", True, np.int8),
            ("short", False, np.uint16),
            ("long", True, np.int32),
            ("float", True, np.float32),
            ("DOUBLE", False, np.float64),
        ],
    )
    def test_resolve(self, name, signed, expected):
        assert resolve_dtype(name, signed) == np.dtype(expected)

    def test_resolve_unknown(self):
        with pytest.raises(ValueError, match="Unsupported output dtype"):
            resolve_dtype("half")

    def test_float_passthrough(self):
        data = np.array([0.1, -2.0])
        out, valid = to_output_dtype(data, "double")
        assert valid is None
        np.testing.assert_array_equal(out, data)

    def test_integer_scaling_spans_type_range(self):
        data = np.array([-1.0, 0.0, 1.0])
        out, valid = to_output_dtype(data, "short", real_range=(-1.0, 1.0))

        assert out.dtype == np.uint16
        assert valid == (0.0, 65535.0)
        assert out[0] == 0 and out[-1] == 65535

    def test_signed_scaling_and_inverse(self, rng):
        data = rng.uniform(-5.0, 5.0, size=100)
        rr = (float(data.min()), float(data.max()))
        out, valid = to_output_dtype(data, "long", signed=True, real_range=rr)
        back = from_stored(out, valid_range=valid, real_range=rr)

        assert out.dtype == np.int32
        np.testing.assert_allclose(back, data, atol=1e-7)

    def test_degenerate_range_maps_to_type_minimum(self):
        out, valid = to_output_dtype(np.zeros(4), "byte", signed=True, real_range=(0.0, 0.0))
        np.testing.assert_array_equal(out, -128)
        np.testing.assert_array_equal(from_stored(out, valid_range=valid, real_range=(0.0, 0.0)), 0.0)


class TestElapsedTime:
    def test_format(self):
        assert format_elapsed(0.5) == "500.00 ms"
        assert format_elapsed(75.0) == "1 min 15.00 s"
        assert format_elapsed(3725.0) == "1 h 2 min 5.00 s"

    def test_returns_delta_and_logs(self, caplog):
        with caplog.at_level(logging.INFO, logger="volfft"):
            dt = elapsed_time(now())
        assert dt >= 0.0
        assert "Total elapsed time" in caplog.text

    def test_silent(self, caplog):
        with caplog.at_level(logging.INFO, logger="volfft"):
            elapsed_time(now(), verbose=False)
        assert caplog.text == ""

    def test_time_stamp_appends_command_line(self):
        line = time_stamp(["volfft", "--2D", "in.h5", "out.h5"])
        date, _, command = line.partition(">>> ")
        assert date
        assert command == "volfft --2D in.h5 out.h5"
