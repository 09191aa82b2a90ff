# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF - the European Synchrotron

from __future__ import annotations

from . import dtype, range
from .time import elapsed_time, now, time_stamp

__all__ = ["dtype", "range", "elapsed_time", "now", "time_stamp"]
