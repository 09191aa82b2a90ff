# SPDX-License-Identifier: CECILL-2.1
# Copyright (c) 2026 ESRF

"""volfft.cli

Terminal-friendly CLI to Fourier transform a volume and write spectral outputs.

Example
-------
volfft brain.h5 spectrum.h5
volfft --centre --magnitude mag.h5 --phase phase.h5 brain.h5
volfft --inverse --2D --real back.h5 spectrum.h5
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .errors import ConfigurationError, VolfftError
from .io import read_volume, write_volume
from .signal import ProjectionKind, complex_range, fft_volume, prep_volume, proj_volume
from .utils import elapsed_time, now, time_stamp
from .utils.dtype import OUTPUT_DTYPES

logger = logging.getLogger("volfft")

_OUTPUT_FLAGS = (
    ("--both", ProjectionKind.REAL_AND_IMAG, "Complex real and imaginary data (default)."),
    ("--real", ProjectionKind.REAL, "Real component of data."),
    ("--imaginary", ProjectionKind.IMAG, "Imaginary component of data."),
    ("--magnitude", ProjectionKind.MAGNITUDE, "Magnitude of real and imaginary data."),
    ("--magln", ProjectionKind.MAGNITUDE_LN, "ln magnitude of real and imaginary data."),
    ("--mag10", ProjectionKind.MAGNITUDE_LOG10, "log10 magnitude of real and imaginary data."),
    ("--phase", ProjectionKind.PHASE, "Phase of real and imaginary data."),
    ("--power", ProjectionKind.POWER, "Power spectrum."),
)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="volfft",
        description="Fourier transform a volume and write complex or projected spectral outputs.",
    )

    p.add_argument("infile", help="Input volume (.h5/.hdf5), 3D spatial or 4D complex.")
    p.add_argument(
        "outfile",
        nargs="?",
        default=None,
        help="Output for complex real+imag data (same as --both).",
    )

    g = p.add_argument_group("General options")
    g.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    g.add_argument("-v", "--verbose", action="store_true", help="Print out extra information.")
    g.add_argument("--clobber", action="store_true", help="Clobber existing files.")

    g = p.add_argument_group("Outfile options")
    dt = g.add_mutually_exclusive_group()
    for name in OUTPUT_DTYPES:
        dt.add_argument(
            f"--{name}",
            dest="dtype",
            action="store_const",
            const=name,
            help=f"Write out {name} data." + (" (Default)" if name == "float" else ""),
        )
    p.set_defaults(dtype="float")
    sg = g.add_mutually_exclusive_group()
    sg.add_argument("--signed", dest="signed", action="store_true", help="Write signed integer data.")
    sg.add_argument("--unsigned", dest="signed", action="store_false", help="Write unsigned integer data. (Default)")
    p.set_defaults(signed=False)

    g = p.add_argument_group("FFT options")
    rk = g.add_mutually_exclusive_group()
    rk.add_argument("--1D", dest="rank", action="store_const", const=1, help="Do a 1D FFT along x.")
    rk.add_argument("--2D", dest="rank", action="store_const", const=2, help="Do a 2D FFT per slice.")
    rk.add_argument("--3D", dest="rank", action="store_const", const=3, help="Do a 3D FFT (Default).")
    p.set_defaults(rank=3)
    dr = g.add_mutually_exclusive_group()
    dr.add_argument("--forward", dest="inverse", action="store_false", help="Calculate the forward FFT (Default).")
    dr.add_argument("--inverse", dest="inverse", action="store_true", help="Calculate the inverse FFT.")
    p.set_defaults(inverse=False)
    g.add_argument(
        "--centre",
        "--center",
        dest="centre",
        action="store_true",
        help="Re-orient quadrants so the zero frequency is at the centre (even axes only).",
    )
    g.add_argument("--backend", choices=("scipy", "numpy"), default="scipy", help="FFT backend (default: scipy).")
    g.add_argument("--workers", type=int, default=None, help="Worker threads for the scipy backend.")
    g.add_argument(
        "--log-clamp",
        dest="log_clamp",
        choices=("current", "previous"),
        default="current",
        help="Gate for --magln/--mag10 clamping: current voxel magnitude (default) "
        "or the previously written value (legacy mincfft behaviour).",
    )

    g = p.add_argument_group("Output file types")
    for flag, kind, text in _OUTPUT_FLAGS:
        g.add_argument(flag, dest=f"out_{int(kind)}", metavar="FILE", default=None, help=text)

    return p


def _requested_outputs(args: argparse.Namespace) -> dict[ProjectionKind, Path]:
    outputs: dict[ProjectionKind, Path] = {}
    if args.outfile is not None:
        outputs[ProjectionKind.REAL_AND_IMAG] = Path(args.outfile)
    for _, kind, _ in _OUTPUT_FLAGS:
        value = getattr(args, f"out_{int(kind)}")
        if value is not None:
            outputs[kind] = Path(value)
    return dict(sorted(outputs.items()))


def _progress_logger(label: str):
    last = [-1]

    def _report(done: int, total: int) -> None:
        pct = (100 * done) // max(total, 1)
        if pct // 10 > last[0]:
            last[0] = pct // 10
            logger.info("%s: %3d%%", label, pct)

    return _report


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    history = time_stamp([parser.prog, *(sys.argv[1:] if argv is None else argv)])

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stdout,
    )

    in_path = Path(args.infile)
    if not in_path.exists():
        sys.stderr.write(f"{parser.prog}: Couldn't find input file {in_path}.\n")
        return 1

    outputs = _requested_outputs(args)
    if not outputs:
        sys.stderr.write(f"{parser.prog}: You should specify at least one outfile!\n")
        return 1
    if not args.clobber:
        for path in outputs.values():
            if path.exists():
                sys.stderr.write(f"{parser.prog}: File {path} exists, use --clobber to overwrite.\n")
                return 1

    t0 = now()
    try:
        source = read_volume(in_path)
        in_ndims = source.ndim
        data = source if source.is_complex else prep_volume(source)
    except (VolfftError, OSError, ValueError) as e:
        sys.stderr.write(f"Problems reading: {in_path}: {e}\n")
        return 1

    if args.verbose:
        vmin, vmax = data.real_range
        logger.info(" | Input file:     %s", in_path)
        logger.info(" | Input ndims:    %d", in_ndims)
        logger.info(" | min/max:        [%8.3f:%8.3f]", vmin, vmax)
        nz, ny, nx = data.spatial_shape
        first, last = data.voxel_to_world(0, 0, 0), data.voxel_to_world(nz - 1, ny - 1, nx - 1)
        logger.info(" | World extent:   %s -> %s", first, last)
        logger.info(" | Output files:")
        for kind, path in outputs.items():
            logger.info(" |   [%d]:         %-9s => %s", int(kind), kind.label, path)
        logger.info(" | FFT order:      %d", args.rank)

    try:
        fft_volume(
            data,
            inverse=args.inverse,
            rank=args.rank,
            centre=args.centre,
            backend=args.backend,
            workers=args.workers,
            progress=_progress_logger("FFT") if args.verbose else None,
        )
    except ConfigurationError as e:
        sys.stderr.write(f"{parser.prog}: invalid FFT configuration: {e}\n")
        return 1
    except VolfftError as e:
        sys.stderr.write(f"Problems during FFT of: {in_path}: {e}\n")
        return 1

    for kind, path in outputs.items():
        if kind == ProjectionKind.REAL_AND_IMAG:
            complex_range(data)
            vol = data
        else:
            vol = proj_volume(data, kind, log_clamp=args.log_clamp)

        if args.verbose:
            logger.info("Outputting %s (%s) | range: [%g:%g]", kind.label, path, *vol.real_range)

        try:
            write_volume(
                vol,
                path,
                dtype=args.dtype,
                signed=args.signed,
                clobber=args.clobber,
                history=history,
            )
        except (OSError, ValueError) as e:
            sys.stderr.write(f"Problems outputting: {path}: {e}\n")
            return 1

    if args.verbose:
        elapsed_time(t0)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
