"""Command-line entrypoint for sunfinder."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from datetime import datetime
from math import radians

from sunfinder.config import config_from_env
from sunfinder.contracts import CompassReading, GeoCoordinate, MotionReading
from sunfinder.errors import SunfinderError
from sunfinder.ingest.mock_providers import FixedLocationProvider
from sunfinder.session import Session
from sunfinder.view.readout import build_readout, format_clock


def _parse_iso_datetime(value: str) -> datetime:
    """Parse ISO datetime string; naive values are kept as UTC downstream."""
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid datetime: {value}") from exc


def _add_location_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lat", type=float, required=True)
    parser.add_argument("--lon", type=float, required=True)
    parser.add_argument("--reference", type=_parse_iso_datetime, default=None)


def build_parser() -> argparse.ArgumentParser:
    """Create and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="sunfinder",
        description="Sunfinder command-line interface.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    parser.add_argument("-v", "--verbose", action="store_true")

    subparsers = parser.add_subparsers(dest="command")
    table = subparsers.add_parser(
        "table",
        help="Print the heading table of solar crossings for one location.",
    )
    _add_location_args(table)

    readout = subparsers.add_parser(
        "readout",
        help="Fuse one motion/compass reading and print the readout.",
    )
    _add_location_args(readout)
    readout.add_argument("--beta", type=float, required=True, help="Front-back tilt in degrees.")
    readout.add_argument("--gamma", type=float, required=True, help="Left-right roll in degrees.")
    readout.add_argument("--heading", type=float, required=True, help="Compass true heading.")

    return parser


def _start_session(args: argparse.Namespace) -> Session | None:
    session = Session(config_from_env())
    try:
        coordinate = GeoCoordinate(latitude=args.lat, longitude=args.lon)
        session.start(FixedLocationProvider(coordinate), args.reference)
    except (SunfinderError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return None
    return session


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI application."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "table":
        session = _start_session(args)
        if session is None:
            return 1
        assert session.table is not None
        for heading in session.table.filled_headings():
            slot = session.table[heading]
            assert slot is not None
            print(f"{heading:3d}  {format_clock(slot.time)}  {slot.elevation:6.2f}")
        session.close()
        return 0

    if args.command == "readout":
        session = _start_session(args)
        if session is None:
            return 1
        session.on_motion(MotionReading(beta=radians(args.beta), gamma=radians(args.gamma)))
        update = session.on_compass(CompassReading(true_heading=args.heading))
        assert update is not None
        readout = build_readout(update.estimate, update.position, session.coordinate)
        print(
            f"{readout.compass_point} {readout.heading}  "
            f"sun {readout.crossing_time} {readout.solar_elevation}  "
            f"pitch {readout.pitch}  {readout.location}"
        )
        session.close()
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
