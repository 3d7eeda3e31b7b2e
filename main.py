"""
Voting District KML Generator - Main Entry Point

This application downloads the election geography published by the National
Election Office (settlements, polling districts, voter counts and street
lists) and converts it into one KML document per settlement, with simplified
polling district boundaries, for viewing in tools like Google Earth.

Usage:
    python main.py fetch                         # Mirror the records into fetch/
    python main.py generate                      # Write kml/<settlement>.kml
    python main.py generate --tolerance high     # Finer boundaries
    python main.py generate --settlement Szeged  # Single settlement
    python main.py all                           # Fetch, then generate
"""

import argparse
import sys
import threading
from pathlib import Path

from core.config import (
    COORDINATE_PRECISION, DEFAULT_DENSITY, DENSITY_OPTIONS, DISTRICT_OPACITY,
    FETCH_DIR, KML_DIR, OPACITY_OPTIONS
)
from core.types import GenerationSettings
from downloaders.valasztas import process as fetch_records
from processing.simplify import resolve_tolerance
from workers.generate_worker import worker


def is_error_message(message: str) -> bool:
    """Failure and warning messages start with ``->`` or ``Warning``."""
    text = message.lstrip()
    return text.startswith("->") or text.startswith("Warning")


def make_console_reporter(verbose: bool = True):
    """Create a progress callback that prints messages and the running percentage.

    When not verbose only failures and warnings are printed.
    """
    lock = threading.Lock()
    progress = [0.0]

    def report_progress(weight: float, message=None):
        with lock:
            progress[0] = min(100.0, progress[0] + weight)
            if message and (verbose or is_error_message(message)):
                print(message)
            elif weight and verbose:
                print(f"[{progress[0]:5.1f}%]")

    return report_progress


def tolerance_arg(value: str) -> float:
    try:
        return resolve_tolerance(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Generate per-settlement polling district KML documents')
    parser.add_argument('--fetch-dir', type=Path, default=FETCH_DIR,
                        help=f'Directory of the fetched records (default: {FETCH_DIR})')
    parser.add_argument('--quiet', action='store_true', help='Only print errors and the summary')
    parser.add_argument('--force', action='store_true',
                        help='Fetch or regenerate even when cached output is up to date')

    commands = parser.add_subparsers(dest='command', required=True)
    commands.add_parser('fetch', help='Download the election records')

    generate_options = argparse.ArgumentParser(add_help=False)
    generate_options.add_argument('--output-dir', type=Path, default=KML_DIR,
                                  help=f'Directory for the KML documents (default: {KML_DIR})')
    generate_options.add_argument('--tolerance', type=tolerance_arg, default=DEFAULT_DENSITY,
                                  help=f'Simplification tolerance in degrees or one of '
                                       f'{", ".join(DENSITY_OPTIONS)} (default: {DEFAULT_DENSITY})')
    generate_options.add_argument('--no-simplify', action='store_true', help='Keep boundaries as published')
    generate_options.add_argument('--precision', type=int, default=COORDINATE_PRECISION,
                                  help=f'Decimal digits per coordinate (default: {COORDINATE_PRECISION})')
    generate_options.add_argument('--opacity', choices=OPACITY_OPTIONS, default=DISTRICT_OPACITY,
                                  help=f'Fill opacity in percent (default: {DISTRICT_OPACITY})')
    generate_options.add_argument('--no-outline', action='store_true', help='Leave out the settlement outline')
    generate_options.add_argument('--settlement', action='append', metavar='NAME_OR_TAZ',
                                  help='Only generate this settlement (repeatable)')
    generate_options.add_argument('--workers', type=int, default=1,
                                  help='Number of settlements processed in parallel (default: 1)')

    commands.add_parser('generate', parents=[generate_options], help='Write the KML documents')
    commands.add_parser('all', parents=[generate_options], help='Fetch, then generate')
    return parser


def settings_from_args(args) -> GenerationSettings:
    return GenerationSettings(
        fetch_dir=args.fetch_dir,
        output_dir=args.output_dir,
        tolerance=args.tolerance,
        precision=args.precision,
        simplify=not args.no_simplify,
        include_outline=not args.no_outline,
        opacity=args.opacity,
        settlements=args.settlement,
        workers=max(1, args.workers),
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    report_progress = make_console_reporter(verbose=not args.quiet)

    ok = True
    if args.command in ('fetch', 'all'):
        ok = fetch_records(args.fetch_dir, report_progress, force=args.force)
        if not ok:
            print("Some files could not be fetched.", file=sys.stderr)

    if args.command in ('generate', 'all'):
        succeeded, failed = worker(settings_from_args(args), report_progress, force=args.force)
        ok = ok and failed == 0
        print(f"Generated {succeeded} documents, {failed} failed.")

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
