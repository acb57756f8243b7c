"""
PitchMind v1 CLI - Argument parsing and dispatch.

Responsibilities:
- Argument parsing
- Config assembly (JSON file + flag overrides)
- Logging setup
- Printing results/errors
- Exit codes

Forbidden:
- No DSP logic (stages own it)
"""

import argparse
import logging
import sys
from pathlib import Path

from pitchmind import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pitchmind",
        description="PitchMind v1 command-line interface.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    detect_parser = subparsers.add_parser(
        "detect",
        help="Detect the dominant pitch of a WAV file.",
        description=(
            "Detect the dominant pitch of a WAV file.\n\n"
            "Decodes the file, downmixes to mono, windows and transforms the\n"
            "signal, then reports the dominant frequency and closest note."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    detect_parser.add_argument(
        "--input",
        metavar="PATH",
        required=True,
        help="Path to input audio file (WAV).",
    )
    detect_parser.add_argument(
        "--config",
        metavar="PATH",
        help="JSON file of pipeline options; flags below override it.",
    )
    detect_parser.add_argument(
        "--decimate",
        metavar="D",
        type=int,
        help="Keep every D-th sample (no anti-aliasing filter).",
    )
    detect_parser.add_argument(
        "--max-duration",
        metavar="SEC",
        type=float,
        help="Analyze at most SEC seconds after decimation.",
    )
    detect_parser.add_argument(
        "--search-range",
        metavar="R",
        type=float,
        help="Fraction of spectrum bins searched for the peak, in (0, 1].",
    )
    detect_parser.add_argument(
        "--no-window",
        action="store_true",
        help="Skip the Hann window.",
    )
    detect_parser.add_argument(
        "--exact-length",
        action="store_true",
        help="Transform at the exact signal length instead of the next power of two.",
    )
    detect_parser.add_argument(
        "--reference-hz",
        metavar="HZ",
        type=float,
        help="Frequency of A4 (default: 440.0).",
    )
    detect_parser.add_argument(
        "--min-hz",
        metavar="HZ",
        type=float,
        help="Lowest frequency mapped to a note (default: 20.0).",
    )
    detect_parser.add_argument(
        "--max-hz",
        metavar="HZ",
        type=float,
        help="Highest frequency mapped to a note (default: 4000.0).",
    )
    detect_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text).",
    )
    detect_parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log stage diagnostics to stderr (-v INFO, -vv DEBUG).",
    )

    return parser


def configure_logging(verbosity: int) -> None:
    """Route library logs to stderr at the requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def cmd_detect(args: argparse.Namespace) -> int:
    """
    Handle the 'detect' subcommand.

    Returns exit code.
    """
    from pitchmind.config import ConfigError, PipelineConfig, load_config
    from pitchmind.contracts import ValidationError
    from pitchmind.pipeline import detect_pitch
    from pitchmind.report import render_text, result_to_dict
    from pitchmind.stages.base import StageFailure
    from pitchmind.utils import serialize_json

    configure_logging(args.verbose)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1
    if not input_path.is_file():
        print(f"Error: Input path is not a file: {input_path}", file=sys.stderr)
        return 1

    try:
        config = load_config(Path(args.config)) if args.config else PipelineConfig()
        config = config.with_overrides(
            decimation_factor=args.decimate,
            max_duration_sec=args.max_duration,
            search_range=args.search_range,
            apply_window=False if args.no_window else None,
            pad_to_power_of_two=False if args.exact_length else None,
            reference_hz=args.reference_hz,
            min_hz=args.min_hz,
            max_hz=args.max_hz,
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: Cannot read config: {e}", file=sys.stderr)
        return 1

    try:
        result = detect_pitch(input_path, config=config)
    except (StageFailure, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except RuntimeError as e:
        # soundfile.LibsndfileError derives from RuntimeError
        print(f"Error: Cannot decode {input_path}: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        sys.stdout.write(serialize_json(result_to_dict(result)))
    else:
        for line in render_text(result):
            print(line)
    return 0


def main() -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "detect":
        exit_code = cmd_detect(args)
        sys.exit(exit_code)
