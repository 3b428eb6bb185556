import argparse
import os
import sys

from pyncw.batch.discovery import iter_ncw_files
from pyncw.batch.runner import ConversionOutcome, convert_all
from pyncw.common.debug_logger import enable_debug_logging


def report(outcome: ConversionOutcome) -> None:
    if outcome.ok:
        print(
            f"wrote {outcome.output_path} "
            f"({outcome.channel_count} ch, {outcome.sample_count} samples)"
        )
    else:
        print(
            f"failed {outcome.input_path}: "
            f"{type(outcome.error).__name__}: {outcome.error}"
        )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="NCW to WAV batch converter")
    parser.add_argument(
        "-i",
        "--input-dir",
        type=str,
        required=True,
        help="Input directory containing .ncw files",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=None,
        help="Output directory (defaults to same as input file)",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Number of files converted in parallel (default: CPU count)",
    )
    parser.add_argument(
        "--debug-log",
        type=str,
        help="Enable debug logging to specified file (e.g., --debug-log pyncw_debug.log)",
    )

    args = parser.parse_args(argv)

    if not os.path.isdir(args.input_dir):
        parser.error(f"input directory does not exist: {args.input_dir}")

    if args.debug_log:
        enable_debug_logging(args.debug_log)
        print(f"Debug logging enabled to: {args.debug_log}")

    if args.output_dir:
        os.makedirs(args.output_dir, exist_ok=True)

    paths = list(iter_ncw_files(args.input_dir))
    if not paths:
        print(f"No .ncw files found in {args.input_dir}")
        return 0

    print(f"Converting {len(paths)} file(s)...")

    outcomes = convert_all(
        paths,
        output_dir=args.output_dir,
        workers=args.jobs,
        debug_log=args.debug_log,
        on_result=report,
    )

    failed = [outcome for outcome in outcomes if not outcome.ok]
    print(f"Converted {len(outcomes) - len(failed)}/{len(outcomes)} files.")
    if failed:
        print(f"{len(failed)} file(s) failed:")
        for outcome in failed:
            print(f"  {outcome.input_path}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
