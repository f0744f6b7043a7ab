"""CLI entry point for the oracle exercises.

Usage:
    python scripts/run_exercises.py                                     # every exercise
    python scripts/run_exercises.py --exercises byte_at_a_time cut_and_paste
    python scripts/run_exercises.py --secret-file data/12.txt --seed 7
    python scripts/run_exercises.py --list

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from oraclelab.codec import load_secret
from oraclelab.config import load_settings
from oraclelab.exercises import list_exercises, run_all
from oraclelab.utils.repro import make_run_dir, write_json, write_text


def _cli_progress(message: str, current: int, total: int) -> None:
    """Print progress to stderr."""
    pct = (current / total * 100) if total > 0 else 0
    print(f"  [{current + 1}/{total}] ({pct:.0f}%) {message}", file=sys.stderr)


def main(argv=None) -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Run AES oracle exercises: block cipher checks and chosen-plaintext attacks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python scripts/run_exercises.py --exercises aes_known_answer   # quick check\n"
            "  python scripts/run_exercises.py --vectors 200 --verbose\n"
        ),
    )
    parser.add_argument(
        "--exercises", nargs="+", default=None,
        help="Exercise names to run, in order (default: all)",
    )
    parser.add_argument(
        "--list", action="store_true",
        help="List exercise names and exit",
    )
    parser.add_argument(
        "--seed", type=int, default=settings.global_seed,
        help=f"Seed for keys, prefixes and vectors (default: {settings.global_seed})",
    )
    parser.add_argument(
        "--secret-file", type=str, default=settings.secret_path,
        help="Base64 file with the unknown suffix (default: built-in secret)",
    )
    parser.add_argument(
        "--output-dir", type=str, default=settings.runs_dir,
        help=f"Directory for run results (default: {settings.runs_dir})",
    )
    parser.add_argument(
        "--vectors", type=int, default=1000,
        help="Random vectors for the block roundtrip exercise (default: 1000)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    if args.list:
        for name in list_exercises():
            print(name)
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    unknown = [n for n in (args.exercises or []) if n not in list_exercises()]
    if unknown:
        parser.error(f"unknown exercise(s): {', '.join(unknown)}")

    secret = load_secret(args.secret_file) if args.secret_file else None

    report = run_all(
        settings,
        args.exercises,
        seed=args.seed,
        secret=secret,
        vectors=args.vectors,
        progress_callback=_cli_progress,
    )

    paths = make_run_dir(args.output_dir, f"exercises_seed{args.seed}")
    write_json(paths.results_json, report.to_dict())
    summary = report.to_summary()
    write_text(paths.summary_txt, summary)

    print(summary)
    print(f"\nResults written to {paths.run_dir}")
    return 0 if report.all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
