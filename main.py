"""CLI entrypoint: convert a directory of Markdown writeups into the site's JSON feed."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from converter import convert_files, find_source_files, write_feed

_DEFAULT_INPUT_DIR = "./writeups-md"
_DEFAULT_OUTPUT_PATH = "./assets/data/writeups.json"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments, falling back to env-configured defaults."""
    parser = argparse.ArgumentParser(description="Convert Markdown writeups to the blog JSON feed")
    parser.add_argument(
        "input_dir",
        nargs="?",
        default=os.getenv("WRITEUPS_INPUT_DIR", _DEFAULT_INPUT_DIR),
        help="Directory containing .md writeups",
    )
    parser.add_argument(
        "output_file",
        nargs="?",
        default=os.getenv("WRITEUPS_OUTPUT_PATH", _DEFAULT_OUTPUT_PATH),
        help="Path of the JSON feed to write",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and report every file without writing the output feed",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def run(input_dir: Path, output_file: Path, dry_run: bool = False) -> int:
    """Convert one directory and return the process exit status."""
    try:
        files = find_source_files(input_dir)
    except FileNotFoundError as exc:
        logging.error("Error: %s", exc)
        return 1

    if not files:
        logging.warning('No .md files found in "%s"', input_dir)
        return 0

    records = convert_files(files)

    if dry_run:
        logging.info("[dry-run] Would write %s writeup(s) to %s", len(records), output_file)
        return 0

    write_feed(records, output_file)
    logging.info("✓ Converted %s writeup(s)", len(records))
    logging.info("✓ Output: %s", output_file)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Load config, configure logging and run the conversion."""
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(message)s")

    logging.info("Converting Markdown writeups to JSON...")
    sys.exit(run(Path(args.input_dir), Path(args.output_file), dry_run=args.dry_run))


if __name__ == "__main__":
    main()
