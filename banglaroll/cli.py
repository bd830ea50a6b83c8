# cli.py

import argparse
import json
import logging
import os
import signal
import time
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .config import get_config, reset_config
from .exceptions import ProcessingAbortedError, VoterRollError
from .logger import get_logger, log_timing, set_console_level
from .persistence import VoterStore
from .processors import BatchProcessor
from .utils import ensure_dir

console = Console()
logger = get_logger("banglaroll.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="banglaroll",
        description="Recover voter records from Bengali electoral roll PDFs",
    )

    parser.add_argument("folder", nargs="?", help="Folder of PDFs to process (searched recursively)")
    parser.add_argument("--store", help="Voter store JSON file (default: DATA_DIR/VOTER_STORE_FILE)")
    parser.add_argument("--workers", type=int, help="Parallel files (default: MAX_WORKERS)")
    parser.add_argument("--clear", action="store_true", help="Delete all stored voters first")
    parser.add_argument("--overwrite", action="store_true", help="Replace the store instead of appending")
    parser.add_argument("--search", metavar="TEXT", help="Search stored voters and print the matches")
    parser.add_argument("--report", metavar="PATH", help="Write batch statistics as JSON")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    return parser


def print_voters(records, title: str) -> None:
    table = Table(title=title)
    table.add_column("Serial", justify="right")
    table.add_column("Voter ID")
    table.add_column("Name")
    table.add_column("Father")
    table.add_column("Mother")
    table.add_column("Born")
    table.add_column("Source")

    for r in records:
        table.add_row(
            r.serial_number,
            r.voter_id,
            r.name,
            r.father_name,
            r.mother_name,
            r.date_of_birth.isoformat() if r.date_of_birth else "",
            r.source_file,
        )

    console.print(table)


def run_batch(args, store: VoterStore) -> int:
    folder = Path(args.folder)
    processor = BatchProcessor(max_workers=args.workers, show_progress=True)

    # Ctrl-C stops new files from starting; in-flight files still finish
    def on_interrupt(signum, frame):
        processor.cancel()

    previous_handler = signal.signal(signal.SIGINT, on_interrupt)
    try:
        result = processor.process_folder(folder)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    stats = result.stats

    if args.overwrite:
        saved = store.replace_all(result.records)
    else:
        saved = store.append(result.records)

    console.print(stats.summary_str())
    logger.info(f"💾 Saved {saved} voters to {store.path} (total {store.count()})")

    if stats.cancelled:
        aborted = ProcessingAbortedError(
            items_processed=stats.total_files - stats.count_status("cancelled"),
            items_total=stats.total_files,
        )
        logger.warning(f"⚠️ {aborted}")

    if args.report:
        report_path = Path(args.report)
        ensure_dir(report_path.parent)
        report_path.write_text(
            json.dumps(stats.to_dict(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info(f"📄 Report written to {report_path}")

    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        os.environ["DEBUG"] = "1"
        reset_config()
        set_console_level(logging.DEBUG)

    if not (args.folder or args.search or args.clear):
        parser.error("nothing to do: give a folder, --search or --clear")

    config = get_config()
    start_time = time.perf_counter()

    try:
        store = VoterStore(Path(args.store) if args.store else config.store_path)

        if args.clear:
            store.clear()
            logger.info("🗑️ All stored voters deleted")

        if args.folder:
            logger.info(f"🛡️ Processing {args.folder}")
            run_batch(args, store)

        if args.search:
            matches = store.search(args.search)
            print_voters(matches, f"'{args.search}': {len(matches)} result(s)")

    except VoterRollError as e:
        logger.error(f"❌ {e}")
        return 1

    log_timing(logger, "Completed", time.perf_counter() - start_time)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
