#!/usr/bin/env python3
"""
Tracked Reader Demo

Walks through a file with a few reads and seeks, and reports which byte ranges
were touched and which errors occurred.

Usage:
    main.py [path] [options]

Examples:
    # Inspect the default file with 4-byte buckets
    python3 main.py --chunk 4

    # Inspect a compressed object from GCS and print JSON
    python3 main.py gs://splunk-logs/frozen/db/b1/rawdata/journal.zst --format json
"""

import argparse
import logging
import sys

from tracked_reader import DEFAULT_CHUNK, TrackedReader, open_source

logger = logging.getLogger("tracked_reader_demo")


def configure_logging(verbose: bool = False):
    """Set up logging configuration."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    # Silence chatty libraries
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def inspect_buf(buf: bytes):
    logger.debug(f"Read got: {buf!r}")
    logger.debug(f"To string: {buf.decode('utf-8', errors='replace')!r}")


def inspect_reader(r: TrackedReader, chunk: int):
    logger.debug(f"Tracker: {r.tracker!r}")
    logger.debug(f"Report:\n{r.report(chunk)}")


def walk(r: TrackedReader, chunk: int):
    """Read the head, a short field twice and the tail of the stream."""
    buf = bytearray(8)
    n = r.readinto(buf)
    logger.debug(f"Begin = [0], Read 8: {n}")
    inspect_buf(bytes(buf[:n]))
    inspect_reader(r, chunk)

    pos = r.seek(14)
    logger.debug(f"Seek Start(14): {pos}")
    inspect_reader(r, chunk)

    inspect_buf(r.read(2))
    inspect_reader(r, chunk)

    pos = r.seek(-2, 1)
    logger.debug(f"Seek Current(-2): {pos}")

    inspect_buf(r.read(2))
    inspect_reader(r, chunk)

    pos = r.seek(-10, 2)
    logger.debug(f"Seek End(-10): {pos}")

    inspect_buf(r.read(10))
    inspect_reader(r, chunk)


def main():
    parser = argparse.ArgumentParser(
        description="Track and report byte-range accesses on a file"
    )
    parser.add_argument(
        "source",
        nargs="?",
        default="/etc/os-release",
        help="Local path, .zst file or gs://bucket/object (default: /etc/os-release)"
    )
    parser.add_argument(
        "--chunk",
        type=int,
        default=DEFAULT_CHUNK,
        help=f"Report bucket size in bytes (default: {DEFAULT_CHUNK})"
    )
    parser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default="yaml",
        help="Report output format (default: yaml)"
    )
    parser.add_argument(
        "--record-seek-errors",
        action="store_true",
        help="Count failed seeks in the report alongside failed reads"
    )
    parser.add_argument(
        "--project",
        help="GCP Project ID (optional, defaults to environment)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    if args.chunk <= 0:
        parser.error(f"--chunk must be positive, got {args.chunk}")

    logger.info(f"Source: {args.source}")

    try:
        stream = open_source(args.source, project_id=args.project)
        try:
            r = TrackedReader(stream, record_seek_errors=args.record_seek_errors)
        except Exception:
            stream.close()
            raise

        with r:
            try:
                walk(r, args.chunk)
            finally:
                # report whatever was tracked, even when the walk failed
                report = r.report(args.chunk)
                for kind, count in report.errors().items():
                    logger.warning(f"{count} failed operation(s) of kind {kind}")
                rendered = report.to_json() if args.format == "json" else report.render()
                logger.info(f"Report:\n{rendered}")

            t = r.tracker
            if t.sz() != t.pos():
                logger.warning(f"Cursor {t.pos()} did not end at stream size {t.sz()}")

    except Exception as e:
        logger.error(f"Job Failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
