"""
setstr command line.

    setstr path/to/file.go
    setstr path/to/package/ --type-suffix .Base --type-suffix .Error
"""

import argparse
import logging
import sys
from typing import List, Optional

from setstr.config import settings
from setstr.errors import SetstrError
from setstr.model import suffix_filter
from setstr.pipeline import parse_path
from setstr.savers import FileSaver, StreamSaver

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="setstr",
        description="Generate string setters for protobuf-tagged Go structs.",
    )
    parser.add_argument("path", help="Go source file or package directory")
    parser.add_argument("--suffix", default=None,
                        help="output file suffix (default: %s)" % settings.SUFFIX)
    parser.add_argument("--type-suffix", action="append", dest="type_suffixes", default=None,
                        metavar="SUFFIX",
                        help="only fields whose type ends with SUFFIX (repeatable)")
    parser.add_argument("--stdout", action="store_true",
                        help="print generated code instead of writing files")
    parser.add_argument("--log-level", default=None, type=str.upper, choices=LOG_LEVELS,
                        help="logging level (default: %s)" % settings.LOG_LEVEL)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    level = (args.log_level or settings.LOG_LEVEL).upper()
    if level not in LOG_LEVELS:
        parser.error("invalid log level in settings: %s" % settings.LOG_LEVEL)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    suffixes = args.type_suffixes if args.type_suffixes is not None else settings.TYPE_SUFFIXES
    filter = suffix_filter(*suffixes) if suffixes else None
    suffix = args.suffix if args.suffix is not None else settings.SUFFIX
    saver = StreamSaver() if args.stdout else FileSaver(suffix=suffix)

    try:
        results = parse_path(args.path, filter, saver, suffix)
    except SetstrError as e:
        print(f"setstr: {e}", file=sys.stderr)
        return 1

    if not results:
        logging.getLogger("setstr").info("no tagged struct fields in %s", args.path)
    return 0
