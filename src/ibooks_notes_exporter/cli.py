#!/usr/bin/env python3
"""
iBooks Notes Exporter

Exports highlights and notes from Apple Books.

Usage:
    ibooks-notes-exporter books                        # List books with highlights
    ibooks-notes-exporter export --book_id=ID          # Export one book as Markdown
    ibooks-notes-exporter export --book_id=ID --skip_first_x_notes=10
    ibooks-notes-exporter version                      # Print version
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from ibooks_notes_exporter import __version__
from ibooks_notes_exporter.database import BooksDatabase, ExporterError
from ibooks_notes_exporter.renderer import (
    render_annotation,
    render_book_header,
    render_book_table,
)


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr so stdout holds only exported text."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("ibooks_notes_exporter")
    root.handlers = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def list_books(db: BooksDatabase, out: Optional[TextIO] = None) -> None:
    """Print a table of books that have highlights."""
    out = out or sys.stdout
    books = list(db.list_books())
    logger.debug("Listing %d books", len(books))
    out.write(render_book_table(books))


def export_book(db: BooksDatabase, book_id: str, skip: int = 0, out: Optional[TextIO] = None) -> None:
    """
    Write one book's highlights and notes to `out`.

    The book is looked up before anything is written, so an unknown id
    produces no output. Errors while reading annotations propagate after
    the blocks already written.
    """
    out = out or sys.stdout
    book = db.get_book(book_id)
    out.write(render_book_header(book))

    for annotation in db.get_annotations(book_id, skip):
        out.write(render_annotation(annotation))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ibooks-notes-exporter",
        description="Export your records from Apple iBooks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--annotations-db',
        type=Path,
        help='Custom path to the AEAnnotation .sqlite file'
    )

    parser.add_argument(
        '--library-db',
        type=Path,
        help='Custom path to the BKLibrary .sqlite file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log database activity to stderr'
    )

    commands = parser.add_subparsers(dest='command', required=True)

    commands.add_parser(
        'books',
        help='Get list of the books with notes and highlights'
    )

    export = commands.add_parser(
        'export',
        help='Export all notes and highlights from book with BOOK_ID'
    )
    export.add_argument(
        '--book_id',
        required=True,
        help='Book ID as shown by the books command'
    )
    export.add_argument(
        '--skip_first_x_notes',
        type=int,
        default=0,
        help='Leave out the first N highlights (default: 0)'
    )

    commands.add_parser('version', help='Print the version')

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if args.command == 'version':
        print(f"v{__version__}")
        return 0

    try:
        db = BooksDatabase(args.annotations_db, args.library_db)
        with db:
            if args.command == 'books':
                list_books(db)
            elif args.command == 'export':
                export_book(db, args.book_id, args.skip_first_x_notes)
    except (FileNotFoundError, PermissionError, ExporterError) as e:
        sys.stdout.flush()
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
