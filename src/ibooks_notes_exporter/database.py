"""
Database access layer for Apple Books.

Reads highlights and notes from the AEAnnotation database, with the BKLibrary
database attached for book titles and authors.
"""

import logging
import sqlite3
from pathlib import Path
from dataclasses import dataclass
from typing import Iterator, Optional

from .config import resolve_database_paths


logger = logging.getLogger(__name__)


LIST_BOOKS_QUERY = """
    SELECT
        book.ZASSETID as id,
        book.ZTITLE as title,
        book.ZAUTHOR as author,
        COUNT(annotation.Z_PK) as annotation_count
    FROM library.ZBKLIBRARYASSET AS book
    JOIN ZAEANNOTATION AS annotation ON annotation.ZANNOTATIONASSETID = book.ZASSETID
    WHERE annotation.ZANNOTATIONDELETED = 0
      AND annotation.ZANNOTATIONSELECTEDTEXT IS NOT NULL
      AND annotation.ZANNOTATIONSELECTEDTEXT != ''
    GROUP BY book.ZASSETID
    ORDER BY book.ZTITLE
"""

GET_BOOK_QUERY = """
    SELECT ZTITLE as title, ZAUTHOR as author
    FROM library.ZBKLIBRARYASSET
    WHERE ZASSETID = ?
"""

# LIMIT -1 means "no limit" in SQLite, which lets OFFSET stand alone
GET_ANNOTATIONS_QUERY = """
    SELECT
        ZANNOTATIONSELECTEDTEXT as highlight,
        ZANNOTATIONNOTE as note,
        ZANNOTATIONSTYLE as style
    FROM ZAEANNOTATION
    WHERE ZANNOTATIONASSETID = ?
      AND ZANNOTATIONDELETED = 0
      AND ZANNOTATIONSELECTEDTEXT IS NOT NULL
      AND ZANNOTATIONSELECTEDTEXT != ''
    ORDER BY ZPLLOCATIONRANGESTART, ZANNOTATIONCREATIONDATE
    LIMIT -1 OFFSET ?
"""


class ExporterError(Exception):
    """Base class for errors raised while reading the Books databases."""


class BookNotFoundError(ExporterError, LookupError):
    """Raised when a book identifier has no metadata row."""

    def __init__(self, book_id: str):
        super().__init__(f"Book with ID {book_id} not found in iBooks")
        self.book_id = book_id


class QueryError(ExporterError):
    """Raised when SQLite fails while running or reading a query."""


class DatabaseOpenError(ExporterError):
    """Raised when a file cannot be opened as a Books database."""


@dataclass(frozen=True)
class BookSummary:
    """A book with at least one highlight, as shown by the books listing."""
    id: str
    title: str
    author: str
    annotation_count: int


@dataclass(frozen=True)
class Book:
    """Title and author of a single book."""
    title: str
    author: str


@dataclass(frozen=True)
class Annotation:
    """A highlight with its optional note."""
    highlight: str
    note: Optional[str]
    style: int = 0


class BooksDatabase:
    """
    Interface to the Apple Books annotation and library databases.

    The connection is opened explicitly and must be closed, preferably by
    using the database as a context manager:

        with BooksDatabase() as db:
            for book in db.list_books():
                ...
    """

    def __init__(self, annotation_db: Optional[Path] = None, library_db: Optional[Path] = None):
        """
        Locate the databases without opening them.

        Args:
            annotation_db: Path to the AEAnnotation .sqlite file
            library_db: Path to the BKLibrary .sqlite file

        Raises:
            FileNotFoundError: If either database cannot be found
        """
        self.annotation_db, self.library_db = resolve_database_paths(annotation_db, library_db)
        self._conn: Optional[sqlite3.Connection] = None

        for path in (self.annotation_db, self.library_db):
            if not path.exists():
                raise FileNotFoundError(
                    f"Books database not found at {path}. "
                    "Make sure Apple Books has been used on this device."
                )

    def open(self) -> "BooksDatabase":
        """
        Open the annotation database and attach the library database.

        Raises:
            PermissionError: If Full Disk Access is not granted
            DatabaseOpenError: If either file is not a readable SQLite database
        """
        if self._conn is not None:
            return self

        conn = None
        try:
            conn = sqlite3.connect(str(self.annotation_db), timeout=10)
            conn.row_factory = sqlite3.Row
            conn.execute("ATTACH DATABASE ? AS library", (str(self.library_db),))
        except (sqlite3.OperationalError, sqlite3.DatabaseError) as e:
            if conn is not None:
                conn.close()
            error_msg = str(e).lower()
            if "unable to open" in error_msg or "authorization denied" in error_msg:
                raise PermissionError(
                    "Cannot access Books database. "
                    "Please grant Full Disk Access to your terminal app in "
                    "System Settings > Privacy & Security > Full Disk Access"
                ) from e
            raise DatabaseOpenError(f"Cannot open Books database: {e}") from e

        logger.debug("Opened %s with %s attached", self.annotation_db, self.library_db)
        self._conn = conn
        return self

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed %s", self.annotation_db)

    def __enter__(self) -> "BooksDatabase":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _rows(self, query: str, params: tuple = ()) -> Iterator[sqlite3.Row]:
        """Run a query and yield its rows, wrapping SQLite failures."""
        if self._conn is None:
            raise QueryError("Database is not open")

        try:
            cursor = self._conn.execute(query, params)
            for row in cursor:
                yield row
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    def _first_row(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        if self._conn is None:
            raise QueryError("Database is not open")

        try:
            cursor = self._conn.execute(query, params)
            try:
                return cursor.fetchone()
            finally:
                cursor.close()
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    def list_books(self) -> Iterator[BookSummary]:
        """Get every book that has at least one highlight."""
        for row in self._rows(LIST_BOOKS_QUERY):
            yield BookSummary(
                id=row['id'],
                title=row['title'] or '',
                author=row['author'] or '',
                annotation_count=row['annotation_count']
            )

    def get_book(self, book_id: str) -> Book:
        """
        Get title and author for a book.

        Raises:
            BookNotFoundError: If no book has this identifier
        """
        row = self._first_row(GET_BOOK_QUERY, (book_id,))
        if row is None:
            raise BookNotFoundError(book_id)

        return Book(title=row['title'] or '', author=row['author'] or '')

    def get_annotations(self, book_id: str, skip: int = 0) -> Iterator[Annotation]:
        """
        Get highlights and notes for a book in reading order.

        Args:
            book_id: The book's asset identifier
            skip: Number of leading annotations to leave out

        Yields:
            Annotation for each highlight
        """
        logger.debug("Reading annotations for %s, skipping %d", book_id, skip)
        for row in self._rows(GET_ANNOTATIONS_QUERY, (book_id, skip)):
            yield Annotation(
                highlight=row['highlight'],
                note=row['note'],
                style=row['style'] if row['style'] is not None else 0
            )
