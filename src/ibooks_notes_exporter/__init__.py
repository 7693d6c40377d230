"""iBooks Notes Exporter - Export highlights and notes from Apple Books on macOS."""

__version__ = '0.0.5'

from .database import (
    Annotation,
    Book,
    BookNotFoundError,
    BooksDatabase,
    BookSummary,
    DatabaseOpenError,
    ExporterError,
    QueryError,
)

__all__ = [
    "BooksDatabase", "Annotation", "Book", "BookSummary",
    "ExporterError", "BookNotFoundError", "QueryError", "DatabaseOpenError",
]
