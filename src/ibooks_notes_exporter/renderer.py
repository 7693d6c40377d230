"""
Text rendering for exported highlights and the books table.

Exports are Markdown with inline HTML spans carrying the highlight colors.
"""

from typing import Iterable

from .database import Annotation, Book, BookSummary
from .formatting import get_last_names, truncate_title


# Apple Books highlight styles
HIGHLIGHT_COLORS = {
    1: "#a8e196",  # green
    2: "#a5c3ff",  # blue
    3: "#fde15c",  # yellow
    4: "#ffaabf",  # pink
    5: "#cdbbfb",  # purple
}

ANNOTATION_SEPARATOR = "---\n\n\n"

BOOK_TABLE_HEADER = ("SingleBook ID", "# notes", "Title and Author")
BOOK_TABLE_RIGHT_ALIGNED = (1,)


def style_to_color(style: int) -> str:
    """Map a highlight style to its background color, or "" if unknown."""
    return HIGHLIGHT_COLORS.get(style, "")


def strip_newlines(text: str) -> str:
    return text.replace("\n", "")


def render_book_header(book: Book) -> str:
    """Render the heading that starts a book export."""
    return f"# {book.title} — {book.author}\n\n"


def render_annotation(annotation: Annotation) -> str:
    """
    Render one highlight, its note if it has one, and a separator.

    Newlines are removed from highlight and note text so each stays on a
    single Markdown line.
    """
    color = style_to_color(annotation.style)
    highlight = strip_newlines(annotation.highlight)

    block = f"> <span style='background-color:{color};color:black'>{highlight}</span>\n"

    if annotation.note is not None:
        block += f"\n{strip_newlines(annotation.note)}\n"

    return block + ANNOTATION_SEPARATOR


def book_table_row(book: BookSummary) -> tuple[str, str, str]:
    """Cells for one book: id, highlight count, and "Title (Author)"."""
    title_and_author = f"{truncate_title(book.title)} {get_last_names(book.author)}"
    return (book.id, str(book.annotation_count), title_and_author)


def render_table(
    header: tuple[str, ...],
    rows: list[tuple[str, ...]],
    right_aligned: tuple[int, ...] = (),
) -> str:
    """
    Draw a boxed plain-text table sized to its widest cells.

    Columns whose index is in `right_aligned` are right-aligned, the rest
    left-aligned.
    """
    widths = [len(cell) for cell in header]
    for row in rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def line(cells: tuple[str, ...]) -> str:
        padded = (
            f" {cell:>{width}} " if index in right_aligned else f" {cell:<{width}} "
            for index, (cell, width) in enumerate(zip(cells, widths))
        )
        return "|" + "|".join(padded) + "|"

    lines = [border, line(tuple(cell.upper() for cell in header)), border]
    lines.extend(line(row) for row in rows)
    lines.append(border)
    return "\n".join(lines) + "\n"


def render_book_table(books: Iterable[BookSummary]) -> str:
    """Render the books listing, keeping the order books are given in."""
    rows = [book_table_row(book) for book in books]
    return render_table(BOOK_TABLE_HEADER, rows, BOOK_TABLE_RIGHT_ALIGNED)
