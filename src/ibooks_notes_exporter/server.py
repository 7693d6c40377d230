#!/usr/bin/env python3
"""
iBooks Notes Exporter - MCP Server

A Model Context Protocol (MCP) server for reading Apple Books highlights.
Provides read-only access to the list of annotated books and to a book's
exported highlights and notes.

Usage with uvx:
    uvx --from git+https://github.com/USER/ibooks-notes-exporter ibooks-notes-mcp

Add to MCP client settings:
    {
        "mcpServers": {
            "ibooks-notes": {
                "command": "uvx",
                "args": ["--from", "git+https://github.com/USER/ibooks-notes-exporter", "ibooks-notes-mcp"]
            }
        }
    }

Environment variables:
    IBOOKS_ANNOTATION_DB: Path to the AEAnnotation .sqlite file
    IBOOKS_LIBRARY_DB: Path to the BKLibrary .sqlite file
"""

import io
import json
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from ibooks_notes_exporter import BooksDatabase, BookNotFoundError
from ibooks_notes_exporter.cli import export_book
from ibooks_notes_exporter.formatting import get_last_names


logger = logging.getLogger(__name__)

# Initialize server
server = Server("ibooks-notes-exporter")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="list_books",
            description="List Apple Books titles that have highlights or notes. Returns book ID, title, author and highlight count.",
            inputSchema={
                "type": "object",
                "properties": {
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of books to return (default: 100)",
                        "default": 100
                    }
                }
            }
        ),
        Tool(
            name="export_book",
            description="Export all highlights and notes of a book as Markdown, in reading order. Use the book ID from list_books.",
            inputSchema={
                "type": "object",
                "properties": {
                    "book_id": {
                        "type": "string",
                        "description": "The book ID from list_books"
                    },
                    "skip_first_x_notes": {
                        "type": "integer",
                        "description": "Number of leading highlights to leave out (default: 0)",
                        "default": 0
                    }
                },
                "required": ["book_id"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "list_books":
            return await handle_list_books(arguments)
        elif name == "export_book":
            return await handle_export_book(arguments)
        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

    except FileNotFoundError as e:
        return [TextContent(type="text", text=f"Error: {e}")]
    except PermissionError as e:
        return [TextContent(
            type="text",
            text="Permission Error: Cannot access Apple Books database.\n\n"
                 "Please grant Full Disk Access to your terminal:\n"
                 "System Settings → Privacy & Security → Full Disk Access\n\n"
                 f"Details: {e}"
        )]
    except Exception as e:
        logger.exception("Tool %s failed", name)
        return [TextContent(type="text", text=f"Error: {type(e).__name__}: {e}")]


async def handle_list_books(arguments: dict[str, Any]) -> list[TextContent]:
    """List annotated books with their highlight counts."""
    limit = arguments.get("limit", 100)

    books = []
    with BooksDatabase() as db:
        for book in db.list_books():
            if len(books) >= limit:
                break

            books.append({
                "id": book.id,
                "title": book.title,
                "author": book.author,
                "short_author": get_last_names(book.author),
                "annotation_count": book.annotation_count
            })

    result = {
        "count": len(books),
        "books": books
    }

    return [TextContent(type="text", text=json.dumps(result, indent=2))]


async def handle_export_book(arguments: dict[str, Any]) -> list[TextContent]:
    """Export a book's highlights and notes as Markdown text."""
    book_id = arguments.get("book_id")
    skip = arguments.get("skip_first_x_notes", 0)

    if not book_id:
        return [TextContent(type="text", text="Error: book_id is required")]

    out = io.StringIO()
    try:
        with BooksDatabase() as db:
            export_book(db, book_id, skip, out)
    except BookNotFoundError as e:
        return [TextContent(type="text", text=str(e))]

    return [TextContent(type="text", text=out.getvalue())]


async def _main():
    """Run the MCP server (async implementation)."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    """Entry point for uvx ibooks-notes-mcp."""
    import asyncio
    asyncio.run(_main())


if __name__ == "__main__":
    main()
