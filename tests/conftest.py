import logging
import sqlite3
from pathlib import Path

import pytest

from ibooks_notes_exporter import config


LIBRARY_SCHEMA = """
    CREATE TABLE ZBKLIBRARYASSET (
        Z_PK INTEGER PRIMARY KEY,
        ZASSETID VARCHAR,
        ZTITLE VARCHAR,
        ZAUTHOR VARCHAR
    )
"""

ANNOTATION_SCHEMA = """
    CREATE TABLE ZAEANNOTATION (
        Z_PK INTEGER PRIMARY KEY,
        ZANNOTATIONASSETID VARCHAR,
        ZANNOTATIONSELECTEDTEXT VARCHAR,
        ZANNOTATIONNOTE VARCHAR,
        ZANNOTATIONSTYLE INTEGER,
        ZANNOTATIONDELETED INTEGER,
        ZPLLOCATIONRANGESTART INTEGER,
        ZANNOTATIONCREATIONDATE TIMESTAMP
    )
"""

BOOKS = [
    ("BOOK1", "Thinking, Fast and Slow", "Daniel Kahneman"),
    ("BOOK2", "The Pragmatic Programmer: From Journeyman to Master", "Andrew Hunt & David Thomas"),
    ("BOOK3", "Never Opened", "Nobody Reads"),
]

# (asset id, selected text, note, style, deleted, location, created)
ANNOTATIONS = [
    ("BOOK1", "Second\nhighlight", "A note\nacross lines", 1, 0, 20, 50.0),
    ("BOOK1", "First highlight", None, 3, 0, 10, 100.0),
    ("BOOK1", "Deleted highlight", None, 2, 1, 15, 60.0),
    ("BOOK1", "", None, 2, 0, 5, 70.0),
    ("BOOK1", "Odd style", None, 99, 0, 30, 80.0),
    ("BOOK2", "Care about your craft", "", 2, 0, 1, 10.0),
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in (config.ANNOTATION_DB_ENV, config.LIBRARY_DB_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def library_db(tmp_path) -> Path:
    path = tmp_path / "BKLibrary-1-091020131601.sqlite"
    with sqlite3.connect(path) as conn:
        conn.execute(LIBRARY_SCHEMA)
        conn.executemany(
            "INSERT INTO ZBKLIBRARYASSET (ZASSETID, ZTITLE, ZAUTHOR) VALUES (?, ?, ?)",
            BOOKS
        )
    conn.close()
    return path


@pytest.fixture
def annotation_db(tmp_path) -> Path:
    path = tmp_path / "AEAnnotation_v10312011_1727_local.sqlite"
    with sqlite3.connect(path) as conn:
        conn.execute(ANNOTATION_SCHEMA)
        conn.executemany(
            """
            INSERT INTO ZAEANNOTATION (
                ZANNOTATIONASSETID, ZANNOTATIONSELECTEDTEXT, ZANNOTATIONNOTE,
                ZANNOTATIONSTYLE, ZANNOTATIONDELETED, ZPLLOCATIONRANGESTART,
                ZANNOTATIONCREATIONDATE
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            ANNOTATIONS
        )
    conn.close()
    return path


@pytest.fixture
def books_env(monkeypatch, annotation_db, library_db):
    """Point the environment at the test databases."""
    monkeypatch.setenv(config.ANNOTATION_DB_ENV, str(annotation_db))
    monkeypatch.setenv(config.LIBRARY_DB_ENV, str(library_db))
    return annotation_db, library_db


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger("ibooks_notes_exporter").handlers = []


@pytest.fixture
def junk_db(tmp_path) -> Path:
    path = tmp_path / "junk.sqlite"
    path.write_bytes(b"not a sqlite database " * 200)
    return path
