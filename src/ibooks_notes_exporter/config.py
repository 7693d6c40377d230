"""
Configuration for the iBooks notes exporter.

Locates the Apple Books databases from command-line paths, environment
variables or the default Apple Books container.
"""

import os
import logging
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

BOOKS_CONTAINER = Path.home() / "Library/Containers/com.apple.iBooksX/Data/Documents"
DEFAULT_ANNOTATION_DIR = BOOKS_CONTAINER / "AEAnnotation"
DEFAULT_LIBRARY_DIR = BOOKS_CONTAINER / "BKLibrary"

ANNOTATION_DB_ENV = "IBOOKS_ANNOTATION_DB"
LIBRARY_DB_ENV = "IBOOKS_LIBRARY_DB"


def find_database(directory: Path) -> Optional[Path]:
    """Return the first .sqlite file in a Books container directory."""
    if not directory.is_dir():
        return None
    candidates = sorted(directory.glob("*.sqlite"))
    return candidates[0] if candidates else None


def _resolve(explicit: Optional[Path], env_var: str, directory: Path, label: str) -> Path:
    if explicit is not None:
        return Path(explicit)

    value = os.environ.get(env_var, "").strip()
    if value:
        return Path(value).expanduser()

    found = find_database(directory)
    if found is None:
        raise FileNotFoundError(
            f"{label} database not found in {directory}. "
            f"Make sure Apple Books has been used on this device or set {env_var}."
        )
    return found


def resolve_database_paths(
    annotation_db: Optional[Path] = None,
    library_db: Optional[Path] = None,
) -> tuple[Path, Path]:
    """
    Work out where the annotation and library databases live.

    Explicit arguments win over environment variables, which win over the
    default Apple Books container.

    Raises:
        FileNotFoundError: If a database cannot be located
    """
    annotation_path = _resolve(annotation_db, ANNOTATION_DB_ENV, DEFAULT_ANNOTATION_DIR, "Annotation")
    library_path = _resolve(library_db, LIBRARY_DB_ENV, DEFAULT_LIBRARY_DIR, "Library")
    logger.debug("Using annotation db %s and library db %s", annotation_path, library_path)
    return annotation_path, library_path

