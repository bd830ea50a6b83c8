"""
File and path utility functions.

Common operations for locating and naming source documents
in the electoral roll pipeline.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List


def ensure_dir(path: Path) -> Path:
    """Ensure directory exists, creating if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_upload(directory: Path, index: int, filename: str, data: bytes) -> Path:
    """
    Write uploaded bytes under their original file name.

    Each upload gets its own numbered subfolder, so two uploads with the
    same name never overwrite each other.
    """
    target = ensure_dir(Path(directory) / f"{index:03d}") / Path(filename).name
    target.write_bytes(data)
    return target


def iter_documents(input_dir: Path, extension: str = ".pdf") -> Iterator[Path]:
    """
    Iterate recursively over documents with the given extension.

    Args:
        input_dir: Directory to search
        extension: Document extension, matched case-insensitively

    Yields:
        Paths to documents (sorted by path)
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        return

    extension = extension.lower()
    if not extension.startswith("."):
        extension = "." + extension

    for path in sorted(input_dir.rglob("*")):
        if path.is_file() and path.suffix.lower() == extension:
            yield path


def list_documents(input_dir: Path, extension: str = ".pdf") -> List[Path]:
    """List all documents under a directory (recursive, sorted)."""
    return list(iter_documents(input_dir, extension))


def get_relative_path(path: Path, base: Path) -> str:
    """
    Get path relative to base directory.

    Falls back to the full path when path is outside base.
    """
    try:
        return Path(path).relative_to(base).as_posix()
    except ValueError:
        return str(path)
