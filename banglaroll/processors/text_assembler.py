"""
Text Assembler.

Joins the ordered page texts of one document into a single string.
"""

from __future__ import annotations

from typing import Iterable

from ..models import DocumentText


def assemble_pages(pages: Iterable[str]) -> str:
    """
    Concatenate page texts, one line break between pages.

    Line breaks inside a page are kept; blank pages are skipped.
    """
    return "\n".join(
        page.rstrip("\r\n") for page in pages
        if page and page.strip()
    )


def assemble_document(source_file: str, pages: Iterable[str]) -> DocumentText:
    """Build a DocumentText from the page texts of ``source_file``."""
    pages = list(pages)
    return DocumentText(
        source_file=source_file,
        pages=pages,
        text=assemble_pages(pages),
    )
