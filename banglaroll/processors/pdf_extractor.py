"""
PDF text source.

Reads the embedded text layer of each page using PyMuPDF. No rendering
or OCR happens here: image-only pages simply come back empty.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, List, Optional

import fitz  # PyMuPDF

from ..config import ExtractionConfig, get_config
from ..exceptions import DocumentError
from ..logger import get_logger

# Any callable with this contract can stand in for PdfTextSource
TextSource = Callable[[Path], List[str]]

logger = get_logger(__name__)


class PdfTextSource:
    """
    Open a document and return its page texts in order.

    Enforces the per-file size, page and wall-clock ceilings; breaching
    one raises DocumentError for that file only.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or get_config().extraction

    def __call__(self, path: Path) -> List[str]:
        return self.open_document(path)

    def _check_size(self, path: Path) -> None:
        try:
            size = path.stat().st_size
        except OSError as e:
            raise DocumentError(f"Cannot read file: {e}", str(path))

        if size > self.config.max_file_size_bytes:
            raise DocumentError(
                f"File is {size / (1024 * 1024):.1f} MB, over the "
                f"{self.config.max_file_size_mb:g} MB limit",
                str(path),
            )

    def open_document(self, path: Path) -> List[str]:
        """
        Extract page texts from a PDF.

        Args:
            path: PDF file

        Returns:
            One string per page, in page order

        Raises:
            DocumentError: unreadable, encrypted or over a limit
        """
        path = Path(path)
        self._check_size(path)

        try:
            doc = fitz.open(path)
        except Exception as e:
            raise DocumentError(f"Failed to open PDF: {e}", str(path))

        try:
            if doc.needs_pass:
                raise DocumentError("PDF is password protected", str(path))

            total_pages = doc.page_count
            if total_pages > self.config.max_pages:
                raise DocumentError(
                    f"PDF has {total_pages} pages, over the {self.config.max_pages} page limit",
                    str(path),
                )

            logger.debug(f"Reading {total_pages} pages from {path.name}")

            started = time.perf_counter()
            pages: List[str] = []

            for page_index in range(total_pages):
                try:
                    page = doc.load_page(page_index)
                    pages.append(page.get_text("text") or "")
                except Exception as e:
                    raise DocumentError(
                        f"Failed to read page: {e}", str(path), page_number=page_index + 1
                    )

                if time.perf_counter() - started > self.config.timeout_sec:
                    raise DocumentError(
                        f"Extraction exceeded {self.config.timeout_sec:g}s",
                        str(path),
                        page_number=page_index + 1,
                    )

            return pages

        finally:
            doc.close()
