"""
Batch processor.

Runs every document under a folder through the pipeline:

    text source -> assemble -> repair -> segment -> extract

Documents are independent, so they are processed in parallel on a bounded
thread pool. Every failure is contained in the file it came from and
recorded in that file's statistics; the batch itself never fails because
of one bad document.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .base import BaseProcessor, ProcessingContext
from .field_extractor import FieldExtractor
from .pdf_extractor import PdfTextSource, TextSource
from .repair import CorruptionRepairEngine
from .segmenter import RecordSegmenter
from .text_assembler import assemble_document
from ..config import Config, get_config
from ..exceptions import DocumentError, EmptyTextError
from ..logger import get_logger, log_progress
from ..models import (
    BatchStats,
    FileStats,
    VoterRecord,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_EMPTY_TEXT,
    STATUS_NO_RECORDS,
)
from ..progress import get_progress
from ..rules import DEFAULT_RULES_PATH, RuleTables, load_rule_tables
from ..utils import get_relative_path, list_documents, timed_operation

logger = get_logger(__name__)


@dataclass
class BatchResult:
    """Merged records of a run plus per-file and aggregate statistics."""
    records: List[VoterRecord] = field(default_factory=list)
    file_stats: Dict[str, FileStats] = field(default_factory=dict)
    stats: BatchStats = field(default_factory=BatchStats)

    @property
    def failed_files(self) -> List[str]:
        return self.stats.failed_files


class DocumentProcessor:
    """
    Process a single document into voter records.

    Thread-safe: it only reads the shared rule tables.
    """

    def __init__(
        self,
        text_source: Optional[TextSource] = None,
        tables: Optional[RuleTables] = None,
        config: Optional[Config] = None,
    ):
        config = config or get_config()
        tables = tables or load_rule_tables(config.rules.path or DEFAULT_RULES_PATH)

        self.text_source = text_source or PdfTextSource(config.extraction)
        self.engine = CorruptionRepairEngine(tables)
        self.segmenter = RecordSegmenter()
        self.extractor = FieldExtractor(tables)

    def process(self, path: Path, source_file: str = "") -> Tuple[List[VoterRecord], FileStats]:
        """
        Extract the voters of one document.

        Never raises: failures are classified into the returned FileStats.

        Returns:
            (records in document order, file statistics)
        """
        path = Path(path)
        source_file = source_file or path.name
        stats = FileStats(source_file=source_file)
        records: List[VoterRecord] = []
        started = time.perf_counter()

        try:
            pages = self.text_source(path)
            document = assemble_document(source_file, pages)
            stats.pages = document.page_count
            stats.chars = document.char_count

            if document.is_empty:
                raise EmptyTextError(pdf_path=str(path), pages=document.page_count)

            with timed_operation(f"{source_file} repair", logger):
                clean_text = self.engine.repair(document.text)
            entries = self.segmenter.segment(clean_text, source_file)
            stats.segments = len(entries)

            records, rejections = self.extractor.extract_all(entries)
            for rejection in rejections:
                stats.add_rejection(rejection.reason)

            stats.extracted = len(records)

            if records:
                stats.status = STATUS_COMPLETED
            else:
                stats.status = STATUS_NO_RECORDS
                stats.error = (
                    f"No voter records in {stats.chars} chars of text "
                    f"({stats.segments} segments, {stats.rejected} rejected)"
                )
                logger.warning(f"{source_file}: text found but no records extracted, check parsing rules")

        except EmptyTextError as e:
            stats.fail(e, STATUS_EMPTY_TEXT)
            logger.warning(f"{source_file}: no text layer ({stats.pages} pages)")

        except DocumentError as e:
            stats.fail(e)
            logger.error(f"{source_file}: {e}")

        except Exception as e:
            stats.fail(e)
            logger.error(f"{source_file}: unexpected {type(e).__name__}: {e}", exc_info=get_config().debug)

        finally:
            stats.duration_sec = time.perf_counter() - started

        if stats.status != STATUS_COMPLETED:
            records = []

        logger.debug(
            f"{source_file}: {stats.status} pages={stats.pages} segments={stats.segments} "
            f"extracted={stats.extracted} rejected={stats.rejected}"
        )
        return records, stats


class BatchProcessor(BaseProcessor):
    """
    Process all documents in a folder concurrently.

    Usage:
        processor = BatchProcessor()
        result = processor.process_folder(Path("rolls"))
        print(result.stats.summary_str())
    """

    name = "BatchProcessor"

    def __init__(
        self,
        config: Optional[Config] = None,
        text_source: Optional[TextSource] = None,
        tables: Optional[RuleTables] = None,
        max_workers: Optional[int] = None,
        show_progress: bool = False,
    ):
        config = config or get_config()
        super().__init__(ProcessingContext(config=config))
        self.document_processor = DocumentProcessor(text_source, tables, config)
        self.max_workers = max(1, max_workers or config.extraction.max_workers)
        self.show_progress = show_progress
        self.result = BatchResult()

    def cancel(self) -> None:
        """Stop starting new files; files already in flight finish."""
        if not self.context.cancel_event.is_set():
            self.log_warning("Cancellation requested, finishing in-flight files")
        self.context.cancel_event.set()

    def _process_one(self, path: Path, source_file: str) -> Tuple[List[VoterRecord], FileStats]:
        if self.context.cancelled:
            return [], FileStats(source_file=source_file, status=STATUS_CANCELLED)
        return self.document_processor.process(path, source_file)

    def _run(
        self,
        paths: List[Path],
        base: Path,
        names: Optional[Dict[Path, str]] = None,
    ) -> BatchResult:
        context = self.context
        context.stats = BatchStats(folder=str(base))
        context.stats.start()
        context.total_files = len(paths)
        context.files_processed = 0
        timer_start = time.perf_counter()

        if names is None:
            names = {path: get_relative_path(path, base) for path in paths}
        per_file: Dict[Path, List[VoterRecord]] = {}

        progress = get_progress(transient=True) if self.show_progress and paths else None
        task_id = None
        if progress:
            progress.start()
            task_id = progress.add_task("Extracting", total=len(paths), voters=0)

        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {
                    executor.submit(self._process_one, path, names[path]): path
                    for path in paths
                }

                for future in as_completed(futures):
                    records, file_stats = future.result()
                    per_file[futures[future]] = records
                    context.stats.add(file_stats)
                    context.files_processed += 1

                    if progress:
                        progress.update(task_id, advance=1, voters=context.stats.total_extracted)
                    elif len(paths) > 1:
                        log_progress(self.logger, context.files_processed, len(paths), file_stats.source_file)
        finally:
            if progress:
                progress.stop()

        # Deterministic merge regardless of completion order
        records: List[VoterRecord] = []
        for path in sorted(per_file, key=lambda p: (names[p], str(p))):
            records.extend(per_file[path])

        context.stats.cancelled = context.cancelled
        context.stats.total_time_sec = time.perf_counter() - timer_start
        context.stats.complete()

        return BatchResult(
            records=records,
            file_stats=dict(context.stats.files),
            stats=context.stats,
        )

    def process(self) -> bool:
        folder = self.context.folder
        paths = list_documents(folder, self.config.extraction.document_extension)
        self.log_info(f"Found {len(paths)} documents", folder=str(folder), workers=self.max_workers)

        self.result = self._run(paths, folder)

        stats = self.result.stats
        self.log_info(
            f"Extracted {stats.total_extracted} voters from {stats.total_files} files",
            failed=len(stats.failed_files),
            rejected=stats.total_rejected,
        )
        return True

    def validate(self) -> bool:
        folder = self.context.folder
        if folder is None or not folder.is_dir():
            self.log_error(f"Input folder not found: {folder}")
            return False
        return True

    def process_folder(self, folder: Path) -> BatchResult:
        """
        Process every document under a folder (recursively).

        Args:
            folder: Directory containing documents

        Returns:
            BatchResult; records are merged in sorted file order

        Raises:
            DocumentError: folder does not exist
        """
        folder = Path(folder)
        self.context.folder = folder
        self.result = BatchResult(stats=BatchStats(folder=str(folder)))

        if not self.validate():
            raise DocumentError("Input folder not found", str(folder))

        self.run()
        return self.result

    def process_files(self, paths: List[Path]) -> BatchResult:
        """
        Process individual documents, e.g. saved uploads.

        Records take each document's own file name as ``source_file``,
        whatever folder it was saved in. A repeated name gets a ``(n)``
        suffix so each document keeps its own statistics.
        """
        paths = [Path(path) for path in paths]
        base = paths[0].parent if paths else Path(".")
        self.context.folder = base

        names: Dict[Path, str] = {}
        seen: Dict[str, int] = {}
        for path in paths:
            count = seen.get(path.name, 0) + 1
            seen[path.name] = count
            names[path] = path.name if count == 1 else f"{path.stem} ({count}){path.suffix}"

        self.result = self._run(paths, base, names)
        return self.result

    def process_file(self, path: Path) -> BatchResult:
        """Process a single document (e.g. an uploaded file)."""
        return self.process_files([path])
