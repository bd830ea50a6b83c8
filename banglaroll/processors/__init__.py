"""
Document processors module.

Contains the processing stages of the electoral roll pipeline:
- PdfTextSource: Read the text layer of each PDF page
- CorruptionRepairEngine: Undo the broken Bengali font mapping
- RecordSegmenter: Split repaired text into one chunk per voter
- FieldExtractor: Pull voter fields out of a chunk
- DocumentProcessor: Run one document through all stages
- BatchProcessor: Process a folder of documents concurrently
"""

from .base import BaseProcessor, ProcessingContext
from .pdf_extractor import PdfTextSource, TextSource
from .text_assembler import assemble_pages, assemble_document
from .repair import CorruptionRepairEngine, repair
from .segmenter import RecordSegmenter
from .field_extractor import FieldExtractor, FieldPattern, FIELD_PATTERNS, clean_field
from .batch_processor import BatchProcessor, BatchResult, DocumentProcessor

__all__ = [
    "BaseProcessor",
    "ProcessingContext",
    "PdfTextSource",
    "TextSource",
    "assemble_pages",
    "assemble_document",
    "CorruptionRepairEngine",
    "repair",
    "RecordSegmenter",
    "FieldExtractor",
    "FieldPattern",
    "FIELD_PATTERNS",
    "clean_field",
    "BatchProcessor",
    "BatchResult",
    "DocumentProcessor",
]
