from pathlib import Path

import pytest

from banglaroll.config import Config, ExtractionConfig
from banglaroll.exceptions import DocumentError
from banglaroll.processors import BatchProcessor, DocumentProcessor, PdfTextSource
from banglaroll.utils import save_upload

GOOD_LINES = [
    "0001. Name: Karim Voter No: 123456789012",
    "0002. Name: Rahim Voter No: 123456789013",
]


def touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"%PDF-stub")
    return path


def fake_source(pages_by_name):
    def source(path):
        pages = pages_by_name[path.name]
        if isinstance(pages, Exception):
            raise pages
        return pages
    return source


@pytest.mark.pdf
def test_good_and_zero_byte_documents(tmp_path, make_pdf):
    make_pdf(tmp_path / "good.pdf", GOOD_LINES)
    (tmp_path / "broken.pdf").write_bytes(b"")

    result = BatchProcessor(max_workers=2).process_folder(tmp_path)

    assert [r.name for r in result.records] == ["Karim", "Rahim"]
    assert [r.voter_id for r in result.records] == ["123456789012", "123456789013"]
    assert all(r.source_file == "good.pdf" for r in result.records)

    assert result.file_stats["good.pdf"].status == "completed"
    assert result.file_stats["good.pdf"].extracted == 2
    assert result.file_stats["broken.pdf"].status == "failed"
    assert result.file_stats["broken.pdf"].error_type == "DocumentError"
    assert result.failed_files == ["broken.pdf"]


@pytest.mark.pdf
def test_pdf_text_source_reads_pages(tmp_path, make_pdf):
    path = make_pdf(tmp_path / "good.pdf", GOOD_LINES)

    pages = PdfTextSource().open_document(path)

    assert len(pages) == 1
    assert "Karim" in pages[0]


@pytest.mark.pdf
def test_size_ceiling(tmp_path, make_pdf):
    path = make_pdf(tmp_path / "good.pdf", GOOD_LINES)

    with pytest.raises(DocumentError):
        PdfTextSource(ExtractionConfig(max_file_size_mb=0.0001)).open_document(path)


@pytest.mark.pdf
def test_page_ceiling(tmp_path, make_pdf):
    path = make_pdf(tmp_path / "good.pdf", GOOD_LINES)

    with pytest.raises(DocumentError):
        PdfTextSource(ExtractionConfig(max_pages=0)).open_document(path)


@pytest.mark.pdf
def test_time_budget(tmp_path, make_pdf):
    path = make_pdf(tmp_path / "long.pdf", GOOD_LINES, pages=3)

    with pytest.raises(DocumentError):
        PdfTextSource(ExtractionConfig(timeout_sec=0)).open_document(path)

    config = Config(extraction=ExtractionConfig(timeout_sec=0))
    result = BatchProcessor(config=config).process_folder(tmp_path)

    assert result.records == []
    assert result.file_stats["long.pdf"].status == "failed"
    assert result.file_stats["long.pdf"].error_type == "DocumentError"


def test_file_outcomes_classified(tmp_path):
    for name in ("a.pdf", "empty.pdf", "header.pdf", "crash.pdf"):
        touch(tmp_path / name)

    source = fake_source({
        "a.pdf": ["0001. নাম: করিম ভোটার নং: 1234567890"],
        "empty.pdf": ["", "   "],
        "header.pdf": ["চূড়ান্ত ভোটার তালিকা, কোনো ভোটার নেই"],
        "crash.pdf": RuntimeError("boom"),
    })
    result = BatchProcessor(text_source=source).process_folder(tmp_path)

    assert len(result.records) == 1
    assert result.file_stats["a.pdf"].status == "completed"
    assert result.file_stats["empty.pdf"].status == "empty_text"
    assert result.file_stats["empty.pdf"].pages == 2
    assert result.file_stats["header.pdf"].status == "no_records"
    assert result.file_stats["crash.pdf"].status == "failed"
    assert result.file_stats["crash.pdf"].error_type == "RuntimeError"

    counts = result.stats.to_dict()["counts"]
    assert counts["files"] == 4
    assert counts["failed"] == 1
    assert counts["extracted"] == 1


def test_rejections_counted(tmp_path):
    touch(tmp_path / "a.pdf")
    source = fake_source({
        "a.pdf": ["0001. নাম: করিম ভোটার নং: 1234567890 0002. নাম: রহিম পিতা: করিম"],
    })

    stats = BatchProcessor(text_source=source).process_folder(tmp_path).file_stats["a.pdf"]

    assert stats.segments == 2
    assert stats.extracted == 1
    assert stats.rejected == 1
    assert stats.rejection_reasons["missing:voter_id"] == 1


def test_records_merged_in_sorted_file_order(tmp_path):
    for name in ("b.pdf", "a.pdf", "sub/c.pdf"):
        touch(tmp_path / name)
    touch(tmp_path / "notes.txt")

    source = fake_source({
        "a.pdf": ["0001. নাম: ক ভোটার নং: 1000000001"],
        "b.pdf": ["0001. নাম: খ ভোটার নং: 1000000002"],
        "c.pdf": ["0001. নাম: গ ভোটার নং: 1000000003"],
    })
    result = BatchProcessor(text_source=source, max_workers=3).process_folder(tmp_path)

    assert [r.source_file for r in result.records] == ["a.pdf", "b.pdf", "sub/c.pdf"]
    assert sorted(result.file_stats) == ["a.pdf", "b.pdf", "sub/c.pdf"]


def test_page_texts_joined_across_pages(tmp_path):
    touch(tmp_path / "a.pdf")
    source = fake_source({
        "a.pdf": ["0001. নাম: করিম ভোটার", "নং: 1234567890"],
    })

    result = BatchProcessor(text_source=source).process_folder(tmp_path)

    assert result.records[0].voter_id == "1234567890"


def test_cancel_before_start(tmp_path):
    touch(tmp_path / "a.pdf")
    touch(tmp_path / "b.pdf")
    source = fake_source({"a.pdf": ["0001. নাম: ক ভোটার নং: 1000000001"]})

    processor = BatchProcessor(text_source=source)
    processor.cancel()
    result = processor.process_folder(tmp_path)

    assert result.records == []
    assert result.stats.cancelled
    assert result.stats.count_status("cancelled") == 2


def test_missing_folder(tmp_path):
    with pytest.raises(DocumentError):
        BatchProcessor(text_source=fake_source({})).process_folder(tmp_path / "nope")


def test_process_file(tmp_path):
    path = touch(tmp_path / "upload.pdf")
    source = fake_source({"upload.pdf": ["0001. নাম: ক ভোটার নং: 1000000001"]})

    result = BatchProcessor(text_source=source).process_file(path)

    assert len(result.records) == 1
    assert result.records[0].source_file == "upload.pdf"


def test_document_processor_never_raises(tmp_path):
    processor = DocumentProcessor(text_source=fake_source({"x.pdf": ValueError("bad")}))

    records, stats = processor.process(tmp_path / "x.pdf")

    assert records == []
    assert stats.status == "failed"
    assert stats.error == "bad"


def test_uploads_keep_original_names(tmp_path):
    name = "ভোটার তালিকা রূপগঞ্জ.pdf"
    paths = [
        save_upload(tmp_path, 0, name, b"%PDF-stub"),
        save_upload(tmp_path, 1, "roll.pdf", b"%PDF-stub"),
    ]
    source = fake_source({
        name: ["0001. নাম: ক ভোটার নং: 1000000001"],
        "roll.pdf": ["0001. নাম: খ ভোটার নং: 1000000002"],
    })

    result = BatchProcessor(text_source=source).process_files(paths)

    assert paths[0] == tmp_path / "000" / name
    assert [r.source_file for r in result.records] == ["roll.pdf", name]
    assert sorted(result.file_stats) == ["roll.pdf", name]


def test_same_name_uploads_do_not_collide(tmp_path):
    first = save_upload(tmp_path, 0, "roll.pdf", b"one")
    second = save_upload(tmp_path, 1, "roll.pdf", b"two")

    assert first != second
    assert first.read_bytes() == b"one"
    assert second.read_bytes() == b"two"


def test_same_name_uploads_keep_separate_stats(tmp_path):
    paths = [
        save_upload(tmp_path, 0, "roll.pdf", b"%PDF-stub"),
        save_upload(tmp_path, 1, "roll.pdf", b"%PDF-stub"),
    ]
    source = fake_source({"roll.pdf": ["0001. নাম: ক ভোটার নং: 1000000001"]})

    result = BatchProcessor(text_source=source).process_files(paths)

    assert sorted(result.file_stats) == ["roll (2).pdf", "roll.pdf"]
    assert result.stats.total_files == 2
    assert [r.source_file for r in result.records] == ["roll (2).pdf", "roll.pdf"]
