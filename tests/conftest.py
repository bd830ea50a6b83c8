import os

# Must be set before banglaroll creates its module-level loggers
os.environ["LOG_TO_FILE"] = "0"
os.environ.pop("RULES_PATH", None)

import pytest

from banglaroll.config import reset_config
from banglaroll.rules import load_rule_tables


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Fresh configuration per test with data under tmp_path."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LOG_TO_FILE", "0")
    monkeypatch.delenv("RULES_PATH", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def tables():
    return load_rule_tables()


@pytest.fixture
def corrupted_entry_text():
    """One voter as it comes out of the broken font mapping."""
    return "１০০１.নাম: করিম িময়া ভোটার নং: ১২৩৪৫৬৭৮৯০১২ িপতা: রহমান িময়া"


@pytest.fixture
def make_pdf():
    """Write a PDF whose pages each hold the given lines in their text layer."""
    import fitz

    def _make(path, lines, pages=1):
        path.parent.mkdir(parents=True, exist_ok=True)
        doc = fitz.open()
        for _ in range(pages):
            page = doc.new_page()
            page.insert_text((72, 72), "\n".join(lines), fontsize=11)
        doc.save(str(path))
        doc.close()
        return path

    return _make
