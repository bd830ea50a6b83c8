from datetime import date

from banglaroll.models import RawEntry
from banglaroll.processors.field_extractor import FieldExtractor, clean_field
from banglaroll.processors.repair import repair
from banglaroll.processors.segmenter import RecordSegmenter


def extract(text):
    return FieldExtractor().extract(RawEntry(text=text, source_file="roll.pdf"))


def test_basic_fields():
    result = extract("0001. Name: X ভোটার নং: 123456789012 পিতা: Y")

    assert result.ok
    record = result.record
    assert record.serial_number == "0001"
    assert record.name == "X"
    assert record.voter_id == "123456789012"
    assert record.father_name == "Y"
    assert record.source_file == "roll.pdf"


def test_corrupted_line_end_to_end(corrupted_entry_text):
    entries = RecordSegmenter().segment(repair(corrupted_entry_text))
    assert len(entries) == 1

    record = FieldExtractor().extract(entries[0]).record

    assert record.serial_number == "1001"
    assert record.name == "করিম মিয়া"
    assert record.voter_id == "123456789012"
    assert record.father_name == "রহমান মিয়া"


def test_all_fields():
    result = extract(
        "0006. নাম: সালমা ভোটার নং: 1234567890 পিতা: করিম মাতা: রহিমা "
        "পেশা: গৃহিণী, জন্ম তারিখ: ০৫/১০/১৯৮৫ ঠিকানা: রূপগঞ্জ, নারায়ণগঞ্জ"
    )
    record = result.record

    assert record.name == "সালমা"
    assert record.father_name == "করিম"
    assert record.mother_name == "রহিমা"
    assert record.profession == "গৃহিণী"
    assert record.date_of_birth == date(1985, 10, 5)
    assert record.address == "রূপগঞ্জ, নারায়ণগঞ্জ"


def test_missing_voter_id_rejected():
    result = extract("0002. নাম: করিম পিতা: রহমান")

    assert not result.ok
    assert result.record is None
    assert result.rejection.missing_fields == ("voter_id",)
    assert result.rejection.reason == "missing:voter_id"


def test_missing_name_rejected():
    result = extract("0003. নাম: ভোটার নং: 1234567890")

    assert not result.ok
    assert result.rejection.missing_fields == ("name",)


def test_garbage_never_raises():
    result = extract("")

    assert not result.ok
    assert result.rejection.reason == "missing:name+voter_id"


def test_unlabelled_digit_run_fallback():
    result = extract("0004. নাম: রহিম 1234567890123 পিতা: করিম")

    assert result.record.voter_id == "1234567890123"


def test_short_digit_run_is_not_a_voter_id():
    result = extract("0004. নাম: রহিম 123456789 পিতা: করিম")

    assert not result.ok


def test_bengali_digits_and_alternate_label():
    result = extract("0007. নাম: রহিম ভোটার নম্বর: ১২৩৪৫৬৭৮৯০")

    assert result.record.voter_id == "1234567890"
    assert result.record.name == "রহিম"


def test_english_labels():
    result = extract("0005. Name: Rahim Voter No: 9876543210")

    assert result.record.name == "Rahim"
    assert result.record.voter_id == "9876543210"


def test_corrupted_labels_fixed_per_entry():
    result = extract("0008. নাম: করিম Ïভাটার নং: 1234567890 িপতা: রহমান Ïপশা: কৃষক")

    assert result.record.voter_id == "1234567890"
    assert result.record.father_name == "রহমান"
    assert result.record.profession == "কৃষক"


def test_two_digit_year():
    result = extract("0009. নাম: ক ভোটার নং: 1234567890 জন্ম তারিখ: 05/10/85")

    assert result.record.date_of_birth == date(1985, 10, 5)


def test_invalid_date_leaves_field_empty():
    result = extract("0010. নাম: ক ভোটার নং: 1234567890 জন্ম তারিখ: 31/02/1990")

    assert result.ok
    assert result.record.date_of_birth is None


def test_clean_field():
    assert clean_field("  রহিম\r\nউদ্দিন  Ï ", ("Ï",)) == "রহিম উদ্দিন"
    assert clean_field(None) == ""


def test_visarga_used_as_colon():
    text = repair(
        "0011. নামঃ সালমা ভোটার নংঃ 1234567890 পিতাঃ করিম মাতাঃ রহিমা "
        "পেশাঃ গৃহিণী জন্ম তারিখঃ ০৫/১০/৮৫ ঠিকানাঃ ঢাকা"
    )
    record = FieldExtractor().extract(RawEntry(text=text)).record

    assert record.name == "সালমা"
    assert record.voter_id == "1234567890"
    assert record.father_name == "করিম"
    assert record.mother_name == "রহিমা"
    assert record.profession == "গৃহিণী"
    assert record.date_of_birth == date(1985, 10, 5)
    assert record.address == "ঢাকা"


def test_field_markers_keep_joiners(tables):
    # ZWJ keeps ra + ya-phala from rendering as a reph
    rya = "\u09b0\u200d\u09cd\u09af\u09be\u09ac"

    assert clean_field("\ufeff" + rya + " \u00cf", tables.field_fixes) == rya
    assert clean_field("\u0995\u200c\u09a8", tables.field_fixes) == "\u0995\u200c\u09a8"
