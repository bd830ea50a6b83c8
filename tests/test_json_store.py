import json
from datetime import date

import pytest

from banglaroll.exceptions import DataPersistenceError
from banglaroll.models import VoterRecord
from banglaroll.persistence import VoterStore


@pytest.fixture
def store(tmp_path):
    return VoterStore(tmp_path / "voters.json")


@pytest.fixture
def voters():
    return [
        VoterRecord(serial_number="0003", voter_id="5678000001", name="সালমা"),
        VoterRecord(serial_number="0001", voter_id="1234567890", name="করিম", father_name="রহমান"),
        VoterRecord(
            serial_number="0002",
            voter_id="9876545678",
            name="Rahim",
            mother_name="Salma",
            date_of_birth=date(1985, 10, 5),
        ),
    ]


def test_missing_file_is_empty(store):
    assert store.all() == []
    assert store.count() == 0


def test_append_persists(store, voters, tmp_path):
    assert store.append(voters) == 3

    reopened = VoterStore(tmp_path / "voters.json")
    loaded = reopened.all()

    assert [v.voter_id for v in loaded] == ["5678000001", "1234567890", "9876545678"]
    assert loaded[2].date_of_birth == date(1985, 10, 5)
    assert loaded[1].father_name == "রহমান"


def test_append_keeps_existing(store, voters):
    store.append(voters[:1])
    store.append(voters[1:])

    assert store.count() == 3


def test_file_is_plain_json_array(store, voters, tmp_path):
    store.append(voters)
    data = json.loads((tmp_path / "voters.json").read_text(encoding="utf-8"))

    assert isinstance(data, list)
    assert data[2]["date_of_birth"] == "1985-10-05"
    assert data[0]["date_of_birth"] is None


def test_no_temp_files_left(store, voters, tmp_path):
    store.append(voters)

    assert list(tmp_path.glob("*.tmp")) == []


def test_replace_all_and_clear(store, voters):
    store.append(voters)
    store.replace_all(voters[:1])
    assert [v.name for v in store.all()] == ["সালমা"]

    store.clear()
    assert store.all() == []


def test_find(store, voters):
    store.append(voters)

    assert [v.name for v in store.find(lambda v: v.father_name == "রহমান")] == ["করিম"]


def test_search_voter_id_suffix(store, voters):
    store.append(voters)

    assert [v.name for v in store.search("5678")] == ["Rahim"]
    assert [v.name for v in store.search("৫৬৭৮")] == ["Rahim"]


def test_search_voter_id_substring(store, voters):
    store.append(voters)

    assert [v.name for v in store.search("567800")] == ["সালমা"]
    assert [v.name for v in store.search("456")] == ["করিম", "Rahim"]


def test_search_names_case_insensitive(store, voters):
    store.append(voters)

    assert [v.name for v in store.search("rahim")] == ["Rahim"]
    assert [v.name for v in store.search("SALMA")] == ["Rahim"]
    assert [v.name for v in store.search("রহমান")] == ["করিম"]


def test_empty_search_returns_all_in_serial_order(store, voters):
    store.append(voters)

    assert [v.serial_number for v in store.search("")] == ["0001", "0002", "0003"]
    assert [v.serial_number for v in store.search("   ")] == ["0001", "0002", "0003"]


def test_paging(store):
    store.append(
        VoterRecord(serial_number=f"{i:04d}", voter_id=f"10000000{i:02d}", name=f"v{i}")
        for i in range(1, 26)
    )

    page = store.page(2, 10)
    assert [v.serial_number for v in page.items] == [f"{i:04d}" for i in range(11, 21)]
    assert page.total_count == 25
    assert page.total_pages == 3
    assert page.has_previous and page.has_next

    last = store.page(3, 10)
    assert len(last.items) == 5
    assert not last.has_next

    assert store.page(0, 10).page == 1
    assert store.page(1, 10, search_text="v2").total_count == 7


def test_corrupted_store_raises(tmp_path):
    path = tmp_path / "voters.json"
    path.write_text("{broken", encoding="utf-8")

    with pytest.raises(DataPersistenceError):
        VoterStore(path).all()


def test_non_list_store_raises(tmp_path):
    path = tmp_path / "voters.json"
    path.write_text('{"voters": []}', encoding="utf-8")

    with pytest.raises(DataPersistenceError):
        VoterStore(path).all()


def test_default_path_from_config(tmp_path):
    store = VoterStore()

    assert store.path == tmp_path / "data" / "voters.json"
