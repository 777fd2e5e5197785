import math

from quotetonic.storage import LocalStorage


def test_missing_key_reads_none(storage):
    assert storage.read("quotes") is None


def test_write_then_read(storage, home):
    assert storage.write("settings", {"companyName": "Acme", "rate": math.nan}) is True

    value = storage.read("settings")
    assert value["companyName"] == "Acme"
    assert math.isnan(value["rate"])
    assert not list(home.glob("*.tmp"))


def test_corrupt_file_reads_none(storage, home):
    home.mkdir(parents=True)
    storage.path_for("quotes").write_text("[1, 2", encoding="utf-8")
    assert storage.read("quotes") is None


def test_unserializable_value_is_reported(storage):
    assert storage.write("settings", {"bad": object()}) is False
    assert storage.read("settings") is None


def test_failed_write_keeps_previous_value(tmp_path):
    storage = LocalStorage(tmp_path)
    storage.write("quotes", [1])
    assert storage.write("quotes", [object()]) is False
    assert storage.read("quotes") == [1]


def test_remove(storage):
    storage.write("quotes", [])
    storage.remove("quotes")
    storage.remove("quotes")
    assert storage.read("quotes") is None
