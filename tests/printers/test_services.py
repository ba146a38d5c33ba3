import pytest

from modules.printers.services import (
    CascadeDeleteError,
    delete_printer,
    is_hex_color,
    parse_counter,
)
from store import StoreError


class RecordingStore:
    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    def delete_matching(self, collection, filters):
        self.calls.append(("delete_matching", collection, filters))
        if self.fail_on == "changes":
            raise StoreError("permission denied for table spare_part_changes")
        return 2

    def delete_record(self, collection, ids):
        self.calls.append(("delete_record", collection, ids))
        if self.fail_on == "printer":
            raise StoreError("printer is locked")
        return 1


def test_changes_are_deleted_before_the_printer():
    store = RecordingStore()
    delete_printer(store, 7)
    assert store.calls == [
        ("delete_matching", "spare_part_changes", {"printer_id": 7}),
        ("delete_record", "printers", 7),
    ]


def test_failed_history_delete_leaves_the_printer_alone():
    store = RecordingStore(fail_on="changes")
    with pytest.raises(CascadeDeleteError, match="printer was kept"):
        delete_printer(store, 7)
    assert [c[0] for c in store.calls] == ["delete_matching"]


def test_failed_printer_delete_reports_both_steps():
    store = RecordingStore(fail_on="printer")
    with pytest.raises(CascadeDeleteError, match="history was deleted"):
        delete_printer(store, 7)


def test_parse_counter():
    assert parse_counter(" 1500 ") == 1500
    for bad in ("", "12a", "-3", None, "1.5"):
        with pytest.raises(ValueError):
            parse_counter(bad)


def test_hex_color():
    assert is_hex_color("#3B82F6")
    assert not is_hex_color("3b82f6")
    assert not is_hex_color("#fff")
    assert not is_hex_color(None)
