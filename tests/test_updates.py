from datetime import datetime

import pytest

from core.updates import apply_updates


class Record:
    def __init__(self):
        self.name = "old"
        self.price = 10
        self.updated_at = datetime(2020, 1, 1)


def test_only_changed_fields_are_reported():
    record = Record()

    changes = apply_updates(record, {"name": "new", "price": 10}, ["name", "price"])

    assert changes == {"name": "new"}
    assert record.name == "new"
    assert record.updated_at > datetime(2020, 1, 1)


def test_no_changes_leaves_timestamp():
    record = Record()

    assert apply_updates(record, {}, ["name"]) == {}
    assert record.updated_at == datetime(2020, 1, 1)


def test_disallowed_field_raises():
    with pytest.raises(ValueError, match="price"):
        apply_updates(Record(), {"price": 1}, ["name"])
