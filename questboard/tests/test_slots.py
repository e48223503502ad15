import pytest

from questboard.slots import (
    SlotKeyError,
    SlotOutsideEventError,
    event_slot_keys,
    is_iso_date,
    make_slot_key,
    parse_slot_key,
    validate_slot_key,
)


@pytest.mark.parametrize(
    "date,hour",
    [("2024-06-01", 0), ("2024-06-01", 9), ("2024-06-01", 14), ("2024-12-31", 23), ("2024-02-29", 10)],
)
def test_round_trip(date, hour):
    assert parse_slot_key(make_slot_key(date, hour)) == (date, hour)


def test_make_slot_key_format():
    assert make_slot_key("2024-06-01", 14) == "2024-06-01-14"
    assert make_slot_key("2024-06-01", 9) == "2024-06-01-9"


def test_keys_are_unique_over_a_grid():
    dates = ["2024-06-01", "2024-06-02", "2024-06-10", "2024-06-11"]
    keys = [make_slot_key(d, h) for d in dates for h in range(24)]
    assert len(set(keys)) == len(keys)


@pytest.mark.parametrize("date,hour", [("2024-06-01", 24), ("2024-06-01", -1), ("2024-6-1", 10), ("2023-02-29", 10)])
def test_make_slot_key_rejects_bad_input(date, hour):
    with pytest.raises(ValueError):
        make_slot_key(date, hour)


@pytest.mark.parametrize(
    "key",
    ["", "2024-06-01", "2024-06-01-", "2024-06-01-24", "2024-06-01-09", "2024-06-01-00",
     "2024-13-01-10", "2024-06-01-1a", "x2024-06-01-10", "2024-06-01-10 ", "2024-06-01T10:00:00Z"],
)
def test_parse_rejects_non_canonical(key):
    with pytest.raises(SlotKeyError) as exc_info:
        parse_slot_key(key)
    assert exc_info.value.key == key


def test_slot_key_error_is_value_error():
    assert issubclass(SlotKeyError, ValueError)


def test_event_slot_keys_order():
    assert event_slot_keys(["2024-06-02", "2024-06-01"], 18, 20) == [
        "2024-06-02-18",
        "2024-06-02-19",
        "2024-06-01-18",
        "2024-06-01-19",
    ]


def test_validate_slot_key():
    dates = ["2024-06-01", "2024-06-02"]
    assert validate_slot_key("2024-06-02-19", dates, 18, 20) == ("2024-06-02", 19)
    with pytest.raises(SlotOutsideEventError):
        validate_slot_key("2024-06-03-19", dates, 18, 20)
    with pytest.raises(SlotOutsideEventError):
        validate_slot_key("2024-06-01-20", dates, 18, 20)
    with pytest.raises(SlotKeyError):
        validate_slot_key("2024-06-01-019", dates, 18, 20)


def test_is_iso_date():
    assert is_iso_date("2024-06-01")
    assert not is_iso_date("2024-06-31")
    assert not is_iso_date("20240601")
