from datetime import datetime, timezone

from threadstacks.utils.dates import parse_timestamp, recency_key


def test_parse_z_suffix():
    parsed = parse_timestamp("2025-01-02T10:30:00Z")
    assert parsed == datetime(2025, 1, 2, 10, 30, tzinfo=timezone.utc)


def test_parse_offset_is_normalized_to_utc():
    parsed = parse_timestamp("2025-01-02T12:30:00+02:00")
    assert parsed == datetime(2025, 1, 2, 10, 30, tzinfo=timezone.utc)
    assert parsed.tzinfo == timezone.utc


def test_parse_naive_and_date_only_assume_utc():
    assert parse_timestamp("2025-01-02T10:30:00") == datetime(
        2025, 1, 2, 10, 30, tzinfo=timezone.utc
    )
    assert parse_timestamp("2025-01-02") == datetime(2025, 1, 2, tzinfo=timezone.utc)


def test_parse_invalid_or_missing_returns_none():
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    assert parse_timestamp("2 hours ago") is None


def test_recency_key_orders_and_defaults_to_oldest():
    assert recency_key(None) == float("-inf")
    assert recency_key("garbage") == float("-inf")
    assert recency_key("2025-01-02T00:00:00Z") > recency_key("2025-01-01T00:00:00Z")


def test_missing_date_ranks_below_pre_epoch_date():
    assert recency_key(None) < recency_key("1969-07-20T20:17:00Z")


def test_parse_out_of_range_after_utc_normalization_is_none():
    assert parse_timestamp("9999-12-31T23:00:00-05:00") is None
    assert parse_timestamp("0001-01-01T00:00:00+05:00") is None
    assert recency_key("9999-12-31T23:00:00-05:00") == float("-inf")
