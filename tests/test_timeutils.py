from datetime import datetime, timedelta, timezone

from app.utils.timeutils import as_utc, isoformat_utc, utcnow


def test_utcnow_is_aware_with_millisecond_precision():
    now = utcnow()

    assert now.tzinfo == timezone.utc
    assert now.microsecond % 1000 == 0


def test_as_utc_converts_offsets():
    value = datetime(2025, 1, 1, 15, 0, tzinfo=timezone(timedelta(hours=5)))

    assert as_utc(value) == datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert as_utc(value).utcoffset() == timedelta(0)


def test_as_utc_treats_naive_as_utc():
    assert as_utc(datetime(2025, 1, 1, 10, 0, 0, 123456)) == datetime(
        2025, 1, 1, 10, 0, 0, 123000, tzinfo=timezone.utc
    )
    assert as_utc(None) is None


def test_isoformat_utc_uses_z_suffix():
    value = datetime(2025, 1, 1, 15, 0, tzinfo=timezone(timedelta(hours=5)))

    assert isoformat_utc(value) == '2025-01-01T10:00:00Z'
    assert isoformat_utc(None) is None
