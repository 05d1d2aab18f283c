from datetime import datetime, timedelta, timezone

from courtqueue.services.timekeeping import (
    as_utc,
    elapsed_seconds,
    is_expired,
    remaining_seconds,
)

START = datetime(2026, 5, 1, 18, 0, 0, tzinfo=timezone.utc)


def test_no_timer_means_no_remaining_time():
    assert remaining_seconds(None, START, 900) is None
    assert not is_expired(None, START, 900)


def test_remaining_counts_down_in_whole_seconds():
    assert remaining_seconds(START, START, 900) == 900
    assert remaining_seconds(START, START + timedelta(minutes=3), 900) == 720
    # Partial seconds are not yet elapsed
    assert remaining_seconds(START, START + timedelta(seconds=899, milliseconds=600), 900) == 1


def test_remaining_floors_at_zero():
    assert remaining_seconds(START, START + timedelta(seconds=900), 900) == 0
    assert remaining_seconds(START, START + timedelta(hours=2), 900) == 0
    assert is_expired(START, START + timedelta(seconds=900), 900)
    assert not is_expired(START, START + timedelta(seconds=899), 900)


def test_remaining_is_monotonic():
    values = [remaining_seconds(START, START + timedelta(seconds=s), 900) for s in range(0, 1000, 7)]
    assert values == sorted(values, reverse=True)


def test_clock_skew_never_adds_time():
    assert elapsed_seconds(START, START - timedelta(seconds=30)) == 0
    assert remaining_seconds(START, START - timedelta(seconds=30), 900) == 900


def test_naive_database_values_are_utc():
    naive = datetime(2026, 5, 1, 18, 0, 0)
    assert as_utc(naive) == START
    assert remaining_seconds(naive, START + timedelta(minutes=1), 900) == 840

    plus_two = START.astimezone(timezone(timedelta(hours=2)))
    assert as_utc(plus_two).utcoffset() == timedelta(0)
    assert as_utc(None) is None
