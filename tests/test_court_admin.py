from datetime import datetime, time, timedelta, timezone

import pytest
import pytz

from courtqueue.core.errors import AlreadyExistsError, InvalidIntervalError, NotFoundError
from courtqueue.schemas.lock import ScheduledLockCreate
from courtqueue.services.court_admin import CourtAdminService


@pytest.fixture
def admin(scheduler):
    return CourtAdminService(scheduler)


def test_interval_with_end(admin, clock):
    start = clock.now + timedelta(hours=1)
    starts_at, ends_at = admin.resolve_interval(
        ScheduledLockCreate(starts_at=start, ends_at=start + timedelta(minutes=45)), clock.now
    )
    assert starts_at == start
    assert ends_at - starts_at == timedelta(minutes=45)


def test_interval_with_duration(admin, clock):
    starts_at, ends_at = admin.resolve_interval(
        ScheduledLockCreate(starts_at=clock.now, duration_minutes=90), clock.now
    )
    assert ends_at == clock.now + timedelta(minutes=90)


def test_interval_from_local_time(admin, clock, monkeypatch):
    monkeypatch.setattr("courtqueue.services.court_admin.settings.VENUE_TIMEZONE", "Europe/Berlin")

    starts_at, ends_at = admin.resolve_interval(
        ScheduledLockCreate(start_time_local=time(21, 30), duration_minutes=60), clock.now
    )

    berlin = pytz.timezone("Europe/Berlin")
    assert starts_at == berlin.localize(datetime(2026, 5, 1, 21, 30)).astimezone(pytz.UTC)
    assert ends_at - starts_at == timedelta(hours=1)
    assert starts_at.tzinfo is not None


@pytest.mark.parametrize(
    "payload",
    [
        {"duration_minutes": 30},
        {"starts_at": datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc)},
        {
            "starts_at": datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc),
            "ends_at": datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc),
        },
        {
            "starts_at": datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc),
            "ends_at": datetime(2026, 5, 1, 18, 0, tzinfo=timezone.utc),
        },
        {
            "starts_at": datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc),
            "ends_at": datetime(2026, 5, 1, 20, 0, tzinfo=timezone.utc),
            "duration_minutes": 60,
        },
        {
            "starts_at": datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc),
            "start_time_local": time(19, 0),
            "duration_minutes": 60,
        },
    ],
)
def test_invalid_intervals(admin, clock, payload):
    with pytest.raises(InvalidIntervalError):
        admin.resolve_interval(ScheduledLockCreate(**payload), clock.now)


async def test_create_court_rejects_duplicate_name(store, admin):
    await admin.create_court(store, "Centre")

    with pytest.raises(AlreadyExistsError):
        await admin.create_court(store, "Centre")


async def test_add_and_remove_lock(store, admin, clock, make_court):
    court = await make_court()

    lock = await admin.add_lock(
        store, court.id, ScheduledLockCreate(starts_at=clock.now, duration_minutes=30, reason="Lines")
    )
    assert [row.id for row in await admin.list_locks(store, court.id)] == [lock.id]

    await admin.remove_lock(store, court.id, lock.id)
    assert await admin.list_locks(store, court.id) == []

    with pytest.raises(NotFoundError):
        await admin.remove_lock(store, court.id, lock.id)


async def test_overlapping_locks_are_accepted(store, admin, clock, make_court):
    court = await make_court()

    await admin.add_lock(store, court.id, ScheduledLockCreate(starts_at=clock.now, duration_minutes=60))
    await admin.add_lock(
        store, court.id, ScheduledLockCreate(starts_at=clock.now + timedelta(minutes=30), duration_minutes=60)
    )

    assert len(await admin.list_locks(store, court.id)) == 2


async def test_lock_on_missing_court(store, admin, clock):
    with pytest.raises(NotFoundError):
        await admin.add_lock(store, 42, ScheduledLockCreate(starts_at=clock.now, duration_minutes=5))


async def test_delete_court_cascades(store, admin, scheduler, clock, make_court, make_players):
    court = await make_court()
    other = await make_court("Court 2")
    players = await make_players("ann", "ben", "cat", "dan", "eve")
    await scheduler.admit(store, court.id, players[:4])
    await scheduler.admit(store, court.id, [players[4]])
    await admin.add_lock(
        store, court.id, ScheduledLockCreate(starts_at=clock.now + timedelta(hours=1), duration_minutes=5)
    )

    await admin.delete_court(store, court.id)

    with pytest.raises(NotFoundError):
        await store.get_court(court.id)
    assert await store.locks(court.id) == []
    assert await store.placements([p.id for p in players]) == {}
    # Players are free to check in elsewhere
    assert (await scheduler.admit(store, other.id, players[:2])).outcome == "active"
