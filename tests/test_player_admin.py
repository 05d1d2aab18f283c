import pytest

from courtqueue.core.errors import NotFoundError
from courtqueue.services.player_admin import PlayerAdminService


@pytest.fixture
def admin(scheduler):
    return PlayerAdminService(scheduler)


async def test_delete_idle_player(store, admin, make_players):
    (ann,) = await make_players("ann")

    assert await admin.delete_player(store, ann.id) == []

    with pytest.raises(NotFoundError):
        await store.get_player(ann.id)


async def test_delete_last_active_player_stops_timer(store, admin, scheduler, make_court, make_players):
    court = await make_court()
    (ann,) = await make_players("ann")
    await scheduler.admit(store, court.id, [ann])

    assert await admin.delete_player(store, ann.id) == [court.id]

    court = await store.get_court(court.id)
    assert court.timer_started_at is None
    assert await store.active_assignments(court.id) == []


async def test_delete_active_player_backfills(store, admin, scheduler, clock, make_court, make_players):
    court = await make_court()
    players = await make_players("ann", "ben", "cat", "dan", "eve")
    await scheduler.admit(store, court.id, players[:4])
    await scheduler.admit(store, court.id, [players[4]])
    clock.advance(minutes=2)

    await admin.delete_player(store, players[0].id)

    active = [a.player_id for a in await store.active_assignments(court.id)]
    assert sorted(active) == sorted(p.id for p in players[1:])
    assert await store.waiting_entries(court.id) == []


async def test_delete_queued_player(store, admin, scheduler, make_court, make_players):
    court = await make_court()
    players = await make_players("ann", "ben", "cat", "dan", "eve")
    await scheduler.admit(store, court.id, players[:4])
    await scheduler.admit(store, court.id, [players[4]])

    await admin.delete_player(store, players[4].id)

    assert await store.waiting_entries(court.id) == []
    assert len(await store.active_assignments(court.id)) == 4


async def test_delete_unknown_player(store, admin):
    with pytest.raises(NotFoundError):
        await admin.delete_player(store, 9999)


async def test_clear_players(store, admin, scheduler, make_court, make_players):
    court = await make_court()
    players = await make_players("ann", "ben", "cat")
    await scheduler.admit(store, court.id, players[:2])

    assert await admin.clear_players(store) == 3

    assert await store.list_players() == []
    court = await store.get_court(court.id)
    assert court.timer_started_at is None


async def test_set_and_toggle_status(store, admin, make_players):
    (ann,) = await make_players("ann")

    player = await admin.set_status(store, ann.id, "is_marked", True)
    assert player.is_marked is True

    player = await admin.set_status(store, ann.id, "is_marked")
    assert player.is_marked is False

    player = await admin.set_status(store, ann.id, "is_flagged")
    assert player.is_flagged is True
    assert player.is_marked is False


async def test_set_status_rejects_unknown_field(store, admin, make_players):
    (ann,) = await make_players("ann")

    with pytest.raises(ValueError):
        await admin.set_status(store, ann.id, "password_hash", True)
