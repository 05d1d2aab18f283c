"""Player administration: removal and staff marks."""
import logging
from typing import List, Optional

from courtqueue.models.player import Player
from courtqueue.services.court_store import CourtStore
from courtqueue.services.occupancy import OccupancyScheduler

logger = logging.getLogger(__name__)

STATUS_FIELDS = ("is_marked", "is_flagged")


class PlayerAdminService:
    """Deletes players and manages their staff marks."""

    def __init__(self, scheduler: OccupancyScheduler):
        self.scheduler = scheduler

    async def delete_player(self, store: CourtStore, player_id: int) -> List[int]:
        """
        Take a player off any court or queue, then delete them.

        Leaving goes through the regular removal so the court's timer and
        free seats are handled as for a check-out.

        Args:
            store: Court store
            player_id: Player ID

        Returns:
            IDs of the courts the player was removed from

        Raises:
            NotFoundError: unknown player
        """
        player = await store.get_player(player_id)
        left = []

        while True:
            async with self.scheduler.admission_lock:
                placed = await store.placements([player.id])
                if player.id not in placed:
                    await store.delete_rows([player])
                    await store.commit()
                    break

            court_id = placed[player.id]
            await self.scheduler.remove(store, court_id, [player])
            left.append(court_id)

        logger.info(f"Deleted player {player.username} ({player_id}), left courts {left}")
        return left

    async def clear_players(self, store: CourtStore) -> int:
        """Delete every player. Returns how many were deleted."""
        players = [p.id for p in await store.list_players()]
        for player_id in players:
            await self.delete_player(store, player_id)

        logger.info(f"Cleared {len(players)} players")
        return len(players)

    async def set_status(
        self, store: CourtStore, player_id: int, status: str, value: Optional[bool] = None
    ) -> Player:
        """Set ``is_marked`` or ``is_flagged``; flip it when no value is given."""
        if status not in STATUS_FIELDS:
            raise ValueError(f"Unknown player status {status}")

        player = await store.get_player(player_id)
        new_value = not getattr(player, status) if value is None else value
        setattr(player, status, new_value)
        await store.commit()

        logger.info(f"Player {player.username} ({player_id}) {status}={new_value}")
        return player
