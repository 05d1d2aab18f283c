"""Player credential verification."""
import logging
from typing import List, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from courtqueue.core.errors import AlreadyExistsError, AuthFailure
from courtqueue.models.player import Player
from courtqueue.schemas.occupancy import PlayerCredential
from courtqueue.schemas.player import PlayerCreate
from courtqueue.services.court_store import CourtStore

logger = logging.getLogger(__name__)


class CredentialVerifier:
    """Checks username/password pairs against stored password hashes."""

    async def verify(self, store: CourtStore, username: str, password: str) -> Player:
        """
        Verify one credential pair.

        Raises:
            AuthFailure: unknown username or wrong password
        """
        player = await store.find_player_by_username(username)
        if player is None or not check_password_hash(player.password_hash, password):
            logger.warning(f"Credential check failed for {username}")
            raise AuthFailure(username)
        return player

    async def verify_all(
        self, store: CourtStore, credentials: Sequence[PlayerCredential]
    ) -> List[Player]:
        """Verify a batch in order, stopping at the first failure."""
        return [await self.verify(store, c.username, c.password) for c in credentials]

    async def register(self, store: CourtStore, data: PlayerCreate) -> Player:
        """Create a player with a hashed password."""
        if await store.find_player_by_username(data.username):
            raise AlreadyExistsError(f"Username '{data.username}' already exists")

        player = Player(
            username=data.username,
            password_hash=generate_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
        )
        store.add(player)
        await store.commit()
        logger.info(f"Registered player {player.username} ({player.id})")
        return player


# Singleton instance
credential_verifier = CredentialVerifier()
