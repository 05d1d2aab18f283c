import pytest

from courtqueue.core.errors import AlreadyExistsError, AuthFailure
from courtqueue.schemas.occupancy import PlayerCredential
from courtqueue.schemas.player import PlayerCreate
from courtqueue.services.credentials import CredentialVerifier


@pytest.fixture
def verifier():
    return CredentialVerifier()


async def test_verify_returns_player(store, verifier, make_players):
    (ann,) = await make_players("ann")

    player = await verifier.verify(store, "ann", "ann-pw")

    assert player.id == ann.id


async def test_wrong_password(store, verifier, make_players):
    await make_players("ann")

    with pytest.raises(AuthFailure) as exc:
        await verifier.verify(store, "ann", "nope")

    assert exc.value.username == "ann"


async def test_unknown_user(store, verifier):
    with pytest.raises(AuthFailure) as exc:
        await verifier.verify(store, "ghost", "whatever")

    assert exc.value.username == "ghost"


async def test_verify_all_reports_first_failure(store, verifier, make_players):
    await make_players("ann", "ben")

    with pytest.raises(AuthFailure) as exc:
        await verifier.verify_all(
            store,
            [
                PlayerCredential(username="ann", password="ann-pw"),
                PlayerCredential(username="ben", password="bad"),
                PlayerCredential(username="ghost", password="bad"),
            ],
        )

    assert exc.value.username == "ben"


async def test_register_hashes_password(store, verifier):
    player = await verifier.register(
        store, PlayerCreate(username="zoe", password="secret", first_name="Zoe")
    )

    assert player.password_hash != "secret"
    assert (await verifier.verify(store, "zoe", "secret")).id == player.id

    with pytest.raises(AlreadyExistsError):
        await verifier.register(store, PlayerCreate(username="zoe", password="other"))
