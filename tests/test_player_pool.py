"""
Tests for the roster and check-in state.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from app.models import Gender, ErrorKind, OperationResult
from app.services.player_pool import PlayerPool
from app.services.stores import InMemoryPlayerStore, PlayerStore
from conftest import make_player, make_roster


class FlakyPlayerStore(InMemoryPlayerStore):
    """Accepts reads but rejects every write."""

    def _fail(self, *args, **kwargs):
        return OperationResult.failure(ErrorKind.STORE_FAILURE, "write rejected")

    insert = update = delete = set_presence = reset_all_presence = _fail


@pytest.fixture
def pool(player_store):
    roster = PlayerPool()
    roster.load(player_store)
    return roster


def test_load_and_counts(pool):
    counts = pool.counts()

    assert counts == {"total": 12, "present": 12, "guys": 6, "gals": 6}


def test_toggle_presence_round_trip(pool, player_store):
    player_id = pool.players[0].id

    result = pool.toggle_presence(player_store, player_id)
    assert result.success
    assert result.data.present is False
    assert pool.counts()["present"] == 11

    pool.toggle_presence(player_store, player_id)
    assert pool.get(player_id).present is True
    stored = {p.id: p for p in player_store.list_players().data}
    assert stored[player_id].present is True


def test_toggle_presence_rolls_back_on_store_failure():
    store = FlakyPlayerStore(make_roster(4))
    pool = PlayerPool()
    pool.load(store)
    player_id = pool.players[0].id

    result = pool.toggle_presence(store, player_id)

    assert result.error_kind == ErrorKind.STORE_FAILURE
    assert pool.get(player_id).present is True


def test_toggle_unknown_player(pool, player_store):
    assert pool.toggle_presence(player_store, "ghost").error_kind == ErrorKind.VALIDATION_FAILURE


def test_reset_presence(pool, player_store):
    result = pool.reset_presence(player_store)

    assert result.success
    assert pool.present_players() == []
    assert all(not p.present for p in player_store.list_players().data)


def test_reset_presence_failure_keeps_local_state():
    store = FlakyPlayerStore(make_roster(4))
    pool = PlayerPool()
    pool.load(store)

    assert not pool.reset_presence(store).success
    assert len(pool.present_players()) == 4


def test_add_player_is_checked_in(pool, player_store):
    result = pool.add_player(player_store, "  Robin ", "Gal", 6)

    assert result.success
    player = result.data
    assert player.id
    assert player.name == "Robin"
    assert player.gender == Gender.GAL
    assert player.present is True
    assert pool.get(player.id) is not None


@pytest.mark.parametrize("name,gender,skill", [
    ("", "Guy", 5),
    ("Robin", "Other", 5),
    ("Robin", "Gal", 0),
    ("Robin", "Gal", 11),
])
def test_add_player_validation(pool, player_store, name, gender, skill):
    result = pool.add_player(player_store, name, gender, skill)

    assert result.error_kind == ErrorKind.VALIDATION_FAILURE
    assert len(pool.players) == 12


def test_import_players_start_absent(pool, player_store):
    records = [
        {"name": "Ari", "gender": Gender.GUY, "skill": 4},
        {"name": "Bo", "gender": Gender.GAL, "skill": 7},
    ]

    result = pool.import_players(player_store, records)

    assert len(result.data) == 2
    assert all(not p.present for p in result.data)
    assert pool.counts()["total"] == 14
    assert pool.counts()["present"] == 12


def test_update_player(pool, player_store):
    player = make_player(pool.players[0].id, Gender.GAL, 2, name="Renamed")

    assert pool.update_player(player_store, player).success
    assert pool.get(player.id).name == "Renamed"


def test_update_player_rolls_back_on_store_failure():
    store = FlakyPlayerStore(make_roster(4))
    pool = PlayerPool()
    pool.load(store)
    original = pool.players[0]

    result = pool.update_player(store, make_player(original.id, Gender.GUY, 1, name="Changed"))

    assert not result.success
    assert pool.get(original.id).name == original.name


def test_delete_player_rolls_back_on_store_failure():
    store = FlakyPlayerStore(make_roster(4))
    pool = PlayerPool()
    pool.load(store)

    assert not pool.delete_player(store, pool.players[0].id).success
    assert len(pool.players) == 4


def test_delete_player(pool, player_store):
    player_id = pool.players[3].id

    assert pool.delete_player(player_store, player_id).success
    assert pool.get(player_id) is None
    assert len(player_store.list_players().data) == 11


def test_incomplete_store_cannot_be_created():
    """A store missing part of the interface fails at construction."""
    class ReadOnlyStore(PlayerStore):
        def list_players(self):
            return OperationResult.ok([])

    with pytest.raises(TypeError):
        ReadOnlyStore()
