"""
End-to-end tests for one league night: check-in, teams, schedule, results, publish.
"""

import sys
import os
import random
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.models import (
    FormatSelection, GameFormat, GameVariant, MatchSide, ErrorKind, BalanceStrategy
)
from app.services.league_night import LeagueNight
from app.services.rule_generator import RuleTextGenerator
from app.services.stores import InMemoryPlayerStore, InMemorySnapshotStore
from conftest import make_roster


class DownRuleGenerator(RuleTextGenerator):
    def generate(self, kind, hint=None):
        raise TimeoutError("no response")


def test_load_from_empty_snapshot(night):
    assert night.selection == FormatSelection(GameFormat.ROUND_ROBIN)
    assert night.teams == []
    assert night.ledger.matches == []
    assert night.points_to_win == 15


def test_full_round_robin_night(night):
    """12 players, teams of 4, every pair plays once, results recorded and published."""
    teams = night.generate_teams(4)
    assert teams.success
    assert len(night.teams) == 3

    schedule = night.generate_schedule()
    assert schedule.success
    assert len(schedule.data) == 3

    first = schedule.data[0]
    night.set_result(first.id, MatchSide.A, 15)
    assert night.save_results().data == {"completed": 0, "pending": 3}
    night.set_result(first.id, MatchSide.B, 10)
    assert night.save_results().data == {"completed": 1, "pending": 2}

    published = night.publish()
    assert published.success

    snapshot = night.gateway.fetch_latest().data
    assert snapshot.format == "round-robin"
    assert [t.name for t in snapshot.teams] == [t.name for t in night.teams]
    assert snapshot.schedule[0].result_a == 15
    assert snapshot.schedule[0].result_b == 10


def test_regenerating_teams_clears_schedule(night):
    night.generate_teams(4)
    night.generate_schedule()

    night.generate_teams(3)

    assert len(night.teams) == 4
    assert night.ledger.matches == []


def test_schedule_needs_teams(night):
    result = night.generate_schedule()

    assert result.error_kind == ErrorKind.INSUFFICIENT_TEAMS


def test_checked_out_players_are_not_drafted(night):
    absent = [p.id for p in night.pool.players[:4]]
    for player_id in absent:
        night.pool.toggle_presence(night.player_store, player_id)

    night.generate_teams(4)

    drafted = {pid for team in night.teams for pid in team.player_ids()}
    assert len(night.teams) == 2
    assert drafted.isdisjoint(absent)


def test_not_enough_present_players(night):
    night.pool.reset_presence(night.player_store)

    result = night.generate_teams(4)

    assert result.error_kind == ErrorKind.INSUFFICIENT_PLAYERS
    assert night.teams == []


def test_power_up_round_attaches_rule(night):
    result = night.set_format(FormatSelection(GameFormat.KING_OF_THE_COURT, GameVariant.POWER_UP_ROUND))

    assert result.success
    assert night.active_rule is not None

    night.generate_teams(3)
    schedule = night.generate_schedule().data
    assert schedule[0].court == "King Court"
    assert schedule[1].court == "Challenger Court"

    snapshot = night.publish().data
    assert snapshot.format == "power-up-round"
    assert snapshot.active_rule == night.active_rule


def test_rule_free_format_clears_rule(night):
    night.set_format(FormatSelection(GameFormat.KING_OF_THE_COURT, GameVariant.KINGS_RANSOM))
    assert night.active_rule is not None

    night.set_format(FormatSelection(GameFormat.LEVEL_UP))

    assert night.active_rule is None
    assert night.selection.to_wire() == "level-up"


def test_variant_ignored_outside_kotc(night):
    night.set_format(FormatSelection(GameFormat.ROUND_ROBIN, GameVariant.POWER_UP_ROUND))

    assert night.selection.variant == GameVariant.STANDARD
    assert night.active_rule is None


def test_rule_failure_keeps_format(player_store, snapshot_store):
    night = LeagueNight(player_store, snapshot_store, rule_generator=DownRuleGenerator(),
                        rng=random.Random(1))
    night.load()

    result = night.set_format(FormatSelection(GameFormat.KING_OF_THE_COURT, GameVariant.KINGS_RANSOM))

    assert result.error_kind == ErrorKind.GENERATION_FAILURE
    assert night.selection.variant == GameVariant.KINGS_RANSOM
    assert night.active_rule is None

    night.generate_teams(4)
    assert night.generate_schedule().success


def test_blind_draw_flow(night):
    night.generate_teams(4)
    night.set_format(FormatSelection(GameFormat.BLIND_DRAW))

    assert night.generate_teams(4).error_kind == ErrorKind.VALIDATION_FAILURE

    schedule = night.generate_schedule(3)
    assert len(schedule.data) == 2

    assert night.publish().error_kind == ErrorKind.VALIDATION_FAILURE
    night.clear_teams()
    night.generate_schedule(3)

    published = night.publish()
    assert published.success
    assert published.data.format == "blind-draw"
    assert published.data.teams == []


def test_delete_player_updates_published_teams(night):
    night.generate_teams(4)
    night.publish()
    victim = night.teams[0].players[0].id

    result = night.delete_player(victim)

    assert result.success
    assert night.pool.get(victim) is None
    snapshot = night.gateway.fetch_latest().data
    assert all(victim not in team.player_ids() for team in snapshot.teams)
    assert all(victim not in team.player_ids() for team in night.teams)
    assert sum(len(team.players) for team in night.teams) == 11

    # A later publish must not bring the deleted player back
    night.publish()
    snapshot = night.gateway.fetch_latest().data
    assert all(victim not in team.player_ids() for team in snapshot.teams)


def test_reload_resumes_published_night(player_store, snapshot_store):
    first = LeagueNight(player_store, snapshot_store, rng=random.Random(2))
    first.load()
    first.set_format(FormatSelection(GameFormat.KING_OF_THE_COURT, GameVariant.MONARCH_OF_THE_COURT))
    first.generate_teams(4)
    first.generate_schedule()
    first.points_to_win = 21
    first.publish()

    second = LeagueNight(player_store, snapshot_store, rng=random.Random(3))
    second.load()

    assert second.selection == first.selection
    assert [t.name for t in second.teams] == [t.name for t in first.teams]
    assert [m.id for m in second.ledger.matches] == [m.id for m in first.ledger.matches]
    assert second.points_to_win == 21


def test_same_seed_same_night():
    def run(seed):
        night = LeagueNight(InMemoryPlayerStore(make_roster(16)), InMemorySnapshotStore(),
                            rng=random.Random(seed), strategy=BalanceStrategy.ROUND_DRAFT)
        night.load()
        night.generate_teams(4)
        night.generate_schedule()
        return (
            [t.player_ids() for t in night.teams],
            [(m.id, m.team_a, m.team_b, m.court) for m in night.ledger.matches],
        )

    assert run(42) == run(42)
