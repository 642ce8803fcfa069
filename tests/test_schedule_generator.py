"""
Tests for schedule generation across all game formats.
"""

import sys
import os
import random
from collections import Counter
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from app.models import ErrorKind, FormatSelection, GameFormat, GameVariant
from app.services.schedule_generator import ScheduleGenerator, format_description
from conftest import make_roster

TEAMS = ["Aces", "Blockers", "Diggers", "Setters", "Spikers"]


@pytest.mark.parametrize("count", [2, 3, 4, 5])
def test_round_robin_plays_every_pair_once(count):
    """N teams give N(N-1)/2 matches, one per unordered pair."""
    names = TEAMS[:count]
    matches = ScheduleGenerator(random.Random(count)).round_robin(names)

    assert len(matches) == count * (count - 1) // 2
    pairs = {frozenset((m.team_a, m.team_b)) for m in matches}
    assert len(pairs) == len(matches)
    assert all(m.team_a != m.team_b for m in matches)
    assert all(m.team_a in names and m.team_b in names for m in matches)


def test_round_robin_alternates_courts():
    matches = ScheduleGenerator(random.Random(2)).round_robin(TEAMS)

    courts = [m.court for m in matches]
    assert courts == ["Court 1", "Court 2"] * 5


def test_match_ids_are_unique_and_results_empty():
    matches = ScheduleGenerator(random.Random(4)).round_robin(TEAMS)

    assert len({m.id for m in matches}) == len(matches)
    assert all(m.result_a is None and m.result_b is None for m in matches)


def test_same_seed_reproduces_schedule():
    first = ScheduleGenerator(random.Random(11)).round_robin(TEAMS)
    second = ScheduleGenerator(random.Random(11)).round_robin(TEAMS)

    assert [m.to_dict() for m in first] == [m.to_dict() for m in second]


@pytest.mark.parametrize("game_format", [GameFormat.POOL_PLAY_BRACKET, GameFormat.LEVEL_UP])
def test_pool_play_and_level_up_use_round_robin(game_format):
    result = ScheduleGenerator(random.Random(1)).generate(FormatSelection(game_format), TEAMS[:4])

    assert result.success
    assert len(result.data) == 6


def test_king_of_the_court_with_four_or_more_teams():
    """Exactly one King Court and one Challenger Court, the rest wait in line."""
    matches = ScheduleGenerator(random.Random(6)).king_of_the_court(TEAMS)

    courts = Counter(m.court for m in matches)
    assert courts["King Court"] == 1
    assert courts["Challenger Court"] == 1
    assert courts["Challenger Line"] == 1
    assert matches[0].court == "King Court"
    assert matches[1].court == "Challenger Court"

    line = matches[2]
    assert line.team_b == "Waiting #1"
    playing = [m.team_a for m in matches[:2]] + [m.team_b for m in matches[:2]] + [line.team_a]
    assert sorted(playing) == sorted(TEAMS)


def test_king_of_the_court_with_three_teams():
    matches = ScheduleGenerator(random.Random(6)).king_of_the_court(TEAMS[:3])

    assert [m.court for m in matches] == ["King Court", "Challenger Line"]
    assert matches[1].team_b == "Waiting #1"


def test_king_of_the_court_with_two_teams():
    matches = ScheduleGenerator(random.Random(6)).king_of_the_court(TEAMS[:2])

    assert len(matches) == 1
    assert matches[0].court == "King Court"


def test_king_of_the_court_with_one_team_is_empty():
    assert ScheduleGenerator(random.Random(6)).king_of_the_court(TEAMS[:1]) == []


@pytest.mark.parametrize("variant", list(GameVariant))
def test_kotc_variants_share_the_ladder(variant):
    selection = FormatSelection(GameFormat.KING_OF_THE_COURT, variant)
    result = ScheduleGenerator(random.Random(9)).generate(selection, TEAMS[:4])

    assert [m.court for m in result.data] == ["King Court", "Challenger Court"]


@pytest.mark.parametrize("count,team_size,expected_matches,left_out", [
    (8, 4, 1, 0),
    (13, 4, 1, 5),
    (16, 4, 2, 0),
    (20, 3, 3, 2),
])
def test_blind_draw_leftovers(count, team_size, expected_matches, left_out):
    """2*teamSize*k + r players give k matches and r players sitting out."""
    players = make_roster(count)
    result = ScheduleGenerator(random.Random(count)).blind_draw(players, team_size)

    assert result.success
    assert len(result.data) == expected_matches

    drawn = [name for m in result.data for side in (m.team_a, m.team_b) for name in side.split(", ")]
    assert len(drawn) == len(set(drawn)) == count - left_out


def test_blind_draw_needs_two_full_sides():
    result = ScheduleGenerator(random.Random(1)).blind_draw(make_roster(7), 4)

    assert result.error_kind == ErrorKind.INSUFFICIENT_PLAYERS


def test_generate_routes_blind_draw_to_players():
    selection = FormatSelection(GameFormat.BLIND_DRAW)
    result = ScheduleGenerator(random.Random(1)).generate(selection, players=make_roster(12), team_size=3)

    assert len(result.data) == 2


def test_generate_requires_two_teams():
    selection = FormatSelection(GameFormat.ROUND_ROBIN)
    result = ScheduleGenerator(random.Random(1)).generate(selection, ["Aces"])

    assert not result.success
    assert result.error_kind == ErrorKind.INSUFFICIENT_TEAMS


def test_format_description():
    assert format_description(FormatSelection(GameFormat.ROUND_ROBIN)) == "Round Robin"
    assert format_description(
        FormatSelection(GameFormat.KING_OF_THE_COURT, GameVariant.KINGS_RANSOM)
    ) == "King's Ransom"
