"""
Team balancing for the League Night Operations system.

Two draft strategies are available and selected explicitly:

- SNAKE_DRAFT: bucket players into skill bands, shuffle inside each band and
  deal the result out in boustrophedon (snake) order.
- ROUND_DRAFT: draft round by round from two gender queues, applying a
  low-skill quota and a gender-balance preference per pick.

Both guarantee that every player lands on exactly one team and that team
sizes differ by at most one.
"""

import copy
import random
from collections import deque
from typing import Deque, Dict, List, Optional

from app.models import (
    Player, Team, Gender, BalanceStrategy, ErrorKind, OperationResult, TeamSummary
)
from app.core.config import (
    TEAM_NAMES, MIN_TEAMS, SKILL_BAND_FLOORS, LOW_SKILL_THRESHOLD,
    SNAKE_DRAFT_GAL_OFFSET, ROUND_DRAFT_GAL_OFFSET
)
from app.core.logging_config import get_logger

logger = get_logger(__name__)

GAL_OFFSETS = {
    BalanceStrategy.SNAKE_DRAFT: SNAKE_DRAFT_GAL_OFFSET,
    BalanceStrategy.ROUND_DRAFT: ROUND_DRAFT_GAL_OFFSET,
}


def adjusted_skill(player: Player, strategy: BalanceStrategy) -> float:
    """Raw skill shifted by the strategy's per-gender offset."""
    if player.gender == Gender.GAL:
        return player.skill - GAL_OFFSETS[strategy]
    return float(player.skill)


def snake_order(num_teams: int, round_number: int) -> List[int]:
    """Team indexes for one pass: forward on even passes, backward on odd ones."""
    order = list(range(num_teams))
    if round_number % 2 == 1:
        order.reverse()
    return order


class TeamBalancer:
    """
    Partitions present players into balanced teams.

    The random source is injected so a seeded generator reproduces the same
    teams for the same roster.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 strategy: BalanceStrategy = BalanceStrategy.SNAKE_DRAFT,
                 team_names: Optional[List[str]] = None):
        self.rng = rng or random.Random()
        self.strategy = strategy
        self.team_names = list(team_names or TEAM_NAMES)

    def balance(self, players: List[Player], team_size: int,
                strategy: Optional[BalanceStrategy] = None) -> OperationResult:
        """
        Split players into teams of roughly team_size.

        Args:
            players: Present players only
            team_size: Target players per team
            strategy: Overrides the balancer's default strategy

        Returns:
            OperationResult holding the list of Teams, or an
            InsufficientPlayers / ValidationFailure error
        """
        strategy = strategy or self.strategy

        if team_size < 1:
            return OperationResult.failure(
                ErrorKind.VALIDATION_FAILURE, f"Team size must be at least 1, got {team_size}"
            )

        total = len(players)
        if total < team_size or total // team_size < MIN_TEAMS:
            return OperationResult.failure(
                ErrorKind.INSUFFICIENT_PLAYERS,
                f"You need at least {team_size * MIN_TEAMS} present players to generate "
                f"at least {MIN_TEAMS} teams of {team_size} (have {total})"
            )

        num_teams = total // team_size
        # Copies, so later roster edits do not leak into generated teams
        pool = [copy.copy(p) for p in players]
        teams = self._name_teams(num_teams)

        if strategy == BalanceStrategy.SNAKE_DRAFT:
            self._snake_draft(pool, teams)
        else:
            self._round_draft(pool, teams)

        logger.info(
            "Generated %d teams from %d players using %s (sizes: %s)",
            num_teams, total, strategy.value, [len(t.players) for t in teams]
        )
        return OperationResult.ok(teams)

    def _name_teams(self, num_teams: int) -> List[Team]:
        names = list(self.team_names)
        self.rng.shuffle(names)
        return [Team(name=names[i % len(names)]) for i in range(num_teams)]

    def _snake_draft(self, players: List[Player], teams: List[Team]):
        """Band by adjusted skill, shuffle each band, deal in snake order."""
        bands: List[List[Player]] = [[] for _ in range(len(SKILL_BAND_FLOORS) + 1)]
        for player in players:
            skill = adjusted_skill(player, BalanceStrategy.SNAKE_DRAFT)
            band_index = len(SKILL_BAND_FLOORS)
            for i, floor in enumerate(SKILL_BAND_FLOORS):
                if skill >= floor:
                    band_index = i
                    break
            bands[band_index].append(player)

        draft_order: List[Player] = []
        for band in bands:
            self.rng.shuffle(band)
            draft_order.extend(band)

        num_teams = len(teams)
        for position, player in enumerate(draft_order):
            round_number, offset = divmod(position, num_teams)
            team_index = snake_order(num_teams, round_number)[offset]
            teams[team_index].players.append(player)

    def _round_draft(self, players: List[Player], teams: List[Team]):
        """
        Draft from per-gender queues, one pick per team per round.

        Each pick looks only at the head of each queue. A team already
        holding a low-skill player prefers a candidate above the threshold,
        then a team leaning one gender prefers the other, and otherwise the
        higher adjusted skill wins.
        """
        strategy = BalanceStrategy.ROUND_DRAFT
        queues: Dict[Gender, Deque[Player]] = {}
        for gender in (Gender.GUY, Gender.GAL):
            ranked = sorted(
                (p for p in players if p.gender == gender),
                key=lambda p: adjusted_skill(p, strategy),
                reverse=True
            )
            queues[gender] = deque(ranked)

        num_teams = len(teams)
        base_size, extra = divmod(len(players), num_teams)
        targets = [base_size + 1 if i < extra else base_size for i in range(num_teams)]
        gender_counts = [{Gender.GUY: 0, Gender.GAL: 0} for _ in range(num_teams)]

        round_number = 0
        while any(queues.values()):
            for team_index in snake_order(num_teams, round_number):
                team = teams[team_index]
                if len(team.players) >= targets[team_index]:
                    continue

                candidates = [queue[0] for queue in queues.values() if queue]
                if not candidates:
                    break

                if any(p.skill <= LOW_SKILL_THRESHOLD for p in team.players):
                    stronger = [p for p in candidates if p.skill > LOW_SKILL_THRESHOLD]
                    if stronger:
                        candidates = stronger

                counts = gender_counts[team_index]
                preferred = None
                if counts[Gender.GUY] > counts[Gender.GAL]:
                    preferred = Gender.GAL
                elif counts[Gender.GAL] > counts[Gender.GUY]:
                    preferred = Gender.GUY

                matching = [p for p in candidates if p.gender == preferred]
                pool = matching or candidates
                pick = max(pool, key=lambda p: adjusted_skill(p, strategy))

                queues[pick.gender].popleft()
                team.players.append(pick)
                counts[pick.gender] += 1
            round_number += 1


def move_player(teams: List[Team], player_id: str, team_name: str,
                index: Optional[int] = None) -> OperationResult:
    """
    Move a player to another team, or reorder inside the same team.

    Args:
        teams: Teams to edit in place
        player_id: Player being moved
        team_name: Destination team
        index: Position in the destination roster (appends when None)
    """
    destination = next((t for t in teams if t.name == team_name), None)
    if destination is None:
        return OperationResult.failure(ErrorKind.VALIDATION_FAILURE, f"Team not found: {team_name}")

    source = next((t for t in teams if player_id in t.player_ids()), None)
    if source is None:
        return OperationResult.failure(ErrorKind.VALIDATION_FAILURE, f"Player not on any team: {player_id}")

    position = source.player_ids().index(player_id)
    player = source.players.pop(position)
    if index is None:
        destination.players.append(player)
    else:
        destination.players.insert(index, player)

    if source is not destination:
        logger.info("%s has been moved from %s to %s", player.name, source.name, destination.name)
    return OperationResult.ok(teams)


def summarize_team(team: Team,
                   strategy: BalanceStrategy = BalanceStrategy.SNAKE_DRAFT) -> TeamSummary:
    size = len(team.players)
    if size == 0:
        return TeamSummary(team.name, 0, 0.0, 0.0, 0, 0)
    raw_total = sum(p.skill for p in team.players)
    adjusted_total = sum(adjusted_skill(p, strategy) for p in team.players)
    return TeamSummary(
        name=team.name,
        size=size,
        avg_skill=round(raw_total / size, 1),
        avg_adjusted_skill=round(adjusted_total / size, 1),
        guy_count=sum(1 for p in team.players if p.gender == Gender.GUY),
        gal_count=sum(1 for p in team.players if p.gender == Gender.GAL),
    )
