"""
Match schedule generation for every supported game format.

Round robin, pool play / bracket and level-up share one procedure; blind
draw builds throwaway teams from the present players; King of the Court
builds a ladder with a King Court, a Challenger Court and a waiting line.
"""

import itertools
import random
import uuid
from typing import List, Optional

from app.models import (
    Match, Player, FormatSelection, GameFormat, GameVariant, ErrorKind, OperationResult
)
from app.core.config import (
    COURTS, KING_COURT, CHALLENGER_COURT, CHALLENGER_LINE, WAITING_LABEL,
    DEFAULT_TEAM_SIZE, MIN_TEAMS
)
from app.core.logging_config import get_logger

logger = get_logger(__name__)

ROUND_ROBIN_FORMATS = {
    GameFormat.ROUND_ROBIN,
    GameFormat.POOL_PLAY_BRACKET,
    GameFormat.LEVEL_UP,
}

FORMAT_DESCRIPTIONS = {
    GameFormat.ROUND_ROBIN: "Round Robin",
    GameFormat.POOL_PLAY_BRACKET: "Pool Play / Bracket",
    GameFormat.LEVEL_UP: "Level Up",
    GameFormat.BLIND_DRAW: "Blind Draw",
}

VARIANT_DESCRIPTIONS = {
    GameVariant.STANDARD: "King of the Court",
    GameVariant.MONARCH_OF_THE_COURT: "Monarch of the Court",
    GameVariant.KINGS_RANSOM: "King's Ransom",
    GameVariant.POWER_UP_ROUND: "Power-Up Round",
}


def format_description(selection: FormatSelection) -> str:
    if selection.is_kotc:
        return VARIANT_DESCRIPTIONS[selection.variant]
    return FORMAT_DESCRIPTIONS[selection.format]


class ScheduleGenerator:
    """
    Builds ordered match lists.

    Every shuffle and every match id comes from the injected random source.
    """

    def __init__(self, rng: Optional[random.Random] = None, courts: Optional[List[str]] = None):
        self.rng = rng or random.Random()
        self.courts = list(courts or COURTS)

    def generate(self, selection: FormatSelection, team_names: Optional[List[str]] = None,
                 players: Optional[List[Player]] = None,
                 team_size: int = DEFAULT_TEAM_SIZE) -> OperationResult:
        """
        Generate a schedule for the selected format.

        Args:
            selection: Format and KOTC variant
            team_names: Generated team names (team-based formats)
            players: Present players (blind draw)
            team_size: Players per side (blind draw)

        Returns:
            OperationResult holding the list of Matches, or an
            InsufficientTeams / InsufficientPlayers error
        """
        if selection.format == GameFormat.BLIND_DRAW:
            return self.blind_draw(players or [], team_size)

        team_names = team_names or []
        if len(team_names) < MIN_TEAMS:
            return OperationResult.failure(
                ErrorKind.INSUFFICIENT_TEAMS,
                "Please generate at least two teams before creating a schedule."
            )

        if selection.is_kotc:
            matches = self.king_of_the_court(team_names)
        else:
            matches = self.round_robin(team_names)

        logger.info(
            "%d matches have been created for the %s format",
            len(matches), format_description(selection)
        )
        return OperationResult.ok(matches)

    def round_robin(self, team_names: List[str]) -> List[Match]:
        """
        Every unordered pair exactly once, shuffled, then courts assigned.

        Pool play and level-up reuse this as-is.
        """
        matches = [
            self._new_match(team_a, team_b)
            for team_a, team_b in itertools.combinations(team_names, 2)
        ]
        self.rng.shuffle(matches)
        self._assign_courts(matches)
        return matches

    def blind_draw(self, players: List[Player], team_size: int = DEFAULT_TEAM_SIZE) -> OperationResult:
        """
        Random sides drawn from the present players.

        Players left over once fewer than two full sides remain sit out.
        """
        needed = team_size * 2
        if team_size < 1 or len(players) < needed:
            return OperationResult.failure(
                ErrorKind.INSUFFICIENT_PLAYERS,
                f"Need at least {needed} players for a blind draw match (have {len(players)})."
            )

        remaining = list(players)
        self.rng.shuffle(remaining)

        matches = []
        while len(remaining) >= needed:
            side_a, remaining = remaining[:team_size], remaining[team_size:]
            side_b, remaining = remaining[:team_size], remaining[team_size:]
            matches.append(self._new_match(
                ", ".join(p.name for p in side_a),
                ", ".join(p.name for p in side_b)
            ))

        if remaining:
            logger.warning(
                "Blind draw left %d player(s) without a match: %s",
                len(remaining), ", ".join(p.name for p in remaining)
            )

        self._assign_courts(matches)
        logger.info("%d blind draw matches have been created", len(matches))
        return OperationResult.ok(matches)

    def king_of_the_court(self, team_names: List[str]) -> List[Match]:
        """
        Ladder order: King Court, Challenger Court, then the waiting line.

        Variants share this layout; they only differ in the attached rule.
        """
        if len(team_names) < MIN_TEAMS:
            return []

        waiting = list(team_names)
        self.rng.shuffle(waiting)

        matches = [self._new_match(waiting.pop(0), waiting.pop(0), KING_COURT)]

        if len(waiting) >= 2:
            matches.append(self._new_match(waiting.pop(0), waiting.pop(0), CHALLENGER_COURT))

        for position, team_name in enumerate(waiting, start=1):
            matches.append(self._new_match(
                team_name, WAITING_LABEL.format(position=position), CHALLENGER_LINE
            ))

        return matches

    def _assign_courts(self, matches: List[Match]):
        # Walk the list in court-sized chunks; each chunk fills the courts in order
        for start in range(0, len(matches), len(self.courts)):
            for court, match in zip(self.courts, matches[start:start + len(self.courts)]):
                match.court = court

    def _new_match(self, team_a: str, team_b: str, court: str = "") -> Match:
        match_id = uuid.UUID(int=self.rng.getrandbits(128), version=4)
        return Match(id=str(match_id), team_a=team_a, team_b=team_b, court=court)
