"""
Services for team balancing, scheduling, results, publication and storage.
"""

from .team_balancer import TeamBalancer
from .schedule_generator import ScheduleGenerator
from .match_ledger import MatchLedger
from .publication import PublicationGateway
from .player_pool import PlayerPool
from .league_night import LeagueNight, build_league_night

__all__ = [
    "TeamBalancer",
    "ScheduleGenerator",
    "MatchLedger",
    "PublicationGateway",
    "PlayerPool",
    "LeagueNight",
    "build_league_night"
]
