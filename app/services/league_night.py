"""
League night session: the roster, teams, schedule and format for one night.

Replaces a shared global context with an explicit object that the API layer
and the CLI hold and pass around.
"""

import random
from typing import List, Optional

from app.models import (
    Team, Rule, FormatSelection, GameFormat, GameVariant, BalanceStrategy,
    MatchSide, ErrorKind, OperationResult
)
from app.services.player_pool import PlayerPool
from app.services.team_balancer import TeamBalancer, move_player
from app.services.schedule_generator import ScheduleGenerator
from app.services.match_ledger import MatchLedger
from app.services.publication import PublicationGateway
from app.services.rule_generator import (
    RuleTextGenerator, CatalogRuleGenerator, rule_kind_for_variant, pick_rule
)
from app.services.stores import (
    PlayerStore, SnapshotStore, InMemoryPlayerStore, InMemorySnapshotStore
)
from app.core.config import (
    SUPABASE_URL, SUPABASE_ANON_KEY, RANDOM_SEED, BALANCE_STRATEGY,
    DEFAULT_TEAM_SIZE, DEFAULT_POINTS_TO_WIN
)
from app.core.logging_config import get_logger

logger = get_logger(__name__)


class LeagueNight:
    """
    Holds one night's state and runs each step against it.

    Every operation returns an OperationResult; nothing raises past this
    boundary.
    """

    def __init__(self, player_store: PlayerStore, snapshot_store: SnapshotStore,
                 rule_generator: Optional[RuleTextGenerator] = None,
                 rng: Optional[random.Random] = None,
                 strategy: BalanceStrategy = BalanceStrategy.SNAKE_DRAFT):
        self.player_store = player_store
        self.gateway = PublicationGateway(snapshot_store)
        self.rule_generator = rule_generator or CatalogRuleGenerator()
        self.rng = rng or random.Random()

        self.pool = PlayerPool()
        self.balancer = TeamBalancer(self.rng, strategy)
        self.scheduler = ScheduleGenerator(self.rng)
        self.ledger = MatchLedger()

        self.teams: List[Team] = []
        self.selection = FormatSelection()
        self.active_rule: Optional[Rule] = None
        self.points_to_win = DEFAULT_POINTS_TO_WIN

    def load(self) -> OperationResult:
        """Load the roster and resume from the last published snapshot."""
        players = self.pool.load(self.player_store)
        if not players.success:
            return players

        published = self.gateway.fetch_latest()
        if not published.success:
            return published

        snapshot = published.data
        self.teams = snapshot.teams
        self.ledger.replace(snapshot.schedule)
        self.selection = snapshot.selection
        self.active_rule = snapshot.active_rule
        self.points_to_win = snapshot.points_to_win
        return OperationResult.ok(snapshot)

    def generate_teams(self, team_size: int = DEFAULT_TEAM_SIZE,
                       strategy: Optional[BalanceStrategy] = None) -> OperationResult:
        if self.selection.format == GameFormat.BLIND_DRAW:
            return OperationResult.failure(
                ErrorKind.VALIDATION_FAILURE,
                "Team generation is disabled for the Blind Draw format; sides are drawn per match."
            )

        result = self.balancer.balance(self.pool.present_players(), team_size, strategy)
        if result.success:
            self.teams = result.data
            self.ledger.clear()
        return result

    def clear_teams(self) -> OperationResult:
        self.teams = []
        self.ledger.clear()
        return OperationResult.ok()

    def move_player(self, player_id: str, team_name: str, index: Optional[int] = None) -> OperationResult:
        return move_player(self.teams, player_id, team_name, index)

    def set_format(self, selection: FormatSelection, hint: Optional[str] = None) -> OperationResult:
        """
        Switch format/variant and attach the variant's rule, if it has one.

        A rule generation failure is returned but the new format stays.
        """
        if not selection.is_kotc:
            selection = FormatSelection(selection.format, GameVariant.STANDARD)
        self.selection = selection

        kind = rule_kind_for_variant(selection.variant) if selection.is_kotc else None
        if kind is None:
            self.active_rule = None
            return OperationResult.ok(selection)

        picked = pick_rule(self.rule_generator, kind, hint, self.rng, previous=self.active_rule)
        if not picked.success:
            self.active_rule = None
            return picked

        self.active_rule = picked.data
        return OperationResult.ok(selection)

    def generate_schedule(self, team_size: int = DEFAULT_TEAM_SIZE) -> OperationResult:
        result = self.scheduler.generate(
            self.selection,
            team_names=[t.name for t in self.teams],
            players=self.pool.present_players(),
            team_size=team_size,
        )
        if result.success:
            self.ledger.replace(result.data)
        return result

    def set_result(self, match_id: str, side: MatchSide, value: Optional[int]) -> OperationResult:
        return self.ledger.set_result(match_id, side, value)

    def save_results(self) -> OperationResult:
        return self.ledger.save()

    def publish(self) -> OperationResult:
        if self.selection.format == GameFormat.BLIND_DRAW and self.teams:
            return OperationResult.failure(
                ErrorKind.VALIDATION_FAILURE,
                "Please clear teams before publishing a blind draw format"
            )
        if not self.ledger.matches and self.selection.format != GameFormat.BLIND_DRAW:
            logger.warning("Publishing %s without a schedule", self.selection.to_wire())

        return self.gateway.publish(
            self.teams,
            self.selection.to_wire(),
            self.ledger.matches,
            self.active_rule,
            self.points_to_win,
        )

    def delete_player(self, player_id: str) -> OperationResult:
        """Remove a player from the roster, tonight's teams and the published teams."""
        result = self.pool.delete_player(self.player_store, player_id)
        if not result.success:
            return result

        for team in self.teams:
            team.players = [p for p in team.players if p.id != player_id]

        cleanup = self.gateway.remove_player(player_id)
        if not cleanup.success:
            logger.error("Player deleted but published teams were not updated: %s", cleanup.error)
            return cleanup
        return result


def build_league_night() -> LeagueNight:
    """Wire a LeagueNight from configuration (Supabase when credentials are set)."""
    if SUPABASE_URL and SUPABASE_ANON_KEY:
        from app.services.supabase_store import (
            create_supabase_client, SupabasePlayerStore, SupabaseSnapshotStore
        )
        client = create_supabase_client()
        player_store: PlayerStore = SupabasePlayerStore(client)
        snapshot_store: SnapshotStore = SupabaseSnapshotStore(client)
        logger.info("Using Supabase stores at %s", SUPABASE_URL)
    else:
        player_store = InMemoryPlayerStore()
        snapshot_store = InMemorySnapshotStore()
        logger.warning("SUPABASE_URL/SUPABASE_ANON_KEY not set; using in-memory stores")

    rng = random.Random(RANDOM_SEED)
    return LeagueNight(player_store, snapshot_store, rng=rng, strategy=BalanceStrategy(BALANCE_STRATEGY))
