"""
Publication gateway: writes and reads the single public snapshot.
"""

from typing import Any, Dict, List, Optional

from app.models import (
    Team, Match, Rule, PublishedSnapshot, FormatSelection, ErrorKind, OperationResult
)
from app.services.stores import SnapshotStore
from app.core.config import (
    SNAPSHOT_ROW_ID, DEFAULT_POINTS_TO_WIN, DEFAULT_PUBLISH_FORMAT, DEFAULT_FETCH_FORMAT
)
from app.core.logging_config import get_logger

logger = get_logger(__name__)


class PublicationGateway:
    """
    Upserts one snapshot row keyed by SNAPSHOT_ROW_ID.

    Publishing overwrites whatever is there; the last write wins.
    """

    def __init__(self, store: SnapshotStore):
        self.store = store

    def publish(self, teams: Optional[List[Team]], format: Optional[str],
                schedule: Optional[List[Match]], active_rule: Optional[Rule],
                points_to_win: Optional[int]) -> OperationResult:
        """
        Publish teams, format, schedule and rule for the public view.

        Args:
            teams: Generated teams
            format: Wire format string (see FormatSelection.to_wire)
            schedule: Matches in generation order
            active_rule: Rule or power-up in play
            points_to_win: Game target score

        Returns:
            OperationResult holding the published snapshot
        """
        snapshot = PublishedSnapshot(
            teams=teams or [],
            format=format or DEFAULT_PUBLISH_FORMAT,
            schedule=schedule or [],
            active_rule=active_rule or None,
            points_to_win=points_to_win or DEFAULT_POINTS_TO_WIN,
        )
        row = snapshot.to_dict()
        row["id"] = SNAPSHOT_ROW_ID

        result = self.store.upsert_snapshot(row)
        if not result.success:
            return OperationResult.failure(
                ErrorKind.STORE_FAILURE, result.error or "Failed to publish data to the database."
            )

        logger.info(
            "Published %d teams and %d matches (format=%s)",
            len(snapshot.teams), len(snapshot.schedule), snapshot.format
        )
        return OperationResult.ok(snapshot)

    def fetch_latest(self) -> OperationResult:
        """
        Most recent snapshot, or documented defaults when none exists.

        "Never published" and "published empty" both succeed; callers cannot
        tell them apart by error presence.
        """
        result = self.store.get_latest_snapshot()
        if not result.success:
            return OperationResult.failure(
                ErrorKind.STORE_FAILURE, result.error or "Failed to retrieve data from the database."
            )

        if result.data is None:
            return OperationResult.ok(PublishedSnapshot())

        try:
            return OperationResult.ok(self._snapshot_from_row(result.data))
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Stored snapshot is malformed: %s", e)
            return OperationResult.failure(
                ErrorKind.VALIDATION_FAILURE, f"Stored snapshot is malformed: {e}"
            )

    def remove_player(self, player_id: str) -> OperationResult:
        """Strip a deleted player from the published teams and republish."""
        fetched = self.fetch_latest()
        if not fetched.success:
            return fetched

        snapshot: PublishedSnapshot = fetched.data
        if not any(player_id in team.player_ids() for team in snapshot.teams):
            return OperationResult.ok(snapshot)

        teams = [
            Team(name=team.name, players=[p for p in team.players if p.id != player_id])
            for team in snapshot.teams
        ]
        return self.publish(
            teams, snapshot.format, snapshot.schedule, snapshot.active_rule, snapshot.points_to_win
        )

    @staticmethod
    def _snapshot_from_row(row: Dict[str, Any]) -> PublishedSnapshot:
        wire_format = row.get("format") or DEFAULT_FETCH_FORMAT
        # Reject unknown format strings here rather than in the public view
        FormatSelection.from_wire(wire_format)
        return PublishedSnapshot(
            teams=[Team.from_dict(t) for t in row.get("teams") or []],
            format=wire_format,
            schedule=[Match.from_dict(m) for m in row.get("schedule") or []],
            active_rule=Rule.from_dict(row.get("active_rule")),
            points_to_win=row.get("points_to_win") or DEFAULT_POINTS_TO_WIN,
        )
