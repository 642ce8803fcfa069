"""
In-memory match result ledger.
"""

from typing import List, Optional

from app.models import Match, MatchSide, ErrorKind, OperationResult
from app.core.logging_config import get_logger

logger = get_logger(__name__)


class MatchLedger:
    """
    Ordered list of matches with live result entry.

    A match is pending until both results are set. The ledger only records
    values; reading pending vs complete is left to whoever projects standings.
    """

    def __init__(self, matches: Optional[List[Match]] = None):
        self._matches: List[Match] = list(matches or [])

    @property
    def matches(self) -> List[Match]:
        return list(self._matches)

    def replace(self, matches: List[Match]):
        self._matches = list(matches)

    def clear(self):
        self._matches = []

    def get(self, match_id: str) -> Optional[Match]:
        return next((m for m in self._matches if m.id == match_id), None)

    def set_result(self, match_id: str, side: MatchSide, value: Optional[int]) -> OperationResult:
        """
        Set or clear one side's result.

        Args:
            match_id: Match to update
            side: MatchSide.A or MatchSide.B
            value: Integer score, or None to clear it

        Returns:
            OperationResult holding the updated Match
        """
        # bool is an int subclass; a checkbox value is not a score
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            return OperationResult.failure(
                ErrorKind.VALIDATION_FAILURE, f"Result must be an integer or empty, got {value!r}"
            )

        match = self.get(match_id)
        if match is None:
            return OperationResult.failure(ErrorKind.VALIDATION_FAILURE, f"Match not found: {match_id}")

        if side == MatchSide.A:
            match.result_a = value
        else:
            match.result_b = value
        return OperationResult.ok(match)

    def save(self) -> OperationResult:
        """Checkpoint for the user; results are already live so nothing changes."""
        completed = len(self.completed())
        pending = len(self.pending())
        logger.info("Results saved: %d complete, %d pending", completed, pending)
        return OperationResult.ok({"completed": completed, "pending": pending})

    def pending(self) -> List[Match]:
        return [m for m in self._matches if not m.is_complete]

    def completed(self) -> List[Match]:
        return [m for m in self._matches if m.is_complete]
