"""
Persistence interfaces for players and the published snapshot.

Every call answers with an OperationResult; callers treat a failure as
reportable, never fatal. The in-memory stores back tests and local runs
without Supabase credentials.
"""

import copy
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.models import Player, ErrorKind, OperationResult


class PlayerStore(ABC):
    @abstractmethod
    def list_players(self) -> OperationResult:
        raise NotImplementedError

    @abstractmethod
    def insert(self, player: Player) -> OperationResult:
        raise NotImplementedError

    @abstractmethod
    def update(self, player: Player) -> OperationResult:
        raise NotImplementedError

    @abstractmethod
    def delete(self, player_id: str) -> OperationResult:
        raise NotImplementedError

    @abstractmethod
    def set_presence(self, player_id: str, present: bool) -> OperationResult:
        raise NotImplementedError

    @abstractmethod
    def reset_all_presence(self) -> OperationResult:
        raise NotImplementedError


class SnapshotStore(ABC):
    @abstractmethod
    def upsert_snapshot(self, row: Dict[str, Any]) -> OperationResult:
        raise NotImplementedError

    @abstractmethod
    def get_latest_snapshot(self) -> OperationResult:
        """Succeeds with the stored row, or with None when nothing was published."""
        raise NotImplementedError


class InMemoryPlayerStore(PlayerStore):
    def __init__(self, players: Optional[List[Player]] = None):
        self._players: Dict[str, Player] = {p.id: copy.copy(p) for p in players or []}

    def list_players(self) -> OperationResult:
        return OperationResult.ok([copy.copy(p) for p in self._players.values()])

    def insert(self, player: Player) -> OperationResult:
        stored = copy.copy(player)
        if not stored.id:
            stored.id = str(uuid.uuid4())
        self._players[stored.id] = stored
        return OperationResult.ok(copy.copy(stored))

    def update(self, player: Player) -> OperationResult:
        if player.id not in self._players:
            return OperationResult.failure(ErrorKind.STORE_FAILURE, f"Player not found: {player.id}")
        self._players[player.id] = copy.copy(player)
        return OperationResult.ok(copy.copy(player))

    def delete(self, player_id: str) -> OperationResult:
        if self._players.pop(player_id, None) is None:
            return OperationResult.failure(ErrorKind.STORE_FAILURE, f"Player not found: {player_id}")
        return OperationResult.ok()

    def set_presence(self, player_id: str, present: bool) -> OperationResult:
        player = self._players.get(player_id)
        if player is None:
            return OperationResult.failure(ErrorKind.STORE_FAILURE, f"Player not found: {player_id}")
        player.present = present
        return OperationResult.ok()

    def reset_all_presence(self) -> OperationResult:
        for player in self._players.values():
            player.present = False
        return OperationResult.ok()


class InMemorySnapshotStore(SnapshotStore):
    def __init__(self):
        self._rows: Dict[str, Dict[str, Any]] = {}

    def upsert_snapshot(self, row: Dict[str, Any]) -> OperationResult:
        stored = copy.deepcopy(row)
        stored["updated_at"] = datetime.now(timezone.utc).isoformat()
        self._rows[stored["id"]] = stored
        return OperationResult.ok()

    def get_latest_snapshot(self) -> OperationResult:
        if not self._rows:
            return OperationResult.ok(None)
        latest = max(self._rows.values(), key=lambda r: r["updated_at"])
        return OperationResult.ok(copy.deepcopy(latest))
