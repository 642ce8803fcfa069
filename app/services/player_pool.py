"""
Player roster and check-in state for one league night.
"""

import copy
from typing import Dict, List, Optional

from app.models import Player, Gender, ErrorKind, OperationResult
from app.services.stores import PlayerStore
from app.services.roster_io import validate_record
from app.core.logging_config import get_logger

logger = get_logger(__name__)


class PlayerPool:
    """
    Local copy of the roster.

    Edits apply locally first and are confirmed by the store; when the store
    call fails the local change is rolled back and the failure returned.
    """

    def __init__(self, players: Optional[List[Player]] = None):
        self.players: List[Player] = list(players or [])

    def load(self, store: PlayerStore) -> OperationResult:
        result = store.list_players()
        if result.success:
            self.players = list(result.data)
        else:
            logger.error("Could not load player data: %s", result.error)
        return result

    def get(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def present_players(self) -> List[Player]:
        return [p for p in self.players if p.present]

    def counts(self) -> Dict[str, int]:
        present = self.present_players()
        return {
            "total": len(self.players),
            "present": len(present),
            "guys": sum(1 for p in present if p.gender == Gender.GUY),
            "gals": sum(1 for p in present if p.gender == Gender.GAL),
        }

    def add_player(self, store: PlayerStore, name: str, gender: str, skill: int) -> OperationResult:
        record = validate_record({"name": name, "gender": gender, "skill": skill})
        if record is None:
            return OperationResult.failure(
                ErrorKind.VALIDATION_FAILURE,
                "Player needs a name, a gender of Guy or Gal and a skill from 1 to 10"
            )

        result = store.insert(Player(id="", present=True, **record))
        if not result.success:
            return result

        self.players.append(result.data)
        logger.info("%s has been added to the roster", result.data.name)
        return result

    def import_players(self, store: PlayerStore, records: List[dict]) -> OperationResult:
        """Insert validated import records; stops at the first store failure."""
        added = []
        for record in records:
            result = store.insert(Player(id="", present=False, **record))
            if not result.success:
                return result
            added.append(result.data)

        self.players.extend(added)
        logger.info("Imported %d players", len(added))
        return OperationResult.ok(added)

    def update_player(self, store: PlayerStore, player: Player) -> OperationResult:
        if validate_record({"name": player.name, "gender": player.gender.value, "skill": player.skill}) is None:
            return OperationResult.failure(ErrorKind.VALIDATION_FAILURE, "Invalid player details")

        original = list(self.players)
        self.players = [copy.copy(player) if p.id == player.id else p for p in self.players]

        result = store.update(player)
        if not result.success:
            self.players = original
            logger.error("Could not save player changes for %s: %s", player.name, result.error)
        return result

    def delete_player(self, store: PlayerStore, player_id: str) -> OperationResult:
        original = list(self.players)
        self.players = [p for p in self.players if p.id != player_id]

        result = store.delete(player_id)
        if not result.success:
            self.players = original
            logger.error("Could not delete player %s: %s", player_id, result.error)
        return result

    def toggle_presence(self, store: PlayerStore, player_id: str) -> OperationResult:
        """
        Flip a player's check-in flag.

        The flip is applied locally before the store call and undone if the
        store rejects it.

        Returns:
            OperationResult holding the player with the new flag
        """
        player = self.get(player_id)
        if player is None:
            return OperationResult.failure(ErrorKind.VALIDATION_FAILURE, f"Player not found: {player_id}")

        new_presence = not player.present
        player.present = new_presence

        result = store.set_presence(player_id, new_presence)
        if not result.success:
            player.present = not new_presence
            logger.error("Could not save presence change for %s: %s", player.name, result.error)
            return result

        return OperationResult.ok(player)

    def reset_presence(self, store: PlayerStore) -> OperationResult:
        result = store.reset_all_presence()
        if not result.success:
            return result

        for player in self.players:
            player.present = False
        logger.info("Presence reset for %d players", len(self.players))
        return result
