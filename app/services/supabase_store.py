"""
Supabase-backed stores for the League Night Operations system.
Players live in the `players` table, the published snapshot in `published_data`.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from supabase import create_client, Client
from supabase.client import ClientOptions

from app.models import Player, ErrorKind, OperationResult
from app.services.stores import PlayerStore, SnapshotStore
from app.core.config import (
    SUPABASE_URL, SUPABASE_ANON_KEY, STORE_TIMEOUT_SECONDS,
    PLAYERS_TABLE, SNAPSHOT_TABLE
)
from app.core.logging_config import get_logger

logger = get_logger(__name__)


def create_supabase_client(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    url = url or SUPABASE_URL
    key = key or SUPABASE_ANON_KEY
    if not url or not key:
        raise ValueError(
            "Supabase credentials not found. Please set SUPABASE_URL and SUPABASE_ANON_KEY."
        )
    options = ClientOptions(postgrest_client_timeout=STORE_TIMEOUT_SECONDS)
    return create_client(url, key, options=options)


def _store_failure(action: str, error: Exception) -> OperationResult:
    logger.error("Error %s: %s", action, error)
    return OperationResult.failure(ErrorKind.STORE_FAILURE, f"Failed {action}: {error}")


class SupabasePlayerStore(PlayerStore):
    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client or create_supabase_client()

    def list_players(self) -> OperationResult:
        try:
            response = self.client.table(PLAYERS_TABLE).select('*').execute()
            players = []
            for row in response.data:
                try:
                    players.append(Player.from_dict(row))
                except (KeyError, ValueError) as e:
                    logger.warning("Skipping malformed player row %s: %s", row.get('id'), e)

            logger.info("Loaded %d players from Supabase", len(players))
            return OperationResult.ok(players)

        except Exception as e:
            return _store_failure("loading players", e)

    def insert(self, player: Player) -> OperationResult:
        row = player.to_dict()
        if not row["id"]:
            # Let the database assign the id
            del row["id"]
        try:
            response = self.client.table(PLAYERS_TABLE).insert(row).execute()
            return OperationResult.ok(Player.from_dict(response.data[0]))
        except Exception as e:
            return _store_failure("adding player", e)

    def update(self, player: Player) -> OperationResult:
        row = player.to_dict()
        del row["id"]
        try:
            self.client.table(PLAYERS_TABLE).update(row).eq('id', player.id).execute()
            return OperationResult.ok(player)
        except Exception as e:
            return _store_failure("updating player", e)

    def delete(self, player_id: str) -> OperationResult:
        try:
            self.client.table(PLAYERS_TABLE).delete().eq('id', player_id).execute()
            return OperationResult.ok()
        except Exception as e:
            return _store_failure("deleting player", e)

    def set_presence(self, player_id: str, present: bool) -> OperationResult:
        try:
            self.client.table(PLAYERS_TABLE).update({'present': present}).eq('id', player_id).execute()
            return OperationResult.ok()
        except Exception as e:
            return _store_failure("updating player presence", e)

    def reset_all_presence(self) -> OperationResult:
        try:
            # PostgREST refuses an unfiltered update; match every row still marked present
            self.client.table(PLAYERS_TABLE).update({'present': False}).eq('present', True).execute()
            return OperationResult.ok()
        except Exception as e:
            return _store_failure("resetting presence", e)


class SupabaseSnapshotStore(SnapshotStore):
    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client or create_supabase_client()

    def upsert_snapshot(self, row: Dict[str, Any]) -> OperationResult:
        payload = dict(row)
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            self.client.table(SNAPSHOT_TABLE).upsert(payload).execute()
            return OperationResult.ok()
        except Exception as e:
            return _store_failure("publishing data", e)

    def get_latest_snapshot(self) -> OperationResult:
        try:
            response = (
                self.client.table(SNAPSHOT_TABLE)
                .select('*')
                .order('updated_at', desc=True)
                .limit(1)
                .execute()
            )
            if not response.data:
                return OperationResult.ok(None)
            return OperationResult.ok(response.data[0])
        except Exception as e:
            return _store_failure("retrieving published data", e)
