import os
import random
import sys
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.api.routes import get_league_night
from app.main import app
from app.models import Player, Gender
from app.services.league_night import LeagueNight
from app.services.stores import InMemoryPlayerStore, InMemorySnapshotStore


def make_player(pid, gender, skill, present=True, name=None):
    return Player(id=pid, name=name or pid, gender=gender, skill=skill, present=present)


def make_roster(count, present=True):
    """Alternating guys and gals with skills cycling 1..10."""
    return [
        make_player(
            f"p{i:02d}",
            Gender.GUY if i % 2 == 0 else Gender.GAL,
            (i * 7) % 10 + 1,
            present=present,
        )
        for i in range(count)
    ]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scenario_players():
    """Four guys at 9/7/5/3 and four gals at 8/6/4/2."""
    guys = [make_player(f"guy{s}", Gender.GUY, s) for s in (9, 7, 5, 3)]
    gals = [make_player(f"gal{s}", Gender.GAL, s) for s in (8, 6, 4, 2)]
    return guys + gals


@pytest.fixture
def player_store():
    return InMemoryPlayerStore(make_roster(12))


@pytest.fixture
def snapshot_store():
    return InMemorySnapshotStore()


@pytest.fixture
def night(player_store, snapshot_store):
    league_night = LeagueNight(player_store, snapshot_store, rng=random.Random(99))
    league_night.load()
    return league_night


@pytest.fixture
def client(night):
    """Test client bound to an in-memory league night."""
    app.dependency_overrides[get_league_night] = lambda: night
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class FakeQuery:
    """Just enough of the postgrest query builder for the store adapters."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self.order_key = None
        self.order_desc = False
        self.row_limit = None

    def select(self, *_columns):
        self.action = "select"
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def upsert(self, payload):
        self.action, self.payload = "upsert", payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_key, self.order_desc = column, desc
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.client.calls.append((self.table, self.action))
        if self.client.fail:
            raise RuntimeError("connection refused")

        rows = self.client.tables.setdefault(self.table, [])
        if self.action == "insert":
            row = dict(self.payload)
            row.setdefault("id", f"db-{len(rows) + 1}")
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])
        if self.action == "upsert":
            row = dict(self.payload)
            for existing in rows:
                if existing["id"] == row["id"]:
                    existing.update(row)
                    return SimpleNamespace(data=[dict(existing)])
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])
        if self.action == "update":
            matched = [r for r in rows if self._matches(r)]
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched])
        if self.action == "delete":
            matched = [r for r in rows if self._matches(r)]
            self.client.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=matched)

        selected = [dict(r) for r in rows if self._matches(r)]
        if self.order_key:
            selected.sort(key=lambda r: r.get(self.order_key) or "", reverse=self.order_desc)
        if self.row_limit is not None:
            selected = selected[:self.row_limit]
        return SimpleNamespace(data=selected)


class FakeSupabaseClient:
    def __init__(self, tables=None, fail=False):
        self.tables = tables or {}
        self.fail = fail
        self.calls = []

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase():
    return FakeSupabaseClient()
