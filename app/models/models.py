"""
Data models for the League Night Operations system.
Defines all data structures used throughout the application.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum

from app.core.config import DEFAULT_POINTS_TO_WIN, DEFAULT_FETCH_FORMAT


class Gender(Enum):
    GUY = "Guy"
    GAL = "Gal"

class GameFormat(Enum):
    ROUND_ROBIN = "round-robin"
    POOL_PLAY_BRACKET = "pool-play-bracket"
    LEVEL_UP = "level-up"
    KING_OF_THE_COURT = "king-of-the-court"
    BLIND_DRAW = "blind-draw"

class GameVariant(Enum):
    STANDARD = "standard"
    MONARCH_OF_THE_COURT = "monarch-of-the-court"
    KINGS_RANSOM = "king-s-ransom"
    POWER_UP_ROUND = "power-up-round"

class BalanceStrategy(Enum):
    SNAKE_DRAFT = "snake-draft"
    ROUND_DRAFT = "round-draft"

class MatchSide(Enum):
    A = "A"
    B = "B"

class ErrorKind(Enum):
    INSUFFICIENT_PLAYERS = "InsufficientPlayers"
    INSUFFICIENT_TEAMS = "InsufficientTeams"
    STORE_FAILURE = "StoreFailure"
    VALIDATION_FAILURE = "ValidationFailure"
    GENERATION_FAILURE = "GenerationFailure"


@dataclass
class Player:
    id: str
    name: str
    gender: Gender
    skill: int
    present: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "gender": self.gender.value,
            "skill": self.skill,
            "present": self.present,
        }

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "Player":
        return cls(
            id=str(row["id"]),
            name=row["name"],
            gender=Gender(row["gender"]),
            skill=int(row["skill"]),
            present=bool(row.get("present", False)),
        )


@dataclass
class Team:
    """
    A point-in-time partition of players.

    Players are copies taken when the team was generated, so later roster
    edits (presence toggles, skill changes) never reach an existing team.
    """
    name: str
    players: List[Player] = field(default_factory=list)

    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "players": [p.to_dict() for p in self.players]}

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "Team":
        return cls(
            name=row["name"],
            players=[Player.from_dict(p) for p in row.get("players") or []],
        )


@dataclass
class Match:
    id: str
    team_a: str
    team_b: str
    court: str = ""
    result_a: Optional[int] = None
    result_b: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.result_a is not None and self.result_b is not None

    def involves(self, label: str) -> bool:
        return self.team_a == label or self.team_b == label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "team_a": self.team_a,
            "team_b": self.team_b,
            "result_a": self.result_a,
            "result_b": self.result_b,
            "court": self.court,
        }

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "Match":
        return cls(
            id=str(row["id"]),
            team_a=row["team_a"],
            team_b=row["team_b"],
            court=row.get("court") or "",
            result_a=row.get("result_a"),
            result_b=row.get("result_b"),
        )


@dataclass
class FormatSelection:
    """
    The format chosen for the night plus its King-of-the-Court variant.

    Only the snapshot collapses the pair into one string: a non-standard
    KOTC variant is stored under its own name, anything else under the
    format name.
    """
    format: GameFormat = GameFormat.KING_OF_THE_COURT
    variant: GameVariant = GameVariant.STANDARD

    @property
    def is_kotc(self) -> bool:
        return self.format == GameFormat.KING_OF_THE_COURT

    def to_wire(self) -> str:
        if self.is_kotc and self.variant != GameVariant.STANDARD:
            return self.variant.value
        return self.format.value

    @classmethod
    def from_wire(cls, value: str) -> "FormatSelection":
        for variant in GameVariant:
            if variant.value == value:
                return cls(GameFormat.KING_OF_THE_COURT, variant)
        for game_format in GameFormat:
            if game_format.value == value:
                return cls(game_format, GameVariant.STANDARD)
        raise ValueError(f"Unknown game format: {value!r}")


@dataclass
class Rule:
    name: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description}

    @classmethod
    def from_dict(cls, row: Optional[Dict[str, Any]]) -> Optional["Rule"]:
        if not row:
            return None
        return cls(name=row["name"], description=row.get("description", ""))


@dataclass
class PublishedSnapshot:
    teams: List[Team] = field(default_factory=list)
    format: str = DEFAULT_FETCH_FORMAT
    schedule: List[Match] = field(default_factory=list)
    active_rule: Optional[Rule] = None
    points_to_win: int = DEFAULT_POINTS_TO_WIN

    @property
    def selection(self) -> FormatSelection:
        return FormatSelection.from_wire(self.format)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "teams": [t.to_dict() for t in self.teams],
            "format": self.format,
            "schedule": [m.to_dict() for m in self.schedule],
            "active_rule": self.active_rule.to_dict() if self.active_rule else None,
            "points_to_win": self.points_to_win,
        }


@dataclass
class OperationResult:
    """Outcome of a core operation: a success flag plus data or an error description."""
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "OperationResult":
        return cls(success=False, error=message, error_kind=kind)


@dataclass
class TeamSummary:
    name: str
    size: int
    avg_skill: float
    avg_adjusted_skill: float
    guy_count: int
    gal_count: int
