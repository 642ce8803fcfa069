"""
Data models for the league night system.
"""

from .models import (
    Gender,
    GameFormat,
    GameVariant,
    BalanceStrategy,
    MatchSide,
    ErrorKind,
    Player,
    Team,
    Match,
    FormatSelection,
    Rule,
    PublishedSnapshot,
    OperationResult,
    TeamSummary
)

__all__ = [
    "Gender",
    "GameFormat",
    "GameVariant",
    "BalanceStrategy",
    "MatchSide",
    "ErrorKind",
    "Player",
    "Team",
    "Match",
    "FormatSelection",
    "Rule",
    "PublishedSnapshot",
    "OperationResult",
    "TeamSummary"
]
