"""
Rule and power-up text for the King-of-the-Court variants.

The generator is an outside collaborator; team and schedule generation
never wait on it. A failure here is reported and the night goes on.
"""

import random
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

from app.models import Rule, GameVariant, ErrorKind, OperationResult
from app.core.logging_config import get_logger

logger = get_logger(__name__)


class RuleKind(Enum):
    POWER_UP = "power-up"
    SCRAMBLE = "scramble"


VARIANT_RULE_KINDS = {
    GameVariant.POWER_UP_ROUND: RuleKind.POWER_UP,
    GameVariant.KINGS_RANSOM: RuleKind.SCRAMBLE,
}

POWER_UPS = [
    Rule("Point Boost", "Start the next game with a 2-point lead."),
    Rule("Serve Advantage", 'Get one "do-over" on a missed serve during the next match.'),
    Rule("The Equalizer", "The opponent's highest-skilled player must serve underhand for the entire game."),
    Rule("Secret Weapon", "Choose one player on your team; their points are worth double for the first 5 points of the game."),
    Rule("Triple Threat", "For the next three serves, your team's serves cannot be returned over the net on the first touch."),
    Rule("Gender Bender", "The next point must be scored by a player of the opposite gender of the person who just scored."),
    Rule("One-Handed Wonder", "One player on the opposing team must play with one hand behind their back for the next rally."),
    Rule("Rally Stopper", "Your team can choose to end a rally and replay the point, once per game."),
    Rule("Ace In The Hole", "If your team serves an ace, you get 3 points instead of 1."),
    Rule("The Wall", "For the next rally, your team's blocks are worth 2 points."),
    Rule("Butterfingers", "The opposing team is not allowed to set the ball for the next two rallies (must bump-set)."),
    Rule("Vampire", "Steal one point from the opposing team and add it to your score."),
    Rule("Frozen", "Pick a player on the other team. They cannot jump for the next rally."),
    Rule("Mimic", "For the next rally, the opposing team must mimic your team's formation."),
    Rule("Double Trouble", "For the next rally, your team is allowed to have two contacts in a row by the same player."),
    Rule("Low Ceiling", "For the next rally, the opposing team is not allowed to send the ball over the net above the height of the antennae."),
    Rule("Friendly Fire", "Your team can get a point if the opposing team has a miscommunication and two players run into each other."),
    Rule("Serve Swap", "You may force any player on the opposing team to serve for the next point."),
    Rule("Golden Touch", 'For the next rally, any point scored by your designated "golden" player is worth 3 points.'),
]

SCRAMBLE_RULES = [
    Rule("Birthday Swap", "The two players (one from each team) whose birthday is closest to today must swap teams."),
    Rule("Alphabetical Swap", "The player whose first name comes last alphabetically on the losing team swaps with the player whose first name comes last alphabetically on the other team."),
    Rule("Brightest Shirt Swap", "Of all the players on both teams, the two wearing the brightest color shirts must swap."),
    Rule("Sibling Swap", "The player with the most siblings on the losing team swaps places with the player with the most siblings on the other team."),
    Rule("Traveler Swap", "The two players (one from each team) who traveled the farthest to get to the tournament must swap teams."),
    Rule("Longest Last Name Swap", "The player with the most letters in their last name on the losing team swaps with the player with the most letters in their last name on the other team."),
    Rule("Newest Shoes Swap", "The two players (one from each team) with the newest-looking shoes must swap."),
    Rule("Concert Goer Swap", "The player who most recently went to a concert on the losing team swaps with the player who most recently went to a concert on the other team."),
    Rule("Longest Hair Swap", "The two players (one from each team) with the longest hair must swap."),
    Rule("Most Vowels Swap", "The player with the most vowels in their first name on the losing team swaps with the player with the most vowels in their first name on the other team."),
    Rule("Car Brand Swap", "The two players (one from each team) who own the same brand of car must swap."),
    Rule("Early Bird Swap", "The player who woke up the earliest this morning on the losing team swaps places with the player who woke up the earliest on the other team."),
    Rule("Tallest Swap", "The two players (one from each team) who are the tallest must swap."),
    Rule("Restaurant Swap", "The player who last ate at a restaurant on the losing team swaps with the player who last ate at a restaurant on the other team."),
    Rule("Pet Swap", "The two players (one from each team) with the most unique or unusual pet must swap."),
    Rule("Volleyball Veteran Swap", "The player who has been playing volleyball for the longest number of years on the losing team swaps with their counterpart on the other team."),
    Rule("Blue Clothing Swap", "The two players (one from each team) with the most blue on their clothing must swap."),
    Rule("Language Swap", "The player who can speak another language on the losing team swaps with the player who can speak another language on the other team (if one exists on both teams)."),
    Rule("Birth Month Swap", "The two players (one from each team) who share the same birth month must swap (if applicable)."),
    Rule("Movie Goer Swap", "The player who last watched a movie in a theater on the losing team swaps places with the player who last did the same on the other team."),
]


class RuleTextGenerator(ABC):
    @abstractmethod
    def generate(self, kind: RuleKind, hint: Optional[str] = None) -> List[Rule]:
        raise NotImplementedError


class CatalogRuleGenerator(RuleTextGenerator):
    """Serves rules from the league's built-in catalogues."""

    CATALOGUES = {
        RuleKind.POWER_UP: POWER_UPS,
        RuleKind.SCRAMBLE: SCRAMBLE_RULES,
    }

    def generate(self, kind: RuleKind, hint: Optional[str] = None) -> List[Rule]:
        rules = list(self.CATALOGUES[kind])
        if hint:
            needle = hint.lower()
            matching = [
                r for r in rules
                if needle in r.name.lower() or needle in r.description.lower()
            ]
            # A hint that matches nothing still yields the whole catalogue
            if matching:
                return matching
        return rules


def rule_kind_for_variant(variant: GameVariant) -> Optional[RuleKind]:
    return VARIANT_RULE_KINDS.get(variant)


def pick_rule(generator: RuleTextGenerator, kind: RuleKind, hint: Optional[str] = None,
              rng: Optional[random.Random] = None, previous: Optional[Rule] = None) -> OperationResult:
    """
    Ask the generator for candidates and pick one uniformly at random.

    Avoids handing back the previous rule when anything else is on offer.

    Returns:
        OperationResult holding the chosen Rule, or a GenerationFailure
    """
    rng = rng or random.Random()
    try:
        candidates = generator.generate(kind, hint)
    except Exception as e:
        logger.error("Rule generation failed for %s: %s", kind.value, e)
        return OperationResult.failure(ErrorKind.GENERATION_FAILURE, f"Rule generation failed: {e}")

    if not candidates:
        return OperationResult.failure(
            ErrorKind.GENERATION_FAILURE, f"No {kind.value} rules were generated"
        )

    if previous is not None and len(candidates) > 1:
        candidates = [r for r in candidates if r.name != previous.name] or candidates

    rule = rng.choice(candidates)
    logger.info('"%s" is now the active rule', rule.name)
    return OperationResult.ok(rule)
