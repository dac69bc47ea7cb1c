from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import random

    from scoresim.core.state import GameRules, PlayerState
    from scoresim.core.types import OutcomeKind


@dataclass(frozen=True, slots=True)
class UpdateOutcome:
    """What a single scoring update did to a player."""

    kind: OutcomeKind
    points: int  # penalty size (positive) or raw gain
    bonus: int
    new_score: int


def calculate_bonus(score: int, rules: GameRules) -> int:
    """
    Flat bonus for a freshly gained score.

    The band [threshold, threshold + band) is checked before the high tier, so
    scores between the band and twice the threshold get nothing.
    """
    if rules.bonus_threshold <= score < rules.bonus_threshold + rules.bonus_band:
        return rules.bonus_band_points
    elif score >= rules.bonus_threshold * 2:
        return rules.high_bonus_points
    return 0


def roll_penalty(rng: random.Random, rules: GameRules) -> bool:
    return rng.random() * 100 < rules.penalty_chance


def apply_update(
    player: PlayerState,
    rng: random.Random,
    rules: GameRules,
) -> UpdateOutcome:
    """
    Apply one randomized update to `player` in place.

    Draw order is fixed: penalty roll, then either the penalty size or the
    gain. Scripted rngs rely on this.
    """
    player.total_attempts += 1

    if roll_penalty(rng, rules):
        penalty = rng.randint(rules.penalty_min, rules.penalty_max)
        player.score = max(0, player.score - penalty)
        player.penalties += 1
        outcome = UpdateOutcome("penalty", penalty, 0, player.score)
    else:
        gain = rng.randint(rules.gain_min, rules.gain_max)
        player.score += gain
        player.successful_scores += 1

        bonus = calculate_bonus(player.score, rules)
        if bonus > 0:
            player.score += bonus
            player.bonuses += 1
            outcome = UpdateOutcome("bonus", gain, bonus, player.score)
        else:
            outcome = UpdateOutcome("score", gain, 0, player.score)

    player.recompute_average()
    return outcome


def describe_outcome(player: PlayerState, outcome: UpdateOutcome) -> str:
    match outcome.kind:
        case "penalty":
            return (
                f"PENALTY - Player {player.name}: -{outcome.points} points "
                f"(Total: {outcome.new_score})"
            )
        case "bonus":
            return (
                f"BONUS EARNED - Player {player.name}: +{outcome.bonus} points "
                f"(Total: {outcome.new_score})"
            )
        case _:
            return (
                f"SCORE UPDATE - Player {player.name}: +{outcome.points} points "
                f"(Total: {outcome.new_score})"
            )
