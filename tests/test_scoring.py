from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from scoresim.core.state import GameRules, PlayerState
from scoresim.engine.scoring import (
    UpdateOutcome,
    apply_update,
    calculate_bonus,
    describe_outcome,
)
from tests.test_utils import ScriptedGame, solo_roster

RULES = GameRules()


@pytest.mark.parametrize(
    ("score", "bonus"),
    [
        (49, 0),
        (50, 10),
        (59, 10),
        (60, 0),  # gap between the band and the high tier
        (99, 0),
        (100, 15),
        (250, 15),
    ],
)
def test_bonus_tiers(score: int, bonus: int):
    assert calculate_bonus(score, RULES) == bonus


def test_penalty_clamps_at_zero():
    rng = MagicMock()
    rng.random.return_value = 0.0
    rng.randint.return_value = 5
    player = PlayerState(0, "Alpha", score=3)

    outcome = apply_update(player, rng, RULES)

    assert outcome == UpdateOutcome("penalty", 5, 0, 0)
    assert player.score == 0
    assert player.penalties == 1
    assert player.total_attempts == 1
    assert player.successful_scores == 0
    rng.randint.assert_called_once_with(1, 5)


def test_gain_draws_from_zero_to_nine():
    rng = MagicMock()
    rng.random.return_value = 0.5
    rng.randint.return_value = 7
    player = PlayerState(0, "Alpha")

    outcome = apply_update(player, rng, RULES)

    rng.randint.assert_called_once_with(0, 9)
    assert outcome.kind == "score"
    assert player.score == 7
    assert player.avg_score == 7.0


def test_penalty_roll_boundary():
    """A roll of exactly 15% is not a penalty."""
    rng = MagicMock()
    rng.random.return_value = 0.15
    rng.randint.return_value = 1
    player = PlayerState(0, "Alpha")

    outcome = apply_update(player, rng, RULES)

    assert outcome.kind == "score"


def test_bonus_awarded_once_when_entering_band(scripted: Callable[..., ScriptedGame]):
    """
    Scenario: no penalties, every gain is 9, one player.
    9, 18, 27, 36, 45 -> the sixth gain lands on 54, inside [50, 60),
    which adds the flat 10 bonus exactly once.
    """
    game = scripted(solo_roster(), gains=9)
    game.start()

    for _ in range(5):
        assert game.step()
    assert game.get_player(0).score == 45
    assert game.get_player(0).bonuses == 0

    assert game.step()
    player = game.get_player(0)
    assert player.score == 54 + 10
    assert player.bonuses == 1
    assert game.engine.logs.entries()[-1].category == "bonus"
    assert game.engine.logs.entries()[-1].message == (
        "BONUS EARNED - Player Alpha: +10 points (Total: 64)"
    )

    # 73 lands in the gap: plain score update, no second bonus
    assert game.step()
    assert player.score == 73
    assert player.bonuses == 1
    assert game.engine.logs.entries()[-1].category == "score"


def test_high_tier_bonus(scripted: Callable[..., ScriptedGame]):
    game = scripted(solo_roster(), gains=9)
    game.start()
    while game.step():
        pass

    # 64 -> 73 -> 82 -> 91 -> 100 (+15)
    player = game.get_player(0)
    assert player.score == 115
    assert player.bonuses == 2
    assert player.successful_scores == 10


def test_penalty_clamp_holds_over_updates(scripted: Callable[..., ScriptedGame]):
    game = scripted(solo_roster())
    game.always_penalty()
    game.set_randint(5)
    game.start()
    game.get_player(0).score = 3

    assert game.step()
    assert game.get_player(0).score == 0
    assert game.engine.logs.entries()[-1].message == (
        "PENALTY - Player Alpha: -5 points (Total: 0)"
    )

    assert game.step()
    assert game.get_player(0).score == 0
    assert game.get_player(0).penalties == 2
    assert game.get_player(0).avg_score == 0.0


def test_describe_plain_score():
    player = PlayerState(2, "Gamma", score=12)
    text = describe_outcome(player, UpdateOutcome("score", 4, 0, 12))
    assert text == "SCORE UPDATE - Player Gamma: +4 points (Total: 12)"
