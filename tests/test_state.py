import pytest

from scoresim.core.palettes import get_player_color
from scoresim.core.state import GameRules, LogBuffer, LogEntry, PlayerState


def test_log_buffer_keeps_most_recent_fifty_in_order():
    buffer = LogBuffer(capacity=50)
    for i in range(60):
        buffer.append(LogEntry(timestamp=float(i), message=f"entry {i}"))

    assert len(buffer) == 50
    assert [e.message for e in buffer.entries()] == [f"entry {i}" for i in range(10, 60)]
    assert buffer.newest_first()[0].message == "entry 59"
    assert buffer.newest_first()[-1].message == "entry 10"


def test_log_buffer_clear():
    buffer = LogBuffer()
    buffer.append(LogEntry(0.0, "hello", "start"))
    buffer.clear()
    assert len(buffer) == 0
    assert buffer.newest_first() == ()


def test_log_buffer_rejects_zero_capacity():
    with pytest.raises(ValueError, match="capacity"):
        LogBuffer(capacity=0)


def test_player_derived_values():
    player = PlayerState(1, "Beta", score=30, total_attempts=4, successful_scores=3, penalties=1)
    player.recompute_average()

    assert player.avg_score == 7.5
    assert player.success_rate == 75.0
    assert player.repr == "1:Beta"

    snap = player.snapshot()
    assert snap.success_rate == 75.0
    assert snap.name == "Beta"

    player.reset()
    assert player.avg_score == 0.0
    assert player.success_rate == 0.0
    # Snapshots are copies
    assert snap.score == 30


def test_default_rules():
    rules = GameRules()
    assert rules.max_updates == 40
    assert rules.penalty_chance == 15
    assert (rules.min_interval, rules.max_interval) == (0.5, 1.5)
    assert rules.log_capacity == 50


def test_player_colors():
    assert get_player_color("Alpha") == "#3b82f6"
    assert get_player_color("Delta") == "#f97316"
    assert get_player_color("Omega").startswith("#")
