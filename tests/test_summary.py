import msgspec
import pytest

from scoresim.core.state import PlayerSnapshot, PlayerState
from scoresim.engine.summary import (
    GameSummary,
    compute_live_stats,
    compute_summary,
    progress_percent,
    rank_players,
)


def make_players(scores: list[int]) -> list[PlayerState]:
    names = ["Alpha", "Beta", "Gamma", "Delta"]
    return [PlayerState(i, names[i], score=s) for i, s in enumerate(scores)]


def test_ranking_is_descending_and_stable_on_ties():
    ranking = rank_players(make_players([10, 20, 10, 20]))
    assert [p.idx for p in ranking] == [1, 3, 0, 2]


def test_summary_aggregates():
    summary = compute_summary(make_players([12, 40, 7, 21]), start_time=3.0, end_time=45.5)

    assert summary.winner is not None
    assert summary.winner.name == "Beta"
    assert summary.winner_name == "Beta"
    assert summary.total_score == 80
    assert summary.mean_score == 20.0
    assert summary.max_score == 40
    assert summary.min_score == 7
    assert summary.duration == pytest.approx(42.5)
    assert [p.score for p in summary.ranking] == [40, 21, 12, 7]


def test_summary_is_immutable():
    summary = compute_summary(make_players([1, 2, 3, 4]), 0.0, 1.0)
    with pytest.raises(AttributeError):
        summary.total_score = 0  # pyright: ignore[reportAttributeAccessIssue]


def test_summary_without_timestamps_has_zero_duration():
    summary = compute_summary(make_players([5]), None, None)
    assert summary.duration == 0.0


def test_empty_summary():
    summary = compute_summary([], 0.0, 0.0)
    assert summary.winner is None
    assert summary.winner_name == "N/A"
    assert summary.ranking == ()
    assert (summary.max_score, summary.min_score) == (0, 0)


def test_live_stats_accept_snapshots():
    snaps = [p.snapshot() for p in make_players([3, 9])]
    assert all(isinstance(s, PlayerSnapshot) for s in snaps)
    stats = compute_live_stats(snaps)
    assert stats.total_score == 12
    assert stats.mean_score == 6.0
    assert (stats.max_score, stats.min_score) == (9, 3)


def test_summary_json_encoding():
    summary = compute_summary(make_players([8, 4]), 0.0, 2.0)
    decoded = msgspec.json.decode(msgspec.json.encode(summary), type=GameSummary)
    assert decoded == summary


@pytest.mark.parametrize(
    ("current", "maximum", "percent"),
    [(0, 40, 0.0), (10, 40, 25.0), (40, 40, 100.0), (0, 0, 0.0)],
)
def test_progress_percent(current: int, maximum: int, percent: float):
    assert progress_percent(current, maximum) == pytest.approx(percent)
