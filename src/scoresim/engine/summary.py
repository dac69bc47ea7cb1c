from __future__ import annotations

from typing import TYPE_CHECKING

import msgspec

from scoresim.core.state import PlayerSnapshot

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scoresim.core.state import PlayerState


class LiveStats(msgspec.Struct, frozen=True):
    total_score: int
    mean_score: float
    max_score: int
    min_score: int


class GameSummary(msgspec.Struct, frozen=True):
    """Final standings of one finished game."""

    ranking: tuple[PlayerSnapshot, ...]
    winner: PlayerSnapshot | None
    total_score: int
    mean_score: float
    max_score: int
    min_score: int
    duration: float  # seconds

    @property
    def winner_name(self) -> str:
        return self.winner.name if self.winner is not None else "N/A"


def _as_snapshots(
    players: Iterable[PlayerState | PlayerSnapshot],
) -> list[PlayerSnapshot]:
    return [p if isinstance(p, PlayerSnapshot) else p.snapshot() for p in players]


def rank_players(
    players: Iterable[PlayerState | PlayerSnapshot],
) -> tuple[PlayerSnapshot, ...]:
    """Descending score. Ties keep roster order (sorted() is stable)."""
    return tuple(sorted(_as_snapshots(players), key=lambda p: -p.score))


def progress_percent(current: int, maximum: int) -> float:
    if maximum <= 0:
        return 0.0
    return current / maximum * 100


def compute_live_stats(players: Iterable[PlayerState | PlayerSnapshot]) -> LiveStats:
    scores = [p.score for p in _as_snapshots(players)]
    if not scores:
        return LiveStats(total_score=0, mean_score=0.0, max_score=0, min_score=0)
    total = sum(scores)
    return LiveStats(
        total_score=total,
        mean_score=total / len(scores),
        max_score=max(scores),
        min_score=min(scores),
    )


def compute_summary(
    players: Iterable[PlayerState | PlayerSnapshot],
    start_time: float | None,
    end_time: float | None,
) -> GameSummary:
    ranking = rank_players(players)
    stats = compute_live_stats(ranking)
    duration = (
        end_time - start_time
        if start_time is not None and end_time is not None
        else 0.0
    )
    return GameSummary(
        ranking=ranking,
        winner=ranking[0] if ranking else None,
        total_score=stats.total_score,
        mean_score=stats.mean_score,
        max_score=stats.max_score,
        min_score=stats.min_score,
        duration=duration,
    )
