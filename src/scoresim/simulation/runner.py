"""Core simulation execution logic."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import msgspec

from scoresim.engine.scenario import GameScenario

if TYPE_CHECKING:
    from scoresim.engine.summary import GameSummary
    from scoresim.simulation.config import GameConfig


class PlayerResult(msgspec.Struct, array_like=True, gc=False):
    """One player's line in one finished game."""

    config_hash: str
    seed: int
    player_idx: int
    player_name: str
    rank: int
    final_score: int
    successful_scores: int
    penalties: int
    bonuses: int

    @property
    def won(self) -> bool:
        return self.rank == 1


@dataclass(slots=True)
class SimulationResult:
    """Result of a single simulated game."""

    config_hash: str
    seed: int
    timestamp: float
    execution_time_ms: float
    summary: GameSummary
    metrics: list[PlayerResult]


def run_single_simulation(config: GameConfig) -> SimulationResult:
    """
    Play one game to completion on a virtual clock.

    Intervals are still drawn from the seeded rng, so the simulated duration
    matches what a live game with the same seed would report.
    """
    start_time = time.perf_counter()
    timestamp = time.time()
    config_hash = config.compute_hash()

    scenario = GameScenario(seed=config.seed, verbose=False)
    summary = scenario.run_to_completion()

    metrics = [
        PlayerResult(
            config_hash=config_hash,
            seed=config.seed,
            player_idx=p.idx,
            player_name=p.name,
            rank=rank,
            final_score=p.score,
            successful_scores=p.successful_scores,
            penalties=p.penalties,
            bonuses=p.bonuses,
        )
        for rank, p in enumerate(summary.ranking, start=1)
    ]

    execution_time_ms = (time.perf_counter() - start_time) * 1000
    return SimulationResult(
        config_hash=config_hash,
        seed=config.seed,
        timestamp=timestamp,
        execution_time_ms=execution_time_ms,
        summary=summary,
        metrics=metrics,
    )
